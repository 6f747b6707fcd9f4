"""Team service: explicit team creation and membership management.

Only the owning Admin manages a team. Membership changes take effect
immediately for authorization, since the resolver never caches.

A member who is still assigned tasks in the team cannot be removed, and
a team that still has tasks cannot be deleted: either change would leave
tasks whose assignee is no longer present in their team.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from structlog import get_logger

from teamtasks.application.ports.task_repository import TaskRepositoryProtocol
from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.application.ports.transaction import TransactionManagerProtocol
from teamtasks.application.ports.user_repository import UserRepositoryProtocol
from teamtasks.application.services.access_policy import AccessPolicy
from teamtasks.application.services.membership_resolver import MembershipResolver
from teamtasks.domain.errors import (
    MemberHasTeamTasksError,
    TeamAccessDeniedError,
    TeamHasTasksError,
    TeamManagementForbiddenError,
    TeamNotFoundError,
    TeamTasksError,
    TeamValidationError,
    UserNotFoundError,
)
from teamtasks.domain.models.team import Team
from teamtasks.domain.models.user import Actor

logger = get_logger(__name__)


class TeamService:
    """Creates, reads, and manages teams."""

    def __init__(
        self,
        team_repo: TeamRepositoryProtocol,
        user_repo: UserRepositoryProtocol,
        task_repo: TaskRepositoryProtocol,
        access_policy: AccessPolicy,
        resolver: MembershipResolver,
        transactions: TransactionManagerProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._teams = team_repo
        self._users = user_repo
        self._tasks = task_repo
        self._policy = access_policy
        self._resolver = resolver
        self._transactions = transactions
        self._time = time_authority

    async def _load_managed(self, actor: Actor, team_id: UUID, action: str) -> Team:
        team = await self._teams.get(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        decision = self._policy.decide_manage_team(actor, team)
        if not decision:
            self._policy.log_denial(actor, action, decision)
            raise TeamManagementForbiddenError(actor.id, team_id, action.replace("_", " "))
        return team

    async def _require_user(self, user_id: UUID) -> None:
        if await self._users.get(user_id) is None:
            raise UserNotFoundError(user_id)

    async def create_team(
        self,
        actor: Actor,
        name: str,
        description: str | None = None,
        member_ids: Iterable[UUID] = (),
    ) -> Team:
        """Create a team owned by the acting Admin.

        The owner is not added as a member unless listed in member_ids.

        Raises:
            TeamManagementForbiddenError: The actor is not an Admin.
            TeamValidationError: The name is blank.
            UserNotFoundError: A listed member does not exist.
        """
        log = logger.bind(actor_id=str(actor.id), operation="create_team")
        if not actor.is_admin:
            log.warning("team_create_rejected", reason="actor_not_admin")
            raise TeamManagementForbiddenError(actor.id, None, "create teams")
        if not name or not name.strip():
            raise TeamValidationError("Team name is required")

        members = frozenset(member_ids)

        async def work() -> Team:
            for member_id in sorted(members):
                await self._require_user(member_id)
            now = self._time.utcnow()
            team = Team(
                name=name.strip(),
                description=description,
                owner_id=actor.id,
                member_ids=members,
                created_at=now,
                updated_at=now,
            )
            await self._teams.save(team)
            return team

        team = await self._transactions.run(work)
        log.info("team_created", team_id=str(team.id), member_count=len(team.member_ids))
        return team

    async def add_member(self, actor: Actor, team_id: UUID, user_id: UUID) -> Team:
        """Add a user to a team the actor owns. Adding a member twice is a no-op."""
        log = logger.bind(actor_id=str(actor.id), team_id=str(team_id), user_id=str(user_id))

        async def work() -> Team:
            team = await self._load_managed(actor, team_id, "add_member")
            await self._require_user(user_id)
            if team.is_member(user_id):
                return team
            updated = team.with_member(user_id, self._time.utcnow())
            await self._teams.save(updated)
            return updated

        try:
            team = await self._transactions.run(work)
        except TeamTasksError as exc:
            log.warning("member_add_rejected", error=type(exc).__name__)
            raise

        log.info("member_added", member_count=len(team.member_ids))
        return team

    async def remove_member(self, actor: Actor, team_id: UUID, user_id: UUID) -> Team:
        """Remove a user from a team the actor owns.

        Raises:
            MemberHasTeamTasksError: The user still has tasks in the team
                and is not its owner.
        """
        log = logger.bind(actor_id=str(actor.id), team_id=str(team_id), user_id=str(user_id))

        async def work() -> Team:
            team = await self._load_managed(actor, team_id, "remove_member")
            if not team.is_member(user_id):
                return team
            if not team.is_owner(user_id):
                assigned = [
                    task
                    for task in await self._tasks.list_by_team(team_id)
                    if task.assigned_to_id == user_id
                ]
                if assigned:
                    raise MemberHasTeamTasksError(team_id, user_id, len(assigned))
            updated = team.without_member(user_id, self._time.utcnow())
            await self._teams.save(updated)
            return updated

        try:
            team = await self._transactions.run(work)
        except TeamTasksError as exc:
            log.warning("member_remove_rejected", error=type(exc).__name__)
            raise

        log.info("member_removed", member_count=len(team.member_ids))
        return team

    async def delete_team(self, actor: Actor, team_id: UUID) -> None:
        """Delete a team the actor owns.

        Raises:
            TeamHasTasksError: Tasks still reference the team.
        """
        log = logger.bind(actor_id=str(actor.id), team_id=str(team_id), operation="delete_team")

        async def work() -> None:
            await self._load_managed(actor, team_id, "delete_team")
            tasks = await self._tasks.list_by_team(team_id)
            if tasks:
                raise TeamHasTasksError(team_id, len(tasks))
            await self._teams.delete(team_id)

        try:
            await self._transactions.run(work)
        except TeamTasksError as exc:
            log.warning("team_delete_rejected", error=type(exc).__name__)
            raise

        log.info("team_deleted")

    async def get_team(self, actor: Actor, team_id: UUID) -> Team:
        """Load a team the actor owns or belongs to."""
        team = await self._teams.get(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        decision = self._policy.decide_view_team(actor, team)
        if not decision:
            self._policy.log_denial(actor, "view_team", decision)
            raise TeamAccessDeniedError(actor.id, team_id)
        return team

    async def list_teams(self, actor: Actor) -> list[Team]:
        """Teams the actor owns or belongs to, ascending by id."""
        return await self._resolver.teams_for(actor.id)
