"""Task assignment engine: which user and team a task belongs to.

Creation (resolve_for_create):
    1. No assignee -> the actor.
    2. Assignee is the actor -> the explicit team (validated for access)
       or no team (personal task).
    3. Assignee is someone else -> the actor must be an Admin.
       - Explicit team: it must exist, the actor must own it, and the
         assignee must be a member.
       - No team: pick among the teams shared with the assignee that the
         actor owns and the assignee is a member of, lowest id first.
         Nothing shared -> NoSharedTeamError.

Update (resolve_for_update):
    A team move is validated like an explicit team. A changed assignee
    is re-validated against the task's current team (the new one, if the
    same patch moves the task); a task without a team can only be
    reassigned to the actor.

Every failure raises an error carrying the AssignmentPrecondition that
failed. Nothing falls back to a default team or assignee silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from structlog import get_logger

from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.ports.user_repository import UserRepositoryProtocol
from teamtasks.application.services.membership_resolver import (
    MembershipResolver,
    select_lowest,
)
from teamtasks.domain.errors import (
    AssigneeNotFoundError,
    AssigneeNotInTeamError,
    AssignmentForbiddenError,
    AssignmentTeamNotFoundError,
    NoSharedTeamError,
    PersonalTaskReassignmentError,
    TeamAccessDeniedError,
)
from teamtasks.domain.models.task import Task
from teamtasks.domain.models.task_patch import TaskPatch, is_set
from teamtasks.domain.models.team import Team
from teamtasks.domain.models.user import Actor

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssignmentResolution:
    """Resolved owner of a task.

    Attributes:
        assignee_id: The user the task is assigned to.
        team_id: The task's team, or None for a personal task.
        team: The loaded team, when team_id is set.
        auto_selected_team: True when the team came from the shared-team
            search rather than the request.
        shared_team_candidates: Every team the search could have chosen.
    """

    assignee_id: UUID
    team_id: UUID | None
    team: Team | None = None
    auto_selected_team: bool = False
    shared_team_candidates: tuple[UUID, ...] = ()


class TaskAssignmentEngine:
    """Resolves and validates task assignee and team.

    Example:
        >>> engine = TaskAssignmentEngine(resolver, user_repo, team_repo)
        >>> resolution = await engine.resolve_for_create(actor, assignee_id, None)
        >>> resolution.team_id
    """

    def __init__(
        self,
        resolver: MembershipResolver,
        user_repo: UserRepositoryProtocol,
        team_repo: TeamRepositoryProtocol,
    ) -> None:
        """Initialize the engine.

        Args:
            resolver: Membership resolver for shared teams and access.
            user_repo: Repository for assignee lookups.
            team_repo: Repository for team lookups.
        """
        self._resolver = resolver
        self._user_repo = user_repo
        self._team_repo = team_repo

    async def _require_team(self, actor: Actor, team_id: UUID) -> Team:
        """Load a team the actor has access to."""
        team = await self._team_repo.get(team_id)
        if team is None:
            raise AssignmentTeamNotFoundError(team_id)
        if not self._resolver.has_team_access(actor, team):
            raise TeamAccessDeniedError(actor.id, team_id)
        return team

    async def _require_assignee(self, assignee_id: UUID) -> None:
        if await self._user_repo.get(assignee_id) is None:
            raise AssigneeNotFoundError(assignee_id)

    async def resolve_for_create(
        self,
        actor: Actor,
        assignee_id: UUID | None,
        team_id: UUID | None,
    ) -> AssignmentResolution:
        """Resolve assignee and team for a new task.

        Args:
            actor: The creating actor.
            assignee_id: Requested assignee, or None for the actor.
            team_id: Requested team, or None.

        Returns:
            The resolution.

        Raises:
            AssigneeNotFoundError: The assignee does not exist.
            AssignmentTeamNotFoundError: The explicit team does not exist.
            TeamAccessDeniedError: The actor has no access to the team.
            AssignmentForbiddenError: A non-Admin assigns someone else.
            AssigneeNotInTeamError: The assignee is not a team member.
            NoSharedTeamError: No team given and none shared.
        """
        log = logger.bind(
            actor_id=str(actor.id),
            assignee_id=str(assignee_id) if assignee_id else None,
            team_id=str(team_id) if team_id else None,
        )

        target = assignee_id if assignee_id is not None else actor.id

        if target == actor.id:
            if team_id is None:
                return AssignmentResolution(assignee_id=actor.id, team_id=None)
            team = await self._require_team(actor, team_id)
            return AssignmentResolution(assignee_id=actor.id, team_id=team.id, team=team)

        await self._require_assignee(target)

        if not actor.is_admin:
            log.warning("assignment_rejected_not_admin")
            raise AssignmentForbiddenError(actor.id, target)

        if team_id is not None:
            team = await self._require_team(actor, team_id)
            if not team.is_member(target):
                log.warning("assignment_rejected_not_member")
                raise AssigneeNotInTeamError(target, team.id)
            return AssignmentResolution(assignee_id=target, team_id=team.id, team=team)

        return await self._auto_select_team(actor, target)

    async def _auto_select_team(self, actor: Actor, target: UUID) -> AssignmentResolution:
        """Pick the lowest shared team the actor manages and the target belongs to."""
        shared = await self._resolver.shared_team_records(actor.id, target)
        if not shared:
            logger.warning(
                "assignment_rejected_no_shared_team",
                actor_id=str(actor.id),
                assignee_id=str(target),
            )
            raise NoSharedTeamError(actor.id, target)

        eligible = {
            team.id: team
            for team in shared
            if self._resolver.has_team_access(actor, team) and team.is_member(target)
        }
        selection = select_lowest(list(eligible))
        if selection is None:
            # Shared, but only through teams the actor does not own
            raise TeamAccessDeniedError(actor.id, shared[0].id)

        logger.info(
            "shared_team_auto_selected",
            actor_id=str(actor.id),
            assignee_id=str(target),
            team_id=str(selection.team_id),
            candidates=[str(c) for c in selection.candidates],
            ambiguous=selection.was_ambiguous,
        )
        return AssignmentResolution(
            assignee_id=target,
            team_id=selection.team_id,
            team=eligible[selection.team_id],
            auto_selected_team=True,
            shared_team_candidates=selection.candidates,
        )

    async def resolve_for_update(
        self,
        actor: Actor,
        task: Task,
        patch: TaskPatch,
    ) -> AssignmentResolution:
        """Resolve assignee and team after applying a patch.

        Args:
            actor: The updating actor (already allowed to modify the task).
            task: The current task state.
            patch: The requested update.

        Returns:
            The resolution for the updated task.

        Raises:
            AssignmentTeamNotFoundError: The target team does not exist.
            TeamAccessDeniedError: The actor has no access to the team.
            AssigneeNotFoundError: The new assignee does not exist.
            PersonalTaskReassignmentError: A personal task would go to
                someone other than the actor.
            AssignmentForbiddenError: A non-Admin reassigns to someone else.
            AssigneeNotInTeamError: The new assignee is not a team member.
        """
        team_id = task.team_id
        team: Team | None = None

        if is_set(patch.team_id) and patch.team_id != task.team_id:
            if patch.team_id is None:
                # Back to personal: only the creator may detach a task
                if task.created_by_id != actor.id:
                    raise TeamAccessDeniedError(actor.id, task.team_id)  # type: ignore[arg-type]
                team_id = None
            else:
                team = await self._require_team(actor, patch.team_id)  # type: ignore[arg-type]
                team_id = team.id

        assignee_id = task.assigned_to_id
        if is_set(patch.assignee_id) and patch.assignee_id != task.assigned_to_id:
            new_assignee: UUID = patch.assignee_id  # type: ignore[assignment]
            await self._require_assignee(new_assignee)

            if team_id is None:
                if new_assignee != actor.id:
                    logger.warning(
                        "personal_task_reassignment_rejected",
                        task_id=str(task.id),
                        actor_id=str(actor.id),
                        assignee_id=str(new_assignee),
                    )
                    raise PersonalTaskReassignmentError(task.id, new_assignee)
            else:
                if new_assignee != actor.id and not actor.is_admin:
                    raise AssignmentForbiddenError(actor.id, new_assignee)
                if team is None:
                    team = await self._team_repo.get(team_id)
                    if team is None:
                        raise AssignmentTeamNotFoundError(team_id)
                present = (
                    team.includes(new_assignee)
                    if new_assignee == actor.id
                    else team.is_member(new_assignee)
                )
                if not present:
                    raise AssigneeNotInTeamError(new_assignee, team_id)
            assignee_id = new_assignee

        if team is None and team_id is not None:
            team = await self._team_repo.get(team_id)

        return AssignmentResolution(assignee_id=assignee_id, team_id=team_id, team=team)
