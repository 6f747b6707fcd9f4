"""Access policy: who may view, assign, modify, and delete what.

Every predicate fails closed. A relation that is missing or cannot be
resolved (team deleted, task without a loaded team) yields "denied",
never "allowed". Infrastructure errors are not relations and propagate
so the caller can retry.

Rules:
- view task: personal -> assignee or creator; team task -> the Admin
  owning the team, or the assignee.
- modify task: same as view.
- delete task: view access, and Admin or creator.
- assign: self-assignment (with access to the team, if one is given),
  or an Admin with access to the team whose member is the target.
- view team: owner or member.
- manage team: Admin owner.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from structlog import get_logger

from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.services.membership_resolver import MembershipResolver
from teamtasks.domain.models.task import Task
from teamtasks.domain.models.team import Team
from teamtasks.domain.models.user import Actor

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an access check.

    Attributes:
        allowed: Whether the action is permitted.
        reason: Short machine-readable explanation.
    """

    allowed: bool
    reason: str

    def __bool__(self) -> bool:
        return self.allowed


def allow(reason: str) -> AccessDecision:
    return AccessDecision(allowed=True, reason=reason)


def deny(reason: str) -> AccessDecision:
    return AccessDecision(allowed=False, reason=reason)


class AccessPolicy:
    """Authorization predicates built on the membership resolver.

    The decide_* methods return an AccessDecision carrying the reason;
    the can_* methods return the bare boolean.
    """

    def __init__(
        self,
        resolver: MembershipResolver,
        team_repo: TeamRepositoryProtocol,
    ) -> None:
        """Initialize the policy.

        Args:
            resolver: Membership resolver for team access checks.
            team_repo: Repository for loading task teams.
        """
        self._resolver = resolver
        self._team_repo = team_repo

    async def _load_team(self, team_id: UUID | None) -> Team | None:
        if team_id is None:
            return None
        return await self._team_repo.get(team_id)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def decide_view_task(self, actor: Actor, task: Task | None) -> AccessDecision:
        """Decide whether the actor may view a task."""
        if task is None:
            return deny("task_missing")

        if task.team_id is None:
            if actor.id in (task.assigned_to_id, task.created_by_id):
                return allow("personal_task_participant")
            return deny("personal_task_of_other_user")

        if task.assigned_to_id == actor.id:
            return allow("assignee")

        if actor.is_admin:
            team = await self._load_team(task.team_id)
            if team is None:
                return deny("team_missing")
            if team.is_owner(actor.id):
                return allow("team_owner")

        return deny("not_owner_or_assignee")

    async def can_view_task(self, actor: Actor, task: Task | None) -> bool:
        return (await self.decide_view_task(actor, task)).allowed

    async def can_modify_task(self, actor: Actor, task: Task | None) -> bool:
        return (await self.decide_view_task(actor, task)).allowed

    async def decide_delete_task(self, actor: Actor, task: Task | None) -> AccessDecision:
        """Decide whether the actor may delete a task."""
        view = await self.decide_view_task(actor, task)
        if not view.allowed:
            return view
        if task is not None and (actor.is_admin or task.created_by_id == actor.id):
            return allow("admin_or_creator")
        return deny("not_admin_or_creator")

    async def can_delete_task(self, actor: Actor, task: Task | None) -> bool:
        return (await self.decide_delete_task(actor, task)).allowed

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    async def decide_assign(
        self,
        actor: Actor,
        target_user_id: UUID | None,
        team_id: UUID | None = None,
    ) -> AccessDecision:
        """Decide whether the actor may assign a task to the target user."""
        if target_user_id is None:
            return deny("assignee_missing")

        team = await self._load_team(team_id)
        if team_id is not None and team is None:
            return deny("team_missing")

        if target_user_id == actor.id:
            if team is None:
                return allow("self_assignment")
            if self._resolver.has_team_access(actor, team):
                return allow("self_assignment_in_team")
            return deny("no_team_access")

        if not actor.is_admin:
            return deny("actor_not_admin")
        if team is None:
            return deny("team_required")
        if not self._resolver.has_team_access(actor, team):
            return deny("no_team_access")
        if not team.is_member(target_user_id):
            return deny("assignee_not_in_team")
        return allow("admin_assignment_in_team")

    async def can_assign(
        self,
        actor: Actor,
        target_user_id: UUID | None,
        team_id: UUID | None = None,
    ) -> bool:
        return (await self.decide_assign(actor, target_user_id, team_id)).allowed

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def decide_view_team(self, actor: Actor, team: Team | None) -> AccessDecision:
        """Owners and members may read a team and its task list."""
        if team is None:
            return deny("team_missing")
        if team.includes(actor.id):
            return allow("owner_or_member")
        return deny("not_in_team")

    def can_view_team(self, actor: Actor, team: Team | None) -> bool:
        return self.decide_view_team(actor, team).allowed

    def decide_manage_team(self, actor: Actor, team: Team | None) -> AccessDecision:
        """Only the owning Admin manages a team."""
        if team is None:
            return deny("team_missing")
        if not actor.is_admin:
            return deny("actor_not_admin")
        if not team.is_owner(actor.id):
            return deny("not_owner")
        return allow("team_owner")

    def can_manage_team(self, actor: Actor, team: Team | None) -> bool:
        return self.decide_manage_team(actor, team).allowed

    def log_denial(self, actor: Actor, action: str, decision: AccessDecision) -> None:
        """Record a denied decision."""
        logger.warning(
            "access_denied",
            actor_id=str(actor.id),
            action=action,
            reason=decision.reason,
        )
