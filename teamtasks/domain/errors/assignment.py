"""Task assignment errors.

Every assignment failure names the precondition that failed so the
caller can render a precise message: assignee missing, team missing,
team access, or a membership mismatch.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import UUID

from teamtasks.domain.errors.kinds import BadRequestError, ForbiddenError
from teamtasks.domain.errors.not_found import TeamNotFoundError, UserNotFoundError


class AssignmentPrecondition(Enum):
    """The precondition an assignment request failed."""

    ASSIGNEE_NOT_FOUND = "assignee_not_found"
    TEAM_NOT_FOUND = "team_not_found"
    TEAM_ACCESS_DENIED = "team_access_denied"
    ACTOR_NOT_ADMIN = "actor_not_admin"
    ASSIGNEE_NOT_IN_TEAM = "assignee_not_in_team"
    PERSONAL_TASK_SELF_ONLY = "personal_task_self_only"
    NO_SHARED_TEAM = "no_shared_team"


class AssigneeNotFoundError(UserNotFoundError):
    """Raised when the requested assignee does not exist."""

    precondition = AssignmentPrecondition.ASSIGNEE_NOT_FOUND

    def __init__(self, user_id: UUID) -> None:
        super().__init__(user_id, label="Assigned user")


class AssignmentTeamNotFoundError(TeamNotFoundError):
    """Raised when the team named in an assignment does not exist."""

    precondition = AssignmentPrecondition.TEAM_NOT_FOUND


class TeamAccessDeniedError(ForbiddenError):
    """Raised when the actor has no access to the requested team."""

    precondition = AssignmentPrecondition.TEAM_ACCESS_DENIED

    def __init__(self, actor_id: UUID, team_id: UUID) -> None:
        self.actor_id = actor_id
        self.team_id = team_id
        super().__init__("You do not have access to this team")

    def context(self) -> dict[str, Any]:
        return {
            "actor_id": str(self.actor_id),
            "team_id": str(self.team_id),
            "precondition": self.precondition.value,
        }


class AssignmentForbiddenError(ForbiddenError):
    """Raised when a non-Admin tries to assign a task to someone else."""

    precondition = AssignmentPrecondition.ACTOR_NOT_ADMIN

    def __init__(self, actor_id: UUID, assignee_id: UUID) -> None:
        self.actor_id = actor_id
        self.assignee_id = assignee_id
        super().__init__("Only admins can assign tasks to other users")

    def context(self) -> dict[str, Any]:
        return {
            "actor_id": str(self.actor_id),
            "assignee_id": str(self.assignee_id),
            "precondition": self.precondition.value,
        }


class AssigneeNotInTeamError(ForbiddenError):
    """Raised when the assignee is not a member of the task's team."""

    precondition = AssignmentPrecondition.ASSIGNEE_NOT_IN_TEAM

    def __init__(self, assignee_id: UUID, team_id: UUID) -> None:
        self.assignee_id = assignee_id
        self.team_id = team_id
        super().__init__("Assigned user is not in the selected team")

    def context(self) -> dict[str, Any]:
        return {
            "assignee_id": str(self.assignee_id),
            "team_id": str(self.team_id),
            "precondition": self.precondition.value,
        }


class PersonalTaskReassignmentError(ForbiddenError):
    """Raised when a personal task would be assigned to someone but its creator."""

    precondition = AssignmentPrecondition.PERSONAL_TASK_SELF_ONLY

    def __init__(self, task_id: UUID | None, assignee_id: UUID) -> None:
        self.task_id = task_id
        self.assignee_id = assignee_id
        super().__init__("You can only assign personal tasks to yourself")

    def context(self) -> dict[str, Any]:
        return {
            "task_id": str(self.task_id) if self.task_id else None,
            "assignee_id": str(self.assignee_id),
            "precondition": self.precondition.value,
        }


class NoSharedTeamError(BadRequestError):
    """Raised when no team is shared with the assignee and none was given."""

    precondition = AssignmentPrecondition.NO_SHARED_TEAM

    def __init__(self, actor_id: UUID, assignee_id: UUID) -> None:
        self.actor_id = actor_id
        self.assignee_id = assignee_id
        super().__init__("no shared team; specify teamId")

    def context(self) -> dict[str, Any]:
        return {
            "actor_id": str(self.actor_id),
            "assignee_id": str(self.assignee_id),
            "precondition": self.precondition.value,
        }
