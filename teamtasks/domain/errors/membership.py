"""Registration, team management, and user management errors."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from teamtasks.domain.errors.kinds import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)


class RegistrationValidationError(BadRequestError):
    """Raised when a registration request is missing required fields."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__("Name, email, and password are required")

    def context(self) -> dict[str, Any]:
        return {"missing": self.missing}


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when an email address is already registered.

    The email is kept for logging but omitted from the message.
    """

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("User with this email already exists")


class TeamManagementForbiddenError(ForbiddenError):
    """Raised when the actor does not own the team it tries to manage."""

    def __init__(self, actor_id: UUID, team_id: UUID | None, action: str) -> None:
        self.actor_id = actor_id
        self.team_id = team_id
        self.action = action
        super().__init__(f"Not permitted to {action}")

    def context(self) -> dict[str, Any]:
        return {
            "actor_id": str(self.actor_id),
            "team_id": str(self.team_id) if self.team_id else None,
            "action": self.action,
        }


class TeamHasTasksError(ConflictError):
    """Raised when deleting a team that still owns tasks."""

    def __init__(self, team_id: UUID, task_count: int) -> None:
        self.team_id = team_id
        self.task_count = task_count
        super().__init__(
            f"Team {team_id} still has {task_count} task(s); reassign or delete them first"
        )


class UserDeletionForbiddenError(ForbiddenError):
    """Raised when the actor may not delete the target user."""

    def __init__(self, actor_id: UUID, user_id: UUID, detail: str) -> None:
        self.actor_id = actor_id
        self.user_id = user_id
        self.detail = detail
        super().__init__(detail)


class UserStillOwnsTeamError(ConflictError):
    """Raised when deleting a user that still owns a team."""

    def __init__(self, user_id: UUID, team_ids: list[UUID]) -> None:
        self.user_id = user_id
        self.team_ids = team_ids
        super().__init__("User still owns teams; delete or transfer them first")


class UserAccessDeniedError(ForbiddenError):
    """Raised when the actor may not view another user's profile."""

    def __init__(self, actor_id: UUID, user_id: UUID) -> None:
        self.actor_id = actor_id
        self.user_id = user_id
        super().__init__("You can only view users from your teams")


class TeamValidationError(BadRequestError):
    """Raised when a team request is missing its name."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class MemberHasTeamTasksError(ConflictError):
    """Raised when removing a member who is still assigned tasks in the team."""

    def __init__(self, team_id: UUID, user_id: UUID, task_count: int) -> None:
        self.team_id = team_id
        self.user_id = user_id
        self.task_count = task_count
        super().__init__(
            f"User is still assigned {task_count} task(s) in this team; reassign them first"
        )

    def context(self) -> dict[str, Any]:
        return {
            "team_id": str(self.team_id),
            "user_id": str(self.user_id),
            "task_count": self.task_count,
        }


class UserCreationForbiddenError(ForbiddenError):
    """Raised when a non-Admin tries to create a user directly."""

    def __init__(self, actor_id: UUID) -> None:
        self.actor_id = actor_id
        super().__init__("Only admins can create users")


class AdminHasNoTeamError(NotFoundError):
    """Raised when an Admin creating a user owns no team to place it in."""

    def __init__(self, admin_id: UUID) -> None:
        self.admin_id = admin_id
        super().__init__("Admin does not have any teams")
