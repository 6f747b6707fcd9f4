"""Entity-absent errors."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from teamtasks.domain.errors.kinds import NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not resolve to a user."""

    def __init__(self, user_id: UUID, label: str = "User") -> None:
        self.user_id = user_id
        super().__init__(f"{label} not found: {user_id}")

    def context(self) -> dict[str, Any]:
        return {"user_id": str(self.user_id)}


class TeamNotFoundError(NotFoundError):
    """Raised when a team id does not resolve to a team."""

    def __init__(self, team_id: UUID) -> None:
        self.team_id = team_id
        super().__init__(f"Team not found: {team_id}")

    def context(self) -> dict[str, Any]:
        return {"team_id": str(self.team_id)}


class TaskNotFoundError(NotFoundError):
    """Raised when a task id does not resolve to a task."""

    def __init__(self, task_id: UUID) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")

    def context(self) -> dict[str, Any]:
        return {"task_id": str(self.task_id)}
