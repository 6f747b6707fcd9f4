"""Task access and task invariant errors."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from teamtasks.domain.errors.kinds import BadRequestError, ForbiddenError


class TaskAccessDeniedError(ForbiddenError):
    """Raised when the actor may not view, modify, or delete a task.

    Attributes:
        task_id: The task.
        actor_id: The actor.
        action: "view", "modify" or "delete".
    """

    def __init__(self, task_id: UUID, actor_id: UUID, action: str = "view") -> None:
        self.task_id = task_id
        self.actor_id = actor_id
        self.action = action
        if action == "delete":
            message = "You can only delete tasks you created"
        else:
            message = "You do not have access to this task"
        super().__init__(message)

    def context(self) -> dict[str, Any]:
        return {
            "task_id": str(self.task_id),
            "actor_id": str(self.actor_id),
            "action": self.action,
        }


class PersonalTaskInvariantError(ForbiddenError):
    """Raised when a personal task's assignee differs from its creator."""

    def __init__(self, assignee_id: UUID, creator_id: UUID) -> None:
        self.assignee_id = assignee_id
        self.creator_id = creator_id
        super().__init__("A task without a team can only be assigned to its creator")

    def context(self) -> dict[str, Any]:
        return {
            "assignee_id": str(self.assignee_id),
            "creator_id": str(self.creator_id),
        }


class InvalidProgressError(BadRequestError):
    """Raised when progress falls outside [0, 100]."""

    def __init__(self, progress: int) -> None:
        self.progress = progress
        super().__init__(f"Progress must be between 0 and 100, got {progress}")


class InvalidTaskFieldError(BadRequestError):
    """Raised when a required task field is missing or blank."""

    def __init__(self, field_name: str, detail: str) -> None:
        self.field_name = field_name
        self.detail = detail
        super().__init__(f"Invalid task field '{field_name}': {detail}")

    def context(self) -> dict[str, Any]:
        return {"field": self.field_name, "detail": self.detail}
