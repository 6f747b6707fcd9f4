"""Task and Todo domain models.

State Machine:
    PENDING -> IN_PROGRESS -> COMPLETED, in any order: status is written
    directly or derived from the checklist. The consistency rules between
    status, progress and todos live in
    teamtasks.domain.services.task_lifecycle.

Ownership:
    team_id is None  <=>  personal task  <=>  assignee == creator.
    A team task's assignee must be present in that team.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from uuid import UUID

from uuid6 import uuid7

MIN_PROGRESS = 0
MAX_PROGRESS = 100


class TaskStatus(Enum):
    """Lifecycle state of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(Enum):
    """Priority of a task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Todo:
    """A checklist item owned by exactly one task.

    Todos live inside the Task aggregate, so deleting a task deletes its
    todos with it.
    """

    text: str
    completed: bool = False
    id: UUID = field(default_factory=uuid7)


@dataclass(frozen=True, eq=True)
class Task:
    """A unit of work assigned to one user.

    Attributes:
        id: UUIDv7 unique identifier.
        title: Short title.
        description: Free-text description.
        due_date: Date the task is due.
        assigned_to_id: The assignee.
        created_by_id: The creator.
        team_id: Owning team, or None for a personal task.
        priority: LOW, MEDIUM or HIGH.
        status: PENDING, IN_PROGRESS or COMPLETED.
        progress: Integer percentage in [0, 100].
        todos: Ordered checklist.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).
    """

    title: str
    description: str
    due_date: date
    assigned_to_id: UUID
    created_by_id: UUID
    team_id: UUID | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    progress: int = 0
    todos: tuple[Todo, ...] = ()
    id: UUID = field(default_factory=uuid7)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @property
    def is_personal(self) -> bool:
        """A task without a team is personal."""
        return self.team_id is None

    @property
    def completed_todo_count(self) -> int:
        """Number of completed checklist items."""
        return sum(1 for todo in self.todos if todo.completed)
