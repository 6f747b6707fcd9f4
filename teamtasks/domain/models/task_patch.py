"""Task creation drafts and presence-flagged update patches.

A TaskPatch distinguishes "field not supplied" from "field supplied as
None" with the UNSET sentinel. The lifecycle precedence rules depend on
which fields were supplied, so presence is explicit on every field.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Final, TypeVar
from uuid import UUID

from teamtasks.domain.models.task import TaskPriority, TaskStatus

T = TypeVar("T")


class _Unset(Enum):
    """Sentinel type for patch fields that were not supplied."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset.UNSET

Maybe = T | _Unset


def is_set(value: object) -> bool:
    """Check whether a patch field was supplied."""
    return value is not UNSET


@dataclass(frozen=True)
class ChecklistItem:
    """One item of a full checklist replacement."""

    text: str
    completed: bool = False


@dataclass(frozen=True)
class TaskDraft:
    """Request to create a task.

    Attributes:
        title: Short title.
        description: Free-text description.
        due_date: Date the task is due.
        priority: Task priority (default MEDIUM).
        status: Initial status (default PENDING).
        assignee_id: Assignee; None means the actor.
        team_id: Explicit team; None means personal or auto-selected.
        progress: Initial progress; None means derived from todos.
        todos: Checklist item texts, created incomplete.
    """

    title: str
    description: str
    due_date: date
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    assignee_id: UUID | None = None
    team_id: UUID | None = None
    progress: int | None = None
    todos: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskPatch:
    """Partial update of a task with explicit field presence.

    Every field defaults to UNSET. team_id may be supplied as None to
    turn a team task back into a personal one.
    """

    title: Maybe[str] = UNSET
    description: Maybe[str] = UNSET
    due_date: Maybe[date] = UNSET
    priority: Maybe[TaskPriority] = UNSET
    status: Maybe[TaskStatus] = UNSET
    progress: Maybe[int] = UNSET
    assignee_id: Maybe[UUID] = UNSET
    team_id: Maybe[UUID | None] = UNSET

    def provided(self) -> frozenset[str]:
        """Names of the fields that were supplied."""
        return frozenset(f.name for f in fields(self) if is_set(getattr(self, f.name)))

    @property
    def is_empty(self) -> bool:
        """Check whether no field was supplied."""
        return not self.provided()
