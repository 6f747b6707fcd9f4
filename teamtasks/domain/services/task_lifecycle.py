"""Task lifecycle state machine (status, progress, checklist consistency).

This module keeps a task's status, numeric progress and todo checklist
consistent on every mutation path. All functions are pure: they take a
frozen Task and return a new one.

Precedence of the mutation paths:
    1. Explicit status write (apply_status):
       - into COMPLETED: every todo completed, progress forced to 100.
       - out of COMPLETED territory (target is not COMPLETED and stored
         progress is 100): progress reset to 0, every todo un-completed.
    2. Explicit progress write without status (apply_patch):
       progress taken verbatim, status left as stored.
    3. Checklist replacement (replace_checklist):
       progress recomputed from the new todos, status derived from it.
    4. Generic update with no progress and existing todos (apply_patch):
       progress recomputed from the todos, status NOT derived.

Checklist replacement drives status; generic recomputation does not.

Rounding:
    Progress is 100 * completed / total rounded half-up on the exact
    ratio: 1/3 -> 33, 2/3 -> 67, 1/8 -> 13 (12.5 rounds up), 1/200 -> 1.
    Python's round() is half-to-even and would give 12 for 1/8, so
    decimal ROUND_HALF_UP is used instead.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from teamtasks.domain.models.task import (
    MAX_PROGRESS,
    MIN_PROGRESS,
    Task,
    TaskStatus,
    Todo,
)
from teamtasks.domain.models.task_patch import ChecklistItem, TaskPatch, is_set

_ONE = Decimal(1)


def round_half_up(value: Decimal) -> int:
    """Round a decimal to the nearest integer, halves away from zero."""
    return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))


def compute_progress(todos: Sequence[Todo]) -> int:
    """Compute checklist progress as a whole percentage.

    Args:
        todos: The checklist.

    Returns:
        round_half_up(100 * completed / total), or 0 for an empty list.
    """
    total = len(todos)
    if total == 0:
        return MIN_PROGRESS
    completed = sum(1 for todo in todos if todo.completed)
    return round_half_up(Decimal(100 * completed) / Decimal(total))


def status_for_progress(progress: int) -> TaskStatus:
    """Derive status from progress: 0 pending, 100 completed, else in progress."""
    if progress >= MAX_PROGRESS:
        return TaskStatus.COMPLETED
    if progress <= MIN_PROGRESS:
        return TaskStatus.PENDING
    return TaskStatus.IN_PROGRESS


def _set_all_todos(todos: Iterable[Todo], completed: bool) -> tuple[Todo, ...]:
    return tuple(
        todo if todo.completed == completed else replace(todo, completed=completed)
        for todo in todos
    )


def apply_status(task: Task, status: TaskStatus, at: datetime) -> Task:
    """Apply an explicit status write.

    Args:
        task: Current task state.
        status: Requested status.
        at: Modification timestamp.

    Returns:
        New task state with todo and progress side effects applied.
    """
    if status == TaskStatus.COMPLETED:
        return replace(
            task,
            status=status,
            progress=MAX_PROGRESS,
            todos=_set_all_todos(task.todos, completed=True),
            updated_at=at,
        )

    if task.progress == MAX_PROGRESS:
        return replace(
            task,
            status=status,
            progress=MIN_PROGRESS,
            todos=_set_all_todos(task.todos, completed=False),
            updated_at=at,
        )

    return replace(task, status=status, updated_at=at)


def build_todos(items: Iterable[ChecklistItem]) -> tuple[Todo, ...]:
    """Create fresh todos for a checklist replacement."""
    return tuple(Todo(text=item.text.strip(), completed=item.completed) for item in items)


def replace_checklist(
    task: Task,
    items: Sequence[ChecklistItem],
    at: datetime,
) -> Task:
    """Replace the whole checklist and derive progress and status from it.

    Replacing with the same items twice yields the same status, progress
    and completion flags (todo ids are regenerated each time).

    Args:
        task: Current task state.
        items: The complete new checklist, in order.
        at: Modification timestamp.

    Returns:
        New task state.
    """
    todos = build_todos(items)
    progress = compute_progress(todos)
    return replace(
        task,
        todos=todos,
        progress=progress,
        status=status_for_progress(progress),
        updated_at=at,
    )


def apply_patch(task: Task, patch: TaskPatch, at: datetime) -> Task:
    """Apply the content, status and progress fields of a generic update.

    Assignee and team changes are resolved by the assignment engine and
    applied by the caller; this function ignores them.

    Args:
        task: Current task state.
        patch: Presence-flagged update.
        at: Modification timestamp.

    Returns:
        New task state.
    """
    changes: dict[str, object] = {}
    for name in ("title", "description", "due_date", "priority", "status"):
        value = getattr(patch, name)
        if is_set(value):
            changes[name] = value

    if is_set(patch.progress):
        changes["progress"] = patch.progress
    elif task.todos:
        changes["progress"] = compute_progress(task.todos)

    return replace(task, **changes, updated_at=at)
