"""Unit tests for the task lifecycle state machine.

Tests cover:
- Half-up progress rounding
- Explicit status writes into and out of COMPLETED
- Checklist replacement deriving progress and status
- Generic patches recomputing progress without touching status
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from teamtasks.domain.models.task import Task, TaskPriority, TaskStatus, Todo
from teamtasks.domain.models.task_patch import ChecklistItem, TaskPatch
from teamtasks.domain.services.task_lifecycle import (
    apply_patch,
    apply_status,
    compute_progress,
    replace_checklist,
    round_half_up,
    status_for_progress,
)

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
LATER = NOW + timedelta(minutes=5)


def _task(todos: tuple[Todo, ...] = (), **overrides: object) -> Task:
    user_id = uuid4()
    fields: dict[str, object] = {
        "title": "Write report",
        "description": "Quarterly numbers",
        "due_date": date(2026, 2, 1),
        "assigned_to_id": user_id,
        "created_by_id": user_id,
        "todos": todos,
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Task(**fields)  # type: ignore[arg-type]


def _todos(*completed: bool) -> tuple[Todo, ...]:
    return tuple(Todo(text=f"step {i}", completed=c) for i, c in enumerate(completed))


class TestRounding:
    """Progress is 100 * completed / total, rounded half-up."""

    @pytest.mark.parametrize(
        ("completed", "total", "expected"),
        [
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),
            (3, 8, 38),
            (1, 200, 1),
            (0, 5, 0),
            (5, 5, 100),
        ],
    )
    def test_compute_progress(self, completed: int, total: int, expected: int) -> None:
        todos = _todos(*([True] * completed + [False] * (total - completed)))
        assert compute_progress(todos) == expected

    def test_empty_checklist_is_zero(self) -> None:
        assert compute_progress(()) == 0

    def test_half_rounds_up_not_to_even(self) -> None:
        assert round_half_up(Decimal("12.5")) == 13
        assert round_half_up(Decimal("0.5")) == 1
        assert round_half_up(Decimal("2.4999")) == 2


class TestStatusForProgress:
    @pytest.mark.parametrize(
        ("progress", "expected"),
        [
            (0, TaskStatus.PENDING),
            (1, TaskStatus.IN_PROGRESS),
            (99, TaskStatus.IN_PROGRESS),
            (100, TaskStatus.COMPLETED),
        ],
    )
    def test_derivation(self, progress: int, expected: TaskStatus) -> None:
        assert status_for_progress(progress) == expected


class TestApplyStatus:
    """Explicit status writes and their side effects."""

    def test_into_completed_completes_todos_and_forces_progress(self) -> None:
        task = _task(_todos(False, False), progress=0)

        result = apply_status(task, TaskStatus.COMPLETED, LATER)

        assert result.status == TaskStatus.COMPLETED
        assert result.progress == 100
        assert all(todo.completed for todo in result.todos)
        assert result.updated_at == LATER

    def test_out_of_completed_resets_progress_and_todos(self) -> None:
        completed = apply_status(_task(_todos(False, False)), TaskStatus.COMPLETED, NOW)

        result = apply_status(completed, TaskStatus.PENDING, LATER)

        assert result.status == TaskStatus.PENDING
        assert result.progress == 0
        assert not any(todo.completed for todo in result.todos)

    def test_complete_then_pending_round_trip_keeps_todo_ids(self) -> None:
        task = _task(_todos(False, False))
        ids = [todo.id for todo in task.todos]

        completed = apply_status(task, TaskStatus.COMPLETED, NOW)
        result = apply_status(completed, TaskStatus.PENDING, LATER)

        assert [todo.id for todo in result.todos] == ids

    def test_status_change_below_full_progress_touches_only_status(self) -> None:
        task = _task(_todos(True, False), progress=50, status=TaskStatus.IN_PROGRESS)

        result = apply_status(task, TaskStatus.PENDING, LATER)

        assert result.status == TaskStatus.PENDING
        assert result.progress == 50
        assert result.todos == task.todos

    def test_in_progress_from_full_progress_resets(self) -> None:
        task = _task(_todos(True), progress=100, status=TaskStatus.COMPLETED)

        result = apply_status(task, TaskStatus.IN_PROGRESS, LATER)

        assert result.progress == 0
        assert result.todos[0].completed is False


class TestReplaceChecklist:
    def test_one_of_three_completed(self) -> None:
        items = [
            ChecklistItem("a", completed=True),
            ChecklistItem("b"),
            ChecklistItem("c"),
        ]

        result = replace_checklist(_task(), items, LATER)

        assert result.progress == 33
        assert result.status == TaskStatus.IN_PROGRESS
        assert [todo.text for todo in result.todos] == ["a", "b", "c"]

    def test_all_completed_derives_completed(self) -> None:
        items = [ChecklistItem(text, completed=True) for text in ("a", "b", "c")]

        result = replace_checklist(_task(), items, LATER)

        assert result.progress == 100
        assert result.status == TaskStatus.COMPLETED

    def test_empty_checklist_derives_pending(self) -> None:
        task = _task(_todos(True), progress=100, status=TaskStatus.COMPLETED)

        result = replace_checklist(task, [], LATER)

        assert result.todos == ()
        assert result.progress == 0
        assert result.status == TaskStatus.PENDING

    def test_replacing_twice_with_same_items_is_idempotent(self) -> None:
        items = [ChecklistItem("a", completed=True), ChecklistItem("b")]

        once = replace_checklist(_task(), items, LATER)
        twice = replace_checklist(once, items, LATER)

        assert twice.progress == once.progress
        assert twice.status == once.status
        assert [(t.text, t.completed) for t in twice.todos] == [
            (t.text, t.completed) for t in once.todos
        ]

    def test_item_text_is_stripped(self) -> None:
        result = replace_checklist(_task(), [ChecklistItem("  padded  ")], LATER)

        assert result.todos[0].text == "padded"


class TestApplyPatch:
    def test_explicit_progress_is_taken_verbatim_and_status_kept(self) -> None:
        task = _task(_todos(True, False), progress=50, status=TaskStatus.IN_PROGRESS)

        result = apply_patch(task, TaskPatch(progress=90), LATER)

        assert result.progress == 90
        assert result.status == TaskStatus.IN_PROGRESS

    def test_progress_alone_does_not_complete_task(self) -> None:
        task = _task(status=TaskStatus.PENDING)

        result = apply_patch(task, TaskPatch(progress=100), LATER)

        assert result.progress == 100
        assert result.status == TaskStatus.PENDING

    def test_generic_update_recomputes_progress_from_todos(self) -> None:
        task = _task(_todos(True, False, False), progress=90, status=TaskStatus.PENDING)

        result = apply_patch(task, TaskPatch(title="Renamed"), LATER)

        assert result.title == "Renamed"
        assert result.progress == 33
        assert result.status == TaskStatus.PENDING

    def test_generic_update_without_todos_keeps_progress(self) -> None:
        task = _task(progress=40)

        result = apply_patch(task, TaskPatch(priority=TaskPriority.HIGH), LATER)

        assert result.progress == 40
        assert result.priority == TaskPriority.HIGH

    def test_status_in_patch_is_stored_without_todo_side_effects(self) -> None:
        task = _task(_todos(False, False))

        result = apply_patch(task, TaskPatch(status=TaskStatus.COMPLETED), LATER)

        assert result.status == TaskStatus.COMPLETED
        assert result.progress == 0
        assert not any(todo.completed for todo in result.todos)

    def test_unset_fields_are_left_alone(self) -> None:
        task = _task()

        result = apply_patch(task, TaskPatch(), LATER)

        assert result.title == task.title
        assert result.description == task.description
        assert result.due_date == task.due_date
        assert result.updated_at == LATER
