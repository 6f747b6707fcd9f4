"""Task repository stub implementation.

Tasks are stored with their todos embedded, so deleting a task
cascades to its checklist.

WARNING: This stub is NOT for production use.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from teamtasks.application.ports.task_repository import TaskRepositoryProtocol
from teamtasks.domain.models.task import Task
from teamtasks.infrastructure.stubs.in_memory_storage import InMemoryStorage


def _newest_first(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: (t.created_at, t.id), reverse=True)


class TaskRepositoryStub(TaskRepositoryProtocol):
    """In-memory stub implementation of TaskRepositoryProtocol."""

    def __init__(self, storage: InMemoryStorage | None = None) -> None:
        """Initialize the stub, sharing storage when given."""
        self._storage = storage if storage is not None else InMemoryStorage()

    async def get(self, task_id: UUID) -> Task | None:
        self._storage.check_failure("tasks.get")
        return self._storage.tasks.get(task_id)

    async def save(self, task: Task) -> None:
        self._storage.check_failure("tasks.save")
        self._storage.tasks[task.id] = task

    async def delete(self, task_id: UUID) -> bool:
        self._storage.check_failure("tasks.delete")
        return self._storage.tasks.pop(task_id, None) is not None

    async def list_assigned_to(self, user_ids: Iterable[UUID]) -> list[Task]:
        self._storage.check_failure("tasks.list_assigned_to")
        wanted = set(user_ids)
        return _newest_first(
            t for t in self._storage.tasks.values() if t.assigned_to_id in wanted
        )

    async def list_personal_created_by(self, user_id: UUID) -> list[Task]:
        self._storage.check_failure("tasks.list_personal_created_by")
        return _newest_first(
            t
            for t in self._storage.tasks.values()
            if t.created_by_id == user_id and t.team_id is None
        )

    async def list_by_team(self, team_id: UUID) -> list[Task]:
        self._storage.check_failure("tasks.list_by_team")
        return _newest_first(t for t in self._storage.tasks.values() if t.team_id == team_id)
