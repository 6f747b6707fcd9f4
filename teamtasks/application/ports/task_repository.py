"""Task repository port.

Tasks are stored as aggregates: a task's todos are saved and deleted
with it, so replacing a checklist is a single save of the task.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from teamtasks.domain.models.task import Task


class TaskRepositoryProtocol(Protocol):
    """Protocol for task storage operations.

    List methods return tasks newest first (created_at descending).
    """

    async def get(self, task_id: UUID) -> Task | None:
        """Retrieve a task (with its todos) by ID, or None."""
        ...

    async def save(self, task: Task) -> None:
        """Insert or replace a task and its todos."""
        ...

    async def delete(self, task_id: UUID) -> bool:
        """Delete a task and its todos. Returns True if one was deleted."""
        ...

    async def list_assigned_to(self, user_ids: Iterable[UUID]) -> list[Task]:
        """Tasks assigned to any of the given users."""
        ...

    async def list_personal_created_by(self, user_id: UUID) -> list[Task]:
        """Personal (team-less) tasks created by the user."""
        ...

    async def list_by_team(self, team_id: UUID) -> list[Task]:
        """Tasks belonging to a team."""
        ...
