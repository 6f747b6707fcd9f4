"""Infrastructure stubs for development and testing.

Available stubs:
- InMemoryStorage: Shared tables with failure injection
- InMemoryTransactionManager: Snapshot/restore transactions
- UserRepositoryStub: In-memory users with email uniqueness
- TeamRepositoryStub: In-memory teams
- TaskRepositoryStub: In-memory tasks with embedded todos

WARNING: These stubs are NOT for production use.
"""

from teamtasks.infrastructure.stubs.in_memory_storage import (
    InMemoryStorage,
    InMemoryTransactionManager,
)
from teamtasks.infrastructure.stubs.task_repository_stub import TaskRepositoryStub
from teamtasks.infrastructure.stubs.team_repository_stub import TeamRepositoryStub
from teamtasks.infrastructure.stubs.user_repository_stub import UserRepositoryStub

__all__: list[str] = [
    "InMemoryStorage",
    "InMemoryTransactionManager",
    "TaskRepositoryStub",
    "TeamRepositoryStub",
    "UserRepositoryStub",
]
