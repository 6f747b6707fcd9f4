"""In-memory storage tables and transaction manager stub.

The repository stubs share one InMemoryStorage instance so that a
transaction can snapshot and restore every table at once. Stored values
are frozen dataclasses, so a shallow copy of each table is a complete
snapshot.

Failure injection:
    fail_next(operation, error) makes the next call to the named
    repository operation raise the given error, which lets tests drive
    the retry policy and rollback paths.

WARNING: This stub is NOT for production use.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TypeVar
from uuid import UUID

from structlog import get_logger

from teamtasks.application.ports.transaction import TransactionManagerProtocol
from teamtasks.domain.models.task import Task
from teamtasks.domain.models.team import Team
from teamtasks.domain.models.user import User

logger = get_logger(__name__)

T = TypeVar("T")

# Set while the current task is inside InMemoryTransactionManager.run()
_in_transaction: ContextVar[bool] = ContextVar("in_memory_transaction", default=False)


@dataclass
class InMemoryStorage:
    """Shared tables for the in-memory repository stubs.

    Attributes:
        users: Map of user id to User.
        teams: Map of team id to Team.
        tasks: Map of task id to Task (todos embedded).
    """

    users: dict[UUID, User] = field(default_factory=dict)
    teams: dict[UUID, Team] = field(default_factory=dict)
    tasks: dict[UUID, Task] = field(default_factory=dict)
    _failures: dict[str, list[BaseException]] = field(default_factory=dict)

    def snapshot(self) -> tuple[dict[UUID, User], dict[UUID, Team], dict[UUID, Task]]:
        """Copy every table."""
        return dict(self.users), dict(self.teams), dict(self.tasks)

    def restore(
        self,
        snapshot: tuple[dict[UUID, User], dict[UUID, Team], dict[UUID, Task]],
    ) -> None:
        """Replace every table with a snapshot."""
        users, teams, tasks = snapshot
        self.users = users
        self.teams = teams
        self.tasks = tasks

    def fail_next(self, operation: str, error: BaseException) -> None:
        """Make the next call to an operation (e.g. "tasks.save") raise error."""
        self._failures.setdefault(operation, []).append(error)

    def check_failure(self, operation: str) -> None:
        """Raise an injected failure for the operation, if one is queued."""
        queued = self._failures.get(operation)
        if queued:
            raise queued.pop(0)

    def clear(self) -> None:
        """Clear all tables and injected failures (for testing)."""
        self.users.clear()
        self.teams.clear()
        self.tasks.clear()
        self._failures.clear()


class InMemoryTransactionManager(TransactionManagerProtocol):
    """Snapshot/restore transaction manager over InMemoryStorage.

    Transactions are serialized with an asyncio lock. A transaction
    started from inside another one joins it instead of deadlocking.
    Rollback happens on any exception, including asyncio.CancelledError.
    """

    def __init__(self, storage: InMemoryStorage) -> None:
        """Initialize with the shared storage."""
        self._storage = storage
        self._lock = asyncio.Lock()
        self.commits = 0
        self.rollbacks = 0

    async def run(self, work: Callable[[], Awaitable[T]]) -> T:
        """Run work atomically against the shared storage.

        Args:
            work: Zero-argument coroutine function performing the writes.

        Returns:
            Whatever work returns.
        """
        if _in_transaction.get():
            return await work()

        async with self._lock:
            snapshot = self._storage.snapshot()
            token = _in_transaction.set(True)
            try:
                result = await work()
            except BaseException as exc:
                self._storage.restore(snapshot)
                self.rollbacks += 1
                logger.debug("transaction_rolled_back", error=type(exc).__name__)
                raise
            finally:
                _in_transaction.reset(token)
            self.commits += 1
            return result
