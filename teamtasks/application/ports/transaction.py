"""Transaction manager port.

Multi-entity write sequences (registration creating a user and a team,
a checklist replacement, a team membership change) run inside one
transactional boundary so that partial application is never observable.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

T = TypeVar("T")


class TransactionManagerProtocol(Protocol):
    """Protocol for running work atomically against storage."""

    async def run(self, work: Callable[[], Awaitable[T]]) -> T:
        """Run work inside a transaction.

        Commits if work returns, rolls back if it raises (including
        cancellation) and re-raises.

        Args:
            work: Zero-argument coroutine function performing the writes.

        Returns:
            Whatever work returns.
        """
        ...
