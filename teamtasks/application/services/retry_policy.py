"""Retry policy for infrastructure failures.

Errors are classified by kind to decide what happens next:

- RETRY: InfrastructureError (storage timeout, storage unavailable) while
  attempts remain
- EXHAUSTED: InfrastructureError after the last attempt
- PROPAGATE: every other error; NotFound, Forbidden, BadRequest,
  Conflict and InvalidToken are terminal for the request

Nothing is ever converted into a fallback result. When the policy gives
up, the original error is re-raised.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from structlog import get_logger

from teamtasks.config.core_config import DEFAULT_RETRY_CONFIG, RetryConfig
from teamtasks.domain.errors import InfrastructureError

logger = get_logger(__name__)

T = TypeVar("T")


class RetryAction(Enum):
    """Action to take after a failed attempt."""

    RETRY = "retry"
    EXHAUSTED = "exhausted"
    PROPAGATE = "propagate"


@dataclass(frozen=True)
class RetryDecision:
    """Decision about a failed attempt.

    Attributes:
        action: What to do next.
        attempt: The attempt that failed (1-based).
        delay_seconds: Sleep before the next attempt (RETRY only).
    """

    action: RetryAction
    attempt: int
    delay_seconds: float = 0.0

    @property
    def is_terminal(self) -> bool:
        """Check if this decision ends the operation."""
        return self.action != RetryAction.RETRY


class RetryPolicy:
    """Bounded exponential backoff for retryable errors.

    Usage:
        policy = RetryPolicy(RetryConfig.from_environment())
        task = await policy.run(lambda: task_repo.get(task_id))
    """

    def __init__(self, config: RetryConfig = DEFAULT_RETRY_CONFIG) -> None:
        self._config = config

    @property
    def max_attempts(self) -> int:
        return self._config.max_attempts

    def decide(self, error: BaseException, attempt: int) -> RetryDecision:
        """Decide what to do after an attempt failed.

        Args:
            error: The exception raised by the attempt.
            attempt: The attempt number that failed (1-based).

        Returns:
            RetryDecision for the caller.
        """
        if not isinstance(error, InfrastructureError):
            return RetryDecision(action=RetryAction.PROPAGATE, attempt=attempt)

        if attempt >= self._config.max_attempts:
            return RetryDecision(action=RetryAction.EXHAUSTED, attempt=attempt)

        return RetryDecision(
            action=RetryAction.RETRY,
            attempt=attempt,
            delay_seconds=self._calculate_delay(attempt),
        )

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate retry delay with decorrelated jitter, capped."""
        base = self._config.base_delay_seconds
        if attempt <= 1:
            return min(base, self._config.max_delay_seconds)

        previous = base * (2 ** (attempt - 2))
        delay = random.uniform(base, previous * 3)
        return min(delay, self._config.max_delay_seconds)

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run an operation, retrying infrastructure failures.

        Args:
            operation: Zero-argument coroutine function.

        Returns:
            The operation's result.

        Raises:
            InfrastructureError: The last failure once attempts run out.
            Exception: Any non-infrastructure failure, immediately.
        """
        attempt = 1
        while True:
            try:
                return await operation()
            except InfrastructureError as exc:
                decision = self.decide(exc, attempt)
                if decision.action == RetryAction.EXHAUSTED:
                    logger.error(
                        "retries_exhausted",
                        error=type(exc).__name__,
                        attempts=attempt,
                    )
                    raise
                logger.warning(
                    "retrying_after_infrastructure_error",
                    error=type(exc).__name__,
                    attempt=attempt,
                    max_attempts=self._config.max_attempts,
                    delay_seconds=round(decision.delay_seconds, 3),
                )
                await asyncio.sleep(decision.delay_seconds)
                attempt += 1


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
) -> T:
    """Run an operation under a retry policy (the default one if omitted)."""
    return await (policy or RetryPolicy()).run(operation)
