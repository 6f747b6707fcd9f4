"""Periodic sweep of expired invite tokens.

Expired tokens are already rejected on redemption; the sweeper only
bounds how long they occupy memory. A failed sweep is logged and the
loop continues with the next interval.
"""

from __future__ import annotations

import asyncio
import contextlib

from structlog import get_logger

from teamtasks.application.ports.invite_token_store import InviteTokenStoreProtocol
from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.config.core_config import DEFAULT_INVITE_TOKEN_CONFIG, InviteTokenConfig

logger = get_logger(__name__)


class InviteTokenSweeper:
    """Background task calling sweep_expired() at a fixed interval.

    Example:
        >>> sweeper = InviteTokenSweeper(store=store, time_authority=clock)
        >>> await sweeper.start()
        >>> # ... runs in background
        >>> await sweeper.stop()
    """

    def __init__(
        self,
        *,
        store: InviteTokenStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        config: InviteTokenConfig = DEFAULT_INVITE_TOKEN_CONFIG,
    ) -> None:
        """Initialize the sweeper.

        Args:
            store: The invite token store to sweep.
            time_authority: Clock for sweep latency measurement.
            config: Supplies the sweep interval.
        """
        self._store = store
        self._time = time_authority
        self._interval = config.sweep_interval_seconds
        self._is_running = False
        self._task: asyncio.Task[None] | None = None
        self.sweeps_completed = 0
        self.tokens_removed = 0

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        """Check if the sweep loop is active."""
        return self._is_running

    async def sweep_once(self) -> int:
        """Run a single sweep and record its result."""
        removed = await self._store.sweep_expired()
        self.sweeps_completed += 1
        self.tokens_removed += removed
        return removed

    async def start(self) -> None:
        """Start the background sweep loop. Starting twice is a no-op."""
        if self._is_running:
            logger.warning("invite_sweeper_already_running")
            return

        self._is_running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("invite_sweeper_started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Stop the loop and wait for it to finish."""
        if not self._is_running:
            return

        self._is_running = False
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

        logger.info(
            "invite_sweeper_stopped",
            sweeps_completed=self.sweeps_completed,
            tokens_removed=self.tokens_removed,
        )

    async def _loop(self) -> None:
        while self._is_running:
            start = self._time.monotonic()
            try:
                removed = await self.sweep_once()
                logger.debug(
                    "invite_sweep_completed",
                    removed=removed,
                    latency_ms=round((self._time.monotonic() - start) * 1000, 2),
                )
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("invite_sweep_failed", error=str(e), exc_info=True)

            try:
                await asyncio.sleep(self._interval)
            except asyncio.CancelledError:
                break
