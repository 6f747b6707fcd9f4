"""System clock implementation of TimeAuthorityProtocol.

This adapter is the only production code allowed to read the wall
clock directly; everything else receives time through the protocol.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

from teamtasks.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Time authority backed by the host clock."""

    def utcnow(self) -> datetime:
        """Return the current timezone-aware UTC time."""
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        """Return time.monotonic()."""
        return time.monotonic()
