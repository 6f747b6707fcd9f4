"""Time Authority Protocol - interface for consistent timestamp provisioning.

All services that need timestamps (token expiry, task updated_at) inject
a TimeAuthorityProtocol implementation instead of calling datetime.now()
directly. Tests inject FakeTimeAuthority for deterministic behavior.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    Example usage:
        class MyService:
            def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
                self._time = time_authority

            def process(self) -> None:
                now = self._time.utcnow()  # NOT datetime.now()
    """

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time.

        Returns:
            Current timezone-aware datetime in UTC.
        """
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value for measuring elapsed time.

        Returns:
            Monotonically increasing float value (in seconds). Only
            differences are meaningful.
        """
        ...
