"""Core configuration for invite tokens and storage retries.

This module defines configuration with environment variable overrides
for production tuning. Invalid environment values fall back to the
defaults; invalid explicit values raise ValueError.

Environment Variables (Invite Tokens):
- INVITE_TOKEN_TTL_HOURS: Token lifetime from issuance (default: 24)
- INVITE_TOKEN_SWEEP_INTERVAL: Seconds between expiry sweeps (default: 300)
- INVITE_TOKEN_BYTES: Random bytes per token (default: 32)

Environment Variables (Storage Retry):
- STORAGE_RETRY_MAX_ATTEMPTS: Attempts including the first (default: 3)
- STORAGE_RETRY_BASE_DELAY: Backoff base in seconds (default: 0.1)
- STORAGE_RETRY_MAX_DELAY: Backoff cap in seconds (default: 2.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class InviteTokenConfig:
    """Configuration for the invite token store.

    Attributes:
        ttl_hours: Hours from issuance until a token expires.
                  Default: 24 hours.
        sweep_interval_seconds: Seconds between periodic expiry sweeps.
                               Default: 300 seconds.
        token_bytes: Random bytes used to generate each token.
                    Default: 32 (43 URL-safe characters).
    """

    ttl_hours: int = 24
    sweep_interval_seconds: float = 300.0
    token_bytes: int = 32

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.ttl_hours < 1:
            raise ValueError(f"ttl_hours must be positive, got {self.ttl_hours}")
        if self.sweep_interval_seconds <= 0:
            raise ValueError(
                "sweep_interval_seconds must be positive, "
                f"got {self.sweep_interval_seconds}"
            )
        if self.token_bytes < 16:
            raise ValueError(f"token_bytes must be at least 16, got {self.token_bytes}")

    @property
    def ttl(self) -> timedelta:
        """Token lifetime as a timedelta."""
        return timedelta(hours=self.ttl_hours)

    @classmethod
    def from_environment(cls) -> InviteTokenConfig:
        """Create config from environment variables with defaults.

        Returns:
            InviteTokenConfig with values from environment or defaults.
        """
        return cls(
            ttl_hours=_get_int_env("INVITE_TOKEN_TTL_HOURS", 24),
            sweep_interval_seconds=_get_float_env("INVITE_TOKEN_SWEEP_INTERVAL", 300.0),
            token_bytes=_get_int_env("INVITE_TOKEN_BYTES", 32),
        )


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retrying infrastructure failures.

    Only InfrastructureError is retried; every other error kind is
    terminal for the request.

    Attributes:
        max_attempts: Total attempts including the first. Default: 3.
        base_delay_seconds: Delay before the second attempt. Default: 0.1.
        max_delay_seconds: Cap for exponential backoff. Default: 2.0.
    """

    max_attempts: int = 3
    base_delay_seconds: float = 0.1
    max_delay_seconds: float = 2.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_delay_seconds < 0:
            raise ValueError(
                f"base_delay_seconds must be non-negative, got {self.base_delay_seconds}"
            )
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError(
                f"max_delay_seconds ({self.max_delay_seconds}) must be at least "
                f"base_delay_seconds ({self.base_delay_seconds})"
            )

    @classmethod
    def from_environment(cls) -> RetryConfig:
        """Create config from environment variables with defaults.

        Returns:
            RetryConfig with values from environment or defaults.
        """
        return cls(
            max_attempts=_get_int_env("STORAGE_RETRY_MAX_ATTEMPTS", 3),
            base_delay_seconds=_get_float_env("STORAGE_RETRY_BASE_DELAY", 0.1),
            max_delay_seconds=_get_float_env("STORAGE_RETRY_MAX_DELAY", 2.0),
        )


# Default production configs
DEFAULT_INVITE_TOKEN_CONFIG = InviteTokenConfig()
DEFAULT_RETRY_CONFIG = RetryConfig()

# Testing configs with short intervals for unit tests
TEST_INVITE_TOKEN_CONFIG = InviteTokenConfig(
    ttl_hours=1,
    sweep_interval_seconds=0.01,
    token_bytes=16,
)
TEST_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    base_delay_seconds=0.0,
    max_delay_seconds=0.0,
)
