"""Configuration module for Team Tasks.

Available Configurations:
- InviteTokenConfig: Invite token lifetime and sweep interval
- RetryConfig: Bounded retries for infrastructure failures
"""

from teamtasks.config.core_config import (
    DEFAULT_INVITE_TOKEN_CONFIG,
    DEFAULT_RETRY_CONFIG,
    TEST_INVITE_TOKEN_CONFIG,
    TEST_RETRY_CONFIG,
    InviteTokenConfig,
    RetryConfig,
)

__all__ = [
    "InviteTokenConfig",
    "RetryConfig",
    "DEFAULT_INVITE_TOKEN_CONFIG",
    "DEFAULT_RETRY_CONFIG",
    "TEST_INVITE_TOKEN_CONFIG",
    "TEST_RETRY_CONFIG",
]
