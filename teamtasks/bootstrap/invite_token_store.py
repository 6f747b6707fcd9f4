"""Bootstrap wiring for invite token store dependencies.

The store lives exactly as long as the process-wide container. Callers
obtain it here instead of constructing their own, so every redemption
goes through the same lock.
"""

from __future__ import annotations

from teamtasks.application.ports.invite_token_store import InviteTokenStoreProtocol
from teamtasks.bootstrap.container import get_container, reset_container


async def get_invite_token_store() -> InviteTokenStoreProtocol:
    """Get the process-wide invite token store."""
    return (await get_container()).invite_store


def reset_invite_token_store() -> None:
    """Drop the store along with the container (for testing)."""
    reset_container()
