"""Invite token store protocol.

Application port for the ephemeral, process-wide registry of team
invitation tokens. The registration flow depends on this protocol, not
on the concrete store.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from teamtasks.domain.models.invite_token import (
    InviteGrant,
    InviteToken,
    InviteTokenStats,
    InviteTokenSummary,
)


class InviteTokenStoreProtocol(Protocol):
    """Protocol for invite token store operations."""

    async def issue(
        self,
        admin_id: UUID,
        team_id: UUID | None = None,
        purpose: str | None = None,
    ) -> InviteToken:
        """Issue a token admitting its holder to one of the admin's teams."""
        ...

    async def validate_and_consume(self, token: str) -> InviteGrant:
        """Atomically validate and remove a token, returning its grant."""
        ...

    async def take(self, token: str) -> InviteToken:
        """Atomically validate a token and hold it until confirmed or restored."""
        ...

    async def confirm(self, record: InviteToken) -> None:
        """Forget a taken token once its consuming sequence committed."""
        ...

    async def restore(self, record: InviteToken) -> None:
        """Put back a taken token unless it was revoked meanwhile."""
        ...

    async def revoke(self, token: str, admin_id: UUID) -> bool:
        """Remove a token issued by admin_id. False if absent or not theirs."""
        ...

    async def sweep_expired(self) -> int:
        """Remove expired tokens and return how many were removed."""
        ...

    async def list_for_admin(self, admin_id: UUID) -> list[InviteTokenSummary]:
        """List an admin's tokens without consuming them."""
        ...

    async def stats(self) -> InviteTokenStats:
        """Count held tokens."""
        ...
