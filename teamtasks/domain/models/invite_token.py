"""Invite token domain models.

Invite tokens are never persisted. A token grants membership in one
team, is issued by one Admin, and is consumed exactly once by a
successful registration, revoked by its issuer, or swept after expiry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class InviteTokenRejection(Enum):
    """Why an invite token could not be consumed.

    Used for logging only: every rejection surfaces the same public
    message so callers cannot tell which tokens exist.
    """

    UNKNOWN = "unknown"
    EXPIRED = "expired"
    ISSUER_REVOKED = "issuer_revoked"
    TEAM_MISSING = "team_missing"


@dataclass(frozen=True)
class InviteToken:
    """An issued invitation token.

    Attributes:
        token: Random URL-safe secret.
        admin_id: The issuing Admin.
        team_id: Team the holder will join.
        issued_at: Issuance timestamp (UTC).
        expires_at: Expiry timestamp (UTC).
        purpose: Optional label shown in management views.
    """

    token: str
    admin_id: UUID
    team_id: UUID
    issued_at: datetime
    expires_at: datetime
    purpose: str | None = None

    def is_expired(self, now: datetime) -> bool:
        """A token is expired strictly after its expiry instant."""
        return now > self.expires_at

    @property
    def redacted(self) -> str:
        """Short prefix safe to write to logs."""
        return f"{self.token[:6]}..."


@dataclass(frozen=True)
class InviteGrant:
    """Admission granted by consuming an invite token."""

    admin_id: UUID
    team_id: UUID


@dataclass(frozen=True)
class InviteTokenSummary:
    """Non-consuming view of a token for its issuing Admin."""

    token: str
    expires_at: datetime
    purpose: str | None = None


@dataclass(frozen=True)
class InviteTokenStats:
    """Counts of tokens held by the store."""

    total: int
    expired: int

    @property
    def valid(self) -> int:
        """Tokens that have not expired yet."""
        return self.total - self.expired
