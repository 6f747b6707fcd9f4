"""User domain model.

A User is either an Admin (may own teams, invite members, and manage
tasks across owned teams) or a Member (limited to personal tasks and
tasks assigned within teams they belong to).

The credential hash is opaque to this core: hashing and verification
happen in the authentication layer before an actor reaches any service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from uuid6 import uuid7


class UserRole(Enum):
    """Role resolved for an authenticated user."""

    ADMIN = "admin"
    MEMBER = "member"


def normalize_email(email: str) -> str:
    """Normalize an email address for uniqueness comparisons."""
    return email.strip().lower()


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class User:
    """A registered user.

    Attributes:
        id: UUIDv7 unique identifier.
        name: Display name.
        email: Unique, normalized email address.
        credential_hash: Opaque credential hash (never interpreted here).
        role: ADMIN or MEMBER.
        created_at: Registration timestamp (UTC).
    """

    name: str
    email: str
    credential_hash: str
    role: UserRole = UserRole.MEMBER
    id: UUID = field(default_factory=uuid7)
    created_at: datetime = field(default_factory=_utc_now)

    @property
    def is_admin(self) -> bool:
        """Check whether this user holds the Admin role."""
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class Actor:
    """An already-authenticated caller with a resolved role.

    Services receive an Actor rather than a full User: the transport
    layer authenticates and resolves the role, the core only authorizes.
    """

    id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        """Check whether the actor holds the Admin role."""
        return self.role == UserRole.ADMIN

    @classmethod
    def of(cls, user: User) -> Actor:
        """Build an actor from a loaded user."""
        return cls(id=user.id, role=user.role)
