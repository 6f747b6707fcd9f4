"""Team domain model.

A team has exactly one owner (an Admin) and a set of member users.
The owner is not automatically a member unless added explicitly; the
default team created at Admin registration lists its owner as member.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from uuid import UUID

from uuid6 import uuid7


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Team:
    """A team of users owned by one Admin.

    Attributes:
        id: UUIDv7 unique identifier (time ordered, so the lowest id
            is the oldest team).
        name: Team name.
        owner_id: The owning Admin.
        member_ids: Members of the team.
        description: Optional free-text description.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).
    """

    name: str
    owner_id: UUID
    member_ids: frozenset[UUID] = frozenset()
    description: str | None = None
    id: UUID = field(default_factory=uuid7)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def is_member(self, user_id: UUID) -> bool:
        """Check whether the user is listed as a member."""
        return user_id in self.member_ids

    def is_owner(self, user_id: UUID) -> bool:
        """Check whether the user owns the team."""
        return self.owner_id == user_id

    def includes(self, user_id: UUID) -> bool:
        """Check whether the user is present in the team as owner or member."""
        return self.is_owner(user_id) or self.is_member(user_id)

    def with_member(self, user_id: UUID, at: datetime) -> Team:
        """Return a copy with the user added to the members."""
        return replace(self, member_ids=self.member_ids | {user_id}, updated_at=at)

    def without_member(self, user_id: UUID, at: datetime) -> Team:
        """Return a copy with the user removed from the members."""
        return replace(self, member_ids=self.member_ids - {user_id}, updated_at=at)


def default_team_for(owner_id: UUID, owner_name: str, at: datetime) -> Team:
    """Build the default team created when an Admin registers."""
    return Team(
        name=f"{owner_name}'s Team",
        description=f"Default team for {owner_name}",
        owner_id=owner_id,
        member_ids=frozenset({owner_id}),
        created_at=at,
        updated_at=at,
    )
