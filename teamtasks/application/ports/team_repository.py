"""Team repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from teamtasks.domain.models.team import Team


class TeamRepositoryProtocol(Protocol):
    """Protocol for team storage operations.

    List methods return teams ordered by ascending id.
    """

    async def get(self, team_id: UUID) -> Team | None:
        """Retrieve a team by ID, or None."""
        ...

    async def save(self, team: Team) -> None:
        """Insert or replace a team."""
        ...

    async def delete(self, team_id: UUID) -> bool:
        """Delete a team. Returns True if one was deleted."""
        ...

    async def list_owned_by(self, user_id: UUID) -> list[Team]:
        """Teams whose owner is the user."""
        ...

    async def list_with_member(self, user_id: UUID) -> list[Team]:
        """Teams listing the user as a member."""
        ...
