"""Team repository stub implementation.

WARNING: This stub is NOT for production use.
"""

from __future__ import annotations

from uuid import UUID

from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.domain.models.team import Team
from teamtasks.infrastructure.stubs.in_memory_storage import InMemoryStorage


class TeamRepositoryStub(TeamRepositoryProtocol):
    """In-memory stub implementation of TeamRepositoryProtocol.

    List results are ordered by ascending team id.
    """

    def __init__(self, storage: InMemoryStorage | None = None) -> None:
        """Initialize the stub, sharing storage when given."""
        self._storage = storage if storage is not None else InMemoryStorage()

    async def get(self, team_id: UUID) -> Team | None:
        self._storage.check_failure("teams.get")
        return self._storage.teams.get(team_id)

    async def save(self, team: Team) -> None:
        self._storage.check_failure("teams.save")
        self._storage.teams[team.id] = team

    async def delete(self, team_id: UUID) -> bool:
        self._storage.check_failure("teams.delete")
        return self._storage.teams.pop(team_id, None) is not None

    async def list_owned_by(self, user_id: UUID) -> list[Team]:
        self._storage.check_failure("teams.list_owned_by")
        return sorted(
            (t for t in self._storage.teams.values() if t.owner_id == user_id),
            key=lambda t: t.id,
        )

    async def list_with_member(self, user_id: UUID) -> list[Team]:
        self._storage.check_failure("teams.list_with_member")
        return sorted(
            (t for t in self._storage.teams.values() if user_id in t.member_ids),
            key=lambda t: t.id,
        )
