"""Membership resolver: effective teams and reachable users per actor.

Every call reads current repository state. Nothing is cached across
requests, so a join, leave, or team deletion is reflected in the very
next authorization decision.

Shared-team tie-break:
    When several teams are shared between two users, the lowest team id
    wins. Team ids are UUIDv7, so the lowest id is the oldest team. The
    full candidate list is returned alongside the choice so the caller
    can disclose it.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.domain.models.team import Team
from teamtasks.domain.models.user import Actor


@dataclass(frozen=True)
class SharedTeamSelection:
    """A deterministic choice among shared teams.

    Attributes:
        team_id: The selected (lowest) team id.
        candidates: Every eligible team id, ascending.
    """

    team_id: UUID
    candidates: tuple[UUID, ...]

    @property
    def was_ambiguous(self) -> bool:
        """True when more than one team could have been chosen."""
        return len(self.candidates) > 1


def select_lowest(team_ids: list[UUID]) -> SharedTeamSelection | None:
    """Apply the lowest-id tie-break to a list of team ids."""
    if not team_ids:
        return None
    ordered = tuple(sorted(set(team_ids)))
    return SharedTeamSelection(team_id=ordered[0], candidates=ordered)


def _shares(team: Team, user_a: UUID, user_b: UUID) -> bool:
    """Both members, or one owns and the other is a member."""
    if team.is_member(user_a) and team.is_member(user_b):
        return True
    if team.is_owner(user_a) and team.is_member(user_b):
        return True
    return team.is_owner(user_b) and team.is_member(user_a)


class MembershipResolver:
    """Derives team membership and user reachability from storage.

    Example:
        >>> resolver = MembershipResolver(team_repo=team_repo)
        >>> team_ids = await resolver.teams_owned_or_joined(user_id)
    """

    def __init__(self, team_repo: TeamRepositoryProtocol) -> None:
        """Initialize the resolver.

        Args:
            team_repo: Repository for team lookups.
        """
        self._team_repo = team_repo

    async def teams_owned(self, user_id: UUID) -> list[Team]:
        """Teams the user owns, ascending by id."""
        return sorted(await self._team_repo.list_owned_by(user_id), key=lambda t: t.id)

    async def teams_for(self, user_id: UUID) -> list[Team]:
        """Teams the user owns or is a member of, de-duplicated, ascending by id."""
        owned = await self._team_repo.list_owned_by(user_id)
        joined = await self._team_repo.list_with_member(user_id)
        by_id = {team.id: team for team in [*owned, *joined]}
        return [by_id[team_id] for team_id in sorted(by_id)]

    async def teams_owned_or_joined(self, user_id: UUID) -> frozenset[UUID]:
        """Union of teams where the user is owner or member."""
        return frozenset(team.id for team in await self.teams_for(user_id))

    async def users_reachable_by(self, actor: Actor) -> frozenset[UUID]:
        """Users the actor can see.

        An Admin reaches every member of every team it owns or joined.
        A Member reaches only itself.
        """
        if not actor.is_admin:
            return frozenset({actor.id})

        reachable: set[UUID] = set()
        for team in await self.teams_for(actor.id):
            reachable.update(team.member_ids)
        return frozenset(reachable)

    async def shared_team_records(self, user_a: UUID, user_b: UUID) -> list[Team]:
        """Teams shared by two users, ascending by id."""
        return [team for team in await self.teams_for(user_a) if _shares(team, user_a, user_b)]

    async def shared_teams(self, user_a: UUID, user_b: UUID) -> list[UUID]:
        """Ids of teams where both users are present, ascending.

        Present means both are members, or one is owner and the other
        is a member.
        """
        return [team.id for team in await self.shared_team_records(user_a, user_b)]

    async def select_shared_team(
        self, user_a: UUID, user_b: UUID
    ) -> SharedTeamSelection | None:
        """Pick the lowest shared team id, or None when nothing is shared."""
        return select_lowest(await self.shared_teams(user_a, user_b))

    async def is_member(self, user_id: UUID, team_id: UUID) -> bool:
        """Check listed membership against current state (False if no team)."""
        team = await self._team_repo.get(team_id)
        return team is not None and team.is_member(user_id)

    @staticmethod
    def has_team_access(actor: Actor, team: Team) -> bool:
        """Team access: an Admin must own the team, a Member must belong to it."""
        if actor.is_admin:
            return team.is_owner(actor.id)
        return team.is_member(actor.id)
