"""
Pytest configuration and shared fixtures for Team Tasks tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Service tests run against the in-memory stubs wired by build_services()
- Time-dependent tests use FakeTimeAuthority, never the system clock
- Unit tests go in tests/unit/
"""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from teamtasks.bootstrap.container import ServiceContainer, build_services
from teamtasks.config.core_config import TEST_INVITE_TOKEN_CONFIG, TEST_RETRY_CONFIG
from teamtasks.domain.models.team import Team
from teamtasks.domain.models.user import User, UserRole
from tests.helpers import FakeTimeAuthority, SequenceTokenGenerator
from tests.helpers.factories import MakeTeam, MakeUser


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from teamtasks import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Provide a FakeTimeAuthority frozen at 2026-01-01T00:00:00 UTC."""
    return FakeTimeAuthority()


@pytest.fixture
def token_generator() -> SequenceTokenGenerator:
    """Provide a predictable invite token generator."""
    return SequenceTokenGenerator()


@pytest.fixture
def services(
    fake_time_authority: FakeTimeAuthority,
    token_generator: SequenceTokenGenerator,
) -> ServiceContainer:
    """Wire every service over fresh in-memory storage and the fake clock."""
    return build_services(
        time_authority=fake_time_authority,
        token_generator=token_generator,
        invite_config=TEST_INVITE_TOKEN_CONFIG,
        retry_config=TEST_RETRY_CONFIG,
    )


@pytest.fixture
def make_user(services: ServiceContainer) -> MakeUser:
    """Factory saving a user directly to storage."""
    counter = 0

    async def _make(name: str | None = None, role: UserRole = UserRole.MEMBER) -> User:
        nonlocal counter
        counter += 1
        name = name or f"User {counter}"
        user = User(
            name=name,
            email=f"{name.lower().replace(' ', '.')}.{counter}@example.com",
            credential_hash="hashed-secret",
            role=role,
        )
        await services.users.save(user)
        return user

    return _make


@pytest.fixture
def make_team(services: ServiceContainer) -> MakeTeam:
    """Factory saving a team directly to storage."""

    async def _make(
        owner: User,
        members: Iterable[User] = (),
        name: str = "Team",
    ) -> Team:
        team = Team(name=name, owner_id=owner.id, member_ids=frozenset(m.id for m in members))
        await services.teams.save(team)
        return team

    return _make
