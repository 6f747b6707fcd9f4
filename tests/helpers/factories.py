"""Type aliases for the factory fixtures in conftest.py."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from teamtasks.domain.models.team import Team
from teamtasks.domain.models.user import User

MakeUser = Callable[..., Awaitable[User]]
MakeTeam = Callable[..., Awaitable[Team]]
