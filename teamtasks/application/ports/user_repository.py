"""User repository port.

Defines the storage contract for users. Implementations may be a SQL
database, an in-memory stub, or any other backend; the core only relies
on this protocol.

Developer Golden Rules:
1. FAIL LOUD - Repositories raise InfrastructureError on backend failures
2. NO AUTHORIZATION - Repositories store; services authorize
3. FRESH READS - No caching across requests; membership changes must
   be visible to the next authorization decision
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from teamtasks.domain.models.user import User


class UserRepositoryProtocol(Protocol):
    """Protocol for user storage operations."""

    async def get(self, user_id: UUID) -> User | None:
        """Retrieve a user by ID.

        Returns:
            The user if found, None otherwise.
        """
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by normalized email.

        Returns:
            The user if found, None otherwise.
        """
        ...

    async def list_by_ids(self, user_ids: Iterable[UUID]) -> list[User]:
        """Retrieve the users that exist among the given IDs."""
        ...

    async def save(self, user: User) -> None:
        """Insert or replace a user.

        Raises:
            EmailAlreadyRegisteredError: If another user holds the email.
        """
        ...

    async def delete(self, user_id: UUID) -> bool:
        """Delete a user.

        Returns:
            True if a user was deleted, False if none existed.
        """
        ...
