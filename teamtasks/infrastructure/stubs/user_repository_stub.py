"""User repository stub implementation.

In-memory implementation of UserRepositoryProtocol over InMemoryStorage.
Enforces email uniqueness on save, the way a unique index would.

WARNING: This stub is NOT for production use.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from teamtasks.application.ports.user_repository import UserRepositoryProtocol
from teamtasks.domain.errors import EmailAlreadyRegisteredError
from teamtasks.domain.models.user import User, normalize_email
from teamtasks.infrastructure.stubs.in_memory_storage import InMemoryStorage


class UserRepositoryStub(UserRepositoryProtocol):
    """In-memory stub implementation of UserRepositoryProtocol."""

    def __init__(self, storage: InMemoryStorage | None = None) -> None:
        """Initialize the stub, sharing storage when given."""
        self._storage = storage if storage is not None else InMemoryStorage()

    async def get(self, user_id: UUID) -> User | None:
        self._storage.check_failure("users.get")
        return self._storage.users.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        self._storage.check_failure("users.get_by_email")
        wanted = normalize_email(email)
        for user in self._storage.users.values():
            if user.email == wanted:
                return user
        return None

    async def list_by_ids(self, user_ids: Iterable[UUID]) -> list[User]:
        self._storage.check_failure("users.list_by_ids")
        found = [self._storage.users[uid] for uid in set(user_ids) if uid in self._storage.users]
        return sorted(found, key=lambda u: u.id)

    async def save(self, user: User) -> None:
        """Insert or replace a user.

        Raises:
            EmailAlreadyRegisteredError: If another user holds the email.
        """
        self._storage.check_failure("users.save")
        for existing in self._storage.users.values():
            if existing.email == user.email and existing.id != user.id:
                raise EmailAlreadyRegisteredError(user.email)
        self._storage.users[user.id] = user

    async def delete(self, user_id: UUID) -> bool:
        self._storage.check_failure("users.delete")
        return self._storage.users.pop(user_id, None) is not None
