"""User management: creation, profile updates, visibility and deletion.

Visibility follows the membership resolver: an Admin sees the members
of its teams, a Member sees only itself.

Creating a user (Admin only) places it in the Admin's lowest-id owned
team. Updating a profile needs the same visibility as reading it, and an
email change must not collide with another user's email.

Deleting a user:
    1. Only an Admin may delete, and only a user it can see.
    2. Admins are never deleted through this path.
    3. A user that still owns a team cannot be deleted.
    4. The user is removed from every team it belongs to, its tasks are
       deleted, then the user record goes. All in one transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any
from uuid import UUID

from structlog import get_logger

from teamtasks.application.ports.task_repository import TaskRepositoryProtocol
from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.application.ports.transaction import TransactionManagerProtocol
from teamtasks.application.ports.user_repository import UserRepositoryProtocol
from teamtasks.application.services.membership_resolver import MembershipResolver
from teamtasks.domain.errors import (
    AdminHasNoTeamError,
    EmailAlreadyRegisteredError,
    RegistrationValidationError,
    TeamManagementForbiddenError,
    TeamTasksError,
    UserAccessDeniedError,
    UserCreationForbiddenError,
    UserDeletionForbiddenError,
    UserNotFoundError,
    UserStillOwnsTeamError,
)
from teamtasks.domain.models.task_patch import UNSET, Maybe
from teamtasks.domain.models.user import Actor, User, UserRole, normalize_email

logger = get_logger(__name__)


@dataclass(frozen=True)
class UserCreateRequest:
    """A user created directly by an Admin.

    Attributes:
        name: Display name.
        email: Email address (normalized before storage).
        credential_hash: Opaque credential hash from the auth layer.
        role: Role of the new user.
    """

    name: str
    email: str
    credential_hash: str
    role: UserRole = UserRole.MEMBER


@dataclass(frozen=True)
class UserProfilePatch:
    """Profile fields to change. Fields left UNSET are untouched."""

    name: Maybe[str] = UNSET
    email: Maybe[str] = UNSET
    credential_hash: Maybe[str] = UNSET


class UserManagementService:
    """Creates, updates, lists, reads, and deletes users on behalf of an actor."""

    def __init__(
        self,
        user_repo: UserRepositoryProtocol,
        team_repo: TeamRepositoryProtocol,
        task_repo: TaskRepositoryProtocol,
        resolver: MembershipResolver,
        transactions: TransactionManagerProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._users = user_repo
        self._teams = team_repo
        self._tasks = task_repo
        self._resolver = resolver
        self._transactions = transactions
        self._time = time_authority

    async def list_visible_users(self, actor: Actor) -> list[User]:
        """Users the actor can see (always including itself), ascending by id."""
        reachable = await self._resolver.users_reachable_by(actor)
        return await self._users.list_by_ids(reachable | {actor.id})

    async def team_members(self, actor: Actor) -> list[User]:
        """Distinct members of the teams the acting Admin owns.

        Raises:
            TeamManagementForbiddenError: The actor is not an Admin.
        """
        if not actor.is_admin:
            raise TeamManagementForbiddenError(actor.id, None, "list team members")
        owned = await self._resolver.teams_owned(actor.id)
        member_ids = {member for team in owned for member in team.member_ids}
        return await self._users.list_by_ids(member_ids)

    async def get_user(self, actor: Actor, user_id: UUID) -> User:
        """Load a user: the actor itself, or a member of one of its teams (Admin).

        Raises:
            UserAccessDeniedError: The user is not visible to the actor.
            UserNotFoundError: The visible user no longer exists.
        """
        if user_id != actor.id:
            reachable = await self._resolver.users_reachable_by(actor)
            if user_id not in reachable:
                logger.warning(
                    "user_view_denied", actor_id=str(actor.id), user_id=str(user_id)
                )
                raise UserAccessDeniedError(actor.id, user_id)

        user = await self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def create_user(self, actor: Actor, request: UserCreateRequest) -> User:
        """Create a user in the acting Admin's lowest-id owned team.

        Raises:
            UserCreationForbiddenError: The actor is not an Admin.
            RegistrationValidationError: A required field is missing.
            EmailAlreadyRegisteredError: The email is taken.
            AdminHasNoTeamError: The Admin owns no team.
        """
        log = logger.bind(actor_id=str(actor.id), operation="create_user")

        async def work() -> tuple[User, UUID]:
            if not actor.is_admin:
                raise UserCreationForbiddenError(actor.id)

            missing = []
            if not request.name.strip():
                missing.append("name")
            if not request.email.strip():
                missing.append("email")
            if not request.credential_hash:
                missing.append("password")
            if missing:
                raise RegistrationValidationError(missing)

            email = normalize_email(request.email)
            if await self._users.get_by_email(email) is not None:
                raise EmailAlreadyRegisteredError(email)

            owned = await self._resolver.teams_owned(actor.id)
            if not owned:
                raise AdminHasNoTeamError(actor.id)
            team = owned[0]

            now = self._time.utcnow()
            user = User(
                name=request.name.strip(),
                email=email,
                credential_hash=request.credential_hash,
                role=request.role,
                created_at=now,
            )
            await self._users.save(user)
            await self._teams.save(team.with_member(user.id, now))
            return user, team.id

        try:
            user, team_id = await self._transactions.run(work)
        except TeamTasksError as exc:
            log.warning("user_create_rejected", error=type(exc).__name__)
            raise

        log.info("user_created", user_id=str(user.id), role=user.role.value, team_id=str(team_id))
        return user

    async def update_user(self, actor: Actor, user_id: UUID, patch: UserProfilePatch) -> User:
        """Apply a profile patch to a user the actor can see.

        The role is not part of a profile and cannot be changed here.

        Raises:
            UserAccessDeniedError: The user is not visible to the actor.
            UserNotFoundError: No such user.
            RegistrationValidationError: A supplied field is blank.
            EmailAlreadyRegisteredError: Another user holds the new email.
        """
        log = logger.bind(actor_id=str(actor.id), user_id=str(user_id), operation="update_user")

        changed: list[str] = []

        async def work() -> User:
            user = await self.get_user(actor, user_id)
            changes: dict[str, Any] = {}
            missing = []

            if isinstance(patch.name, str):
                if patch.name.strip():
                    changes["name"] = patch.name.strip()
                else:
                    missing.append("name")
            if isinstance(patch.email, str):
                if patch.email.strip():
                    changes["email"] = normalize_email(patch.email)
                else:
                    missing.append("email")
            if isinstance(patch.credential_hash, str):
                if patch.credential_hash:
                    changes["credential_hash"] = patch.credential_hash
                else:
                    missing.append("password")
            if missing:
                raise RegistrationValidationError(missing)

            email = changes.get("email")
            if email is not None and email != user.email:
                holder = await self._users.get_by_email(email)
                if holder is not None and holder.id != user.id:
                    raise EmailAlreadyRegisteredError(email)

            updated = replace(user, **changes)
            changed.extend(sorted(k for k in changes if getattr(user, k) != changes[k]))
            if changed:
                await self._users.save(updated)
            return updated

        try:
            updated = await self._transactions.run(work)
        except TeamTasksError as exc:
            log.warning("user_update_rejected", error=type(exc).__name__)
            raise

        log.info("user_updated", fields=changed)
        return updated

    async def delete_user(self, actor: Actor, user_id: UUID) -> None:
        """Delete a Member the acting Admin can see.

        Raises:
            UserDeletionForbiddenError: The actor is not an Admin, or the
                target is an Admin.
            UserAccessDeniedError: The target is not in the actor's teams.
            UserNotFoundError: No such user.
            UserStillOwnsTeamError: The target still owns a team.
        """
        log = logger.bind(actor_id=str(actor.id), user_id=str(user_id), operation="delete_user")

        async def work() -> None:
            if not actor.is_admin:
                raise UserDeletionForbiddenError(actor.id, user_id, "Only admins can delete users")
            if user_id == actor.id:
                raise UserDeletionForbiddenError(actor.id, user_id, "You cannot delete yourself")

            reachable = await self._resolver.users_reachable_by(actor)
            if user_id not in reachable:
                raise UserAccessDeniedError(actor.id, user_id)

            user = await self._users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            if user.is_admin:
                raise UserDeletionForbiddenError(actor.id, user_id, "Cannot delete admin users")

            owned = await self._resolver.teams_owned(user_id)
            if owned:
                raise UserStillOwnsTeamError(user_id, [team.id for team in owned])

            now = self._time.utcnow()
            for team in await self._teams.list_with_member(user_id):
                await self._teams.save(team.without_member(user_id, now))
            for task in await self._tasks.list_assigned_to([user_id]):
                await self._tasks.delete(task.id)
            await self._users.delete(user_id)

        try:
            await self._transactions.run(work)
        except TeamTasksError as exc:
            log.warning("user_delete_rejected", error=type(exc).__name__)
            raise

        log.info("user_deleted")
