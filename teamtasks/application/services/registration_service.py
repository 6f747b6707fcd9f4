"""Registration service: create a user and place it in a team.

Registration is a small sequential state machine inside one
transaction:

    VALIDATE      required fields present, email free, invite token
                  consumed (if one was supplied)
    CREATE_USER   MEMBER when invited, ADMIN otherwise
    RESOLVE_TEAM  invited -> join the invitation's team
                  otherwise -> create the default team, owner and member
    COMMIT        transaction commits

If anything fails after the invite token was consumed (including
cancellation), the transaction rolls back and the token is put back in
the store, unless its issuer revoked it meanwhile. A token is never left
consumed without an account.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from structlog import get_logger

from teamtasks.application.ports.invite_token_store import InviteTokenStoreProtocol
from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.application.ports.transaction import TransactionManagerProtocol
from teamtasks.application.ports.user_repository import UserRepositoryProtocol
from teamtasks.domain.errors import (
    EmailAlreadyRegisteredError,
    RegistrationValidationError,
    TeamNotFoundError,
    TeamTasksError,
)
from teamtasks.domain.models.invite_token import InviteToken
from teamtasks.domain.models.team import Team, default_team_for
from teamtasks.domain.models.user import User, UserRole, normalize_email

logger = get_logger(__name__)


class RegistrationStep(Enum):
    """Steps of the registration sequence, in order."""

    VALIDATE = "validate"
    CREATE_USER = "create_user"
    RESOLVE_TEAM = "resolve_team"
    COMMIT = "commit"


@dataclass(frozen=True)
class RegistrationRequest:
    """A new account request.

    Attributes:
        name: Display name.
        email: Email address (normalized before storage).
        credential_hash: Opaque credential hash from the auth layer.
        invite_token: Optional team invitation token.
    """

    name: str
    email: str
    credential_hash: str
    invite_token: str | None = None


@dataclass(frozen=True)
class RegistrationResult:
    """The created user and the team it was placed in."""

    user: User
    team: Team

    @property
    def joined_existing_team(self) -> bool:
        """True when the user joined through an invitation."""
        return not self.team.is_owner(self.user.id)


class RegistrationService:
    """Registers users, consuming invitations atomically.

    Example:
        >>> service = RegistrationService(users, teams, store, tx, clock)
        >>> result = await service.register(RegistrationRequest(...))
        >>> result.user.role
    """

    def __init__(
        self,
        user_repo: UserRepositoryProtocol,
        team_repo: TeamRepositoryProtocol,
        invite_store: InviteTokenStoreProtocol,
        transactions: TransactionManagerProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize the service.

        Args:
            user_repo: User storage.
            team_repo: Team storage.
            invite_store: Store holding invitation tokens.
            transactions: Transaction boundary for the whole sequence.
            time_authority: Clock for creation timestamps.
        """
        self._users = user_repo
        self._teams = team_repo
        self._invites = invite_store
        self._transactions = transactions
        self._time = time_authority

    @staticmethod
    def _missing_fields(request: RegistrationRequest) -> list[str]:
        missing = []
        if not request.name or not request.name.strip():
            missing.append("name")
        if not request.email or not request.email.strip():
            missing.append("email")
        if not request.credential_hash:
            missing.append("password")
        return missing

    async def register(self, request: RegistrationRequest) -> RegistrationResult:
        """Register a user.

        Args:
            request: The new account request.

        Returns:
            The created user and its team.

        Raises:
            RegistrationValidationError: A required field is missing.
            EmailAlreadyRegisteredError: The email is taken.
            InvalidInviteTokenError: The invite token cannot be redeemed.
            TeamNotFoundError: The invitation's team vanished mid-flight.
        """
        log = logger.bind(operation="register", invited=request.invite_token is not None)
        step = RegistrationStep.VALIDATE
        consumed: InviteToken | None = None

        async def work() -> RegistrationResult:
            nonlocal step, consumed

            # VALIDATE
            step = RegistrationStep.VALIDATE
            missing = self._missing_fields(request)
            if missing:
                raise RegistrationValidationError(missing)
            email = normalize_email(request.email)
            if await self._users.get_by_email(email) is not None:
                raise EmailAlreadyRegisteredError(email)
            if request.invite_token is not None:
                consumed = await self._invites.take(request.invite_token)

            # CREATE_USER
            step = RegistrationStep.CREATE_USER
            now = self._time.utcnow()
            user = User(
                name=request.name.strip(),
                email=email,
                credential_hash=request.credential_hash,
                role=UserRole.MEMBER if consumed is not None else UserRole.ADMIN,
                created_at=now,
            )
            await self._users.save(user)

            # RESOLVE_TEAM
            step = RegistrationStep.RESOLVE_TEAM
            if consumed is not None:
                existing = await self._teams.get(consumed.team_id)
                if existing is None:
                    raise TeamNotFoundError(consumed.team_id)
                team = existing.with_member(user.id, now)
            else:
                team = default_team_for(user.id, user.name, now)
            await self._teams.save(team)

            step = RegistrationStep.COMMIT
            return RegistrationResult(user=user, team=team)

        try:
            result = await self._transactions.run(work)
        except BaseException as exc:
            if consumed is not None:
                await self._invites.restore(consumed)
            if isinstance(exc, TeamTasksError):
                log.warning(
                    "registration_failed",
                    step=step.value,
                    error=type(exc).__name__,
                    token_restored=consumed is not None,
                )
            else:
                log.error(
                    "registration_aborted",
                    step=step.value,
                    error=type(exc).__name__,
                    token_restored=consumed is not None,
                )
            raise

        if consumed is not None:
            await self._invites.confirm(consumed)
        log.info(
            "user_registered",
            user_id=str(result.user.id),
            role=result.user.role.value,
            team_id=str(result.team.id),
            joined_existing_team=result.joined_existing_team,
        )
        return result

    async def redeem_invite(
        self, token: str, new_user: RegistrationRequest
    ) -> RegistrationResult:
        """Register new_user through an invitation token."""
        return await self.register(replace(new_user, invite_token=token))
