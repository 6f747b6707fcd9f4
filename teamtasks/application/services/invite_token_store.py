"""Invite token store: ephemeral, lock-guarded registry of team invitations.

Tokens are held in memory only. Losing them on restart is an accepted
tradeoff: an invitation is cheap to reissue, and a leaked token never
outlives the process.

The store is constructed once per process (see
teamtasks.bootstrap.invite_token_store) and injected where needed. All
access to the token map goes through one asyncio.Lock, so consuming a
token is a single check-expiry + check-validity + delete step: of two
concurrent redemptions of the same token exactly one succeeds.

A token taken by a multi-step sequence (registration) stays in flight
until the sequence confirms or restores it. The issuer may still revoke
it while it is in flight; a revoked token is never restored.

Developer Golden Rules:
1. RE-VERIFY - Issuing re-loads the admin and its teams; caller-supplied
   role flags are not trusted
2. ONE MESSAGE - Every redemption failure carries the same public
   message; the typed reason is for logs only
3. NO SECRETS IN LOGS - Only a short token prefix is ever logged
"""

from __future__ import annotations

import asyncio
from uuid import UUID

from structlog import get_logger

from teamtasks.application.ports.invite_token_store import InviteTokenStoreProtocol
from teamtasks.application.ports.team_repository import TeamRepositoryProtocol
from teamtasks.application.ports.time_authority import TimeAuthorityProtocol
from teamtasks.application.ports.token_generator import TokenGeneratorProtocol
from teamtasks.application.ports.user_repository import UserRepositoryProtocol
from teamtasks.application.services.membership_resolver import MembershipResolver
from teamtasks.config.core_config import DEFAULT_INVITE_TOKEN_CONFIG, InviteTokenConfig
from teamtasks.domain.errors import (
    InvalidInviteTokenError,
    InviteNotAuthorizedError,
    TeamAccessDeniedError,
    TeamNotFoundError,
)
from teamtasks.domain.models.invite_token import (
    InviteGrant,
    InviteToken,
    InviteTokenRejection,
    InviteTokenStats,
    InviteTokenSummary,
)
from teamtasks.domain.models.user import UserRole

logger = get_logger(__name__)

# Attempts to draw a token value that is not already held
_MAX_GENERATION_ATTEMPTS = 5

# Rejections after which the token can never succeed again
_TERMINAL_REJECTIONS = frozenset({InviteTokenRejection.EXPIRED, InviteTokenRejection.TEAM_MISSING})


def _redact(token: str) -> str:
    return f"{token[:6]}..."


class InviteTokenStore(InviteTokenStoreProtocol):
    """In-memory invite token store.

    Thread-safety: Uses an asyncio Lock for every read and write of the
    token maps.

    Attributes:
        _tokens: Map of token value to redeemable InviteToken.
        _in_flight: Tokens taken by a sequence that has not yet confirmed
            or restored them.
        _lock: Async lock serializing all access.
    """

    def __init__(
        self,
        user_repo: UserRepositoryProtocol,
        team_repo: TeamRepositoryProtocol,
        resolver: MembershipResolver,
        time_authority: TimeAuthorityProtocol,
        token_generator: TokenGeneratorProtocol,
        config: InviteTokenConfig = DEFAULT_INVITE_TOKEN_CONFIG,
    ) -> None:
        """Initialize the store.

        Args:
            user_repo: Repository used to re-verify the issuing admin.
            team_repo: Repository used to verify the target team.
            resolver: Membership resolver for the admin's owned teams.
            time_authority: Clock for issuance and expiry.
            token_generator: Source of random token values.
            config: Token lifetime settings.
        """
        self._user_repo = user_repo
        self._team_repo = team_repo
        self._resolver = resolver
        self._time = time_authority
        self._generator = token_generator
        self._config = config
        self._tokens: dict[str, InviteToken] = {}
        self._in_flight: dict[str, InviteToken] = {}
        self._lock = asyncio.Lock()

    async def _require_admin(self, admin_id: UUID) -> None:
        user = await self._user_repo.get(admin_id)
        if user is None:
            raise InviteNotAuthorizedError(admin_id, "issuer not found")
        if user.role != UserRole.ADMIN:
            raise InviteNotAuthorizedError(admin_id, "issuer is not an admin")

    async def _resolve_target_team(self, admin_id: UUID, team_id: UUID | None) -> UUID:
        if team_id is not None:
            team = await self._team_repo.get(team_id)
            if team is None:
                raise TeamNotFoundError(team_id)
            if not team.is_owner(admin_id):
                raise TeamAccessDeniedError(admin_id, team_id)
            return team.id

        owned = await self._resolver.teams_owned(admin_id)
        if not owned:
            raise InviteNotAuthorizedError(admin_id, "admin does not own any teams")
        return owned[0].id

    def _is_held(self, value: str) -> bool:
        return value in self._tokens or value in self._in_flight

    async def issue(
        self,
        admin_id: UUID,
        team_id: UUID | None = None,
        purpose: str | None = None,
    ) -> InviteToken:
        """Issue a token admitting its holder to one of the admin's teams.

        Without team_id the admin's lowest-id owned team is used.

        Args:
            admin_id: The issuing user; must currently be an Admin.
            team_id: Target team the admin owns, or None.
            purpose: Optional label for management views.

        Returns:
            The issued token.

        Raises:
            InviteNotAuthorizedError: Issuer missing, not an Admin, or
                owning no team.
            TeamNotFoundError: The explicit team does not exist.
            TeamAccessDeniedError: The admin does not own the team.
        """
        log = logger.bind(admin_id=str(admin_id))

        try:
            await self._require_admin(admin_id)
            target_team_id = await self._resolve_target_team(admin_id, team_id)
        except (InviteNotAuthorizedError, TeamNotFoundError, TeamAccessDeniedError) as exc:
            log.warning("invite_issue_rejected", error=type(exc).__name__, **exc.context())
            raise

        issued_at = self._time.utcnow()
        async with self._lock:
            value = self._generator.generate()
            attempts = 1
            while self._is_held(value) and attempts < _MAX_GENERATION_ATTEMPTS:
                value = self._generator.generate()
                attempts += 1
            if self._is_held(value):
                raise RuntimeError("Token generator produced only colliding values")

            record = InviteToken(
                token=value,
                admin_id=admin_id,
                team_id=target_team_id,
                issued_at=issued_at,
                expires_at=issued_at + self._config.ttl,
                purpose=purpose,
            )
            self._tokens[value] = record

        log.info(
            "invite_issued",
            team_id=str(target_team_id),
            token=record.redacted,
            expires_at=record.expires_at.isoformat(),
        )
        return record

    async def _consume(self, token: str, hold: bool) -> InviteToken:
        async with self._lock:
            record = self._tokens.get(token)
            if record is None:
                reason = InviteTokenRejection.UNKNOWN
            elif record.is_expired(self._time.utcnow()):
                reason = InviteTokenRejection.EXPIRED
            else:
                issuer = await self._user_repo.get(record.admin_id)
                team = await self._team_repo.get(record.team_id)
                if issuer is None or issuer.role != UserRole.ADMIN:
                    reason = InviteTokenRejection.ISSUER_REVOKED
                elif team is None:
                    reason = InviteTokenRejection.TEAM_MISSING
                else:
                    del self._tokens[token]
                    if hold:
                        self._in_flight[token] = record
                    logger.info(
                        "invite_consumed",
                        token=record.redacted,
                        team_id=str(record.team_id),
                    )
                    return record

            if record is not None and reason in _TERMINAL_REJECTIONS:
                del self._tokens[token]

        logger.warning("invite_rejected", token=_redact(token), reason=reason.value)
        raise InvalidInviteTokenError(reason)

    async def take(self, token: str) -> InviteToken:
        """Atomically validate a token and move it in flight.

        Checks, in order: existence, expiry, the issuer still being an
        Admin, and the team still existing. Expired tokens and tokens
        whose team is gone are deleted. A token whose issuer lost the
        Admin role is kept, so it works again if the role comes back.

        The caller must later either confirm() or restore() the record.

        Raises:
            InvalidInviteTokenError: On any failure (same public message).
        """
        return await self._consume(token, hold=True)

    async def validate_and_consume(self, token: str) -> InviteGrant:
        """Atomically validate and remove a token, returning its grant.

        Raises:
            InvalidInviteTokenError: Unknown, expired, issuer no longer an
                Admin, or team gone.
        """
        record = await self._consume(token, hold=False)
        return InviteGrant(admin_id=record.admin_id, team_id=record.team_id)

    async def confirm(self, record: InviteToken) -> None:
        """Forget a taken token once its consuming sequence committed."""
        async with self._lock:
            self._in_flight.pop(record.token, None)

    async def restore(self, record: InviteToken) -> None:
        """Put back a token whose consuming sequence was rolled back.

        A token revoked while in flight, or expired meanwhile, is not
        restored.
        """
        async with self._lock:
            held = self._in_flight.pop(record.token, None)
            if held is None:
                logger.info("invite_restore_skipped", token=record.redacted, reason="revoked")
                return
            if held.is_expired(self._time.utcnow()):
                return
            self._tokens.setdefault(held.token, held)
        logger.info("invite_restored", token=record.redacted)

    async def revoke(self, token: str, admin_id: UUID) -> bool:
        """Remove a token only if it exists and admin_id issued it.

        A token currently in flight is revoked too: it will not come back
        if its sequence rolls back.

        Returns:
            True if removed. False otherwise, without revealing whether
            the token exists for another admin.
        """
        revoked: InviteToken | None = None
        async with self._lock:
            for table in (self._tokens, self._in_flight):
                candidate = table.get(token)
                if candidate is not None and candidate.admin_id == admin_id:
                    revoked = table.pop(token)
                    break

        if revoked is None:
            return False
        logger.info("invite_revoked", admin_id=str(admin_id), token=revoked.redacted)
        return True

    async def sweep_expired(self) -> int:
        """Remove every expired token.

        Returns:
            Number of tokens removed.
        """
        now = self._time.utcnow()
        async with self._lock:
            expired = [value for value, record in self._tokens.items() if record.is_expired(now)]
            for value in expired:
                del self._tokens[value]

        if expired:
            logger.info("invite_tokens_swept", count=len(expired))
        return len(expired)

    async def list_for_admin(self, admin_id: UUID) -> list[InviteTokenSummary]:
        """List an admin's tokens, soonest expiry first, without consuming them."""
        async with self._lock:
            records = [r for r in self._tokens.values() if r.admin_id == admin_id]

        records.sort(key=lambda r: r.expires_at)
        return [
            InviteTokenSummary(token=r.token, expires_at=r.expires_at, purpose=r.purpose)
            for r in records
        ]

    async def stats(self) -> InviteTokenStats:
        """Count held tokens and how many of them have expired."""
        now = self._time.utcnow()
        async with self._lock:
            total = len(self._tokens)
            expired = sum(1 for r in self._tokens.values() if r.is_expired(now))
        return InviteTokenStats(total=total, expired=expired)

    async def clear(self) -> None:
        """Drop every token (for testing)."""
        async with self._lock:
            self._tokens.clear()
            self._in_flight.clear()
