"""Invite token errors.

Redemption failures share one public message whatever the cause, so a
client cannot tell an unknown token from an expired or revoked one.
The typed reason is kept on the exception for logging.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from teamtasks.domain.errors.kinds import ForbiddenError
from teamtasks.domain.exceptions import ErrorKind, TeamTasksError
from teamtasks.domain.models.invite_token import InviteTokenRejection

INVALID_INVITE_MESSAGE = "Invalid or expired team invitation token"


class InvalidInviteTokenError(TeamTasksError):
    """Raised when an invite token cannot be consumed.

    Attributes:
        reason: Why the token was rejected (logging only).
    """

    kind = ErrorKind.INVALID_TOKEN
    title = "Invalid invitation"

    def __init__(self, reason: InviteTokenRejection) -> None:
        self.reason = reason
        super().__init__(f"{INVALID_INVITE_MESSAGE} ({reason.value})")

    @property
    def public_message(self) -> str:
        return INVALID_INVITE_MESSAGE

    def context(self) -> dict[str, Any]:
        return {"reason": self.reason.value}


class InviteNotAuthorizedError(ForbiddenError):
    """Raised when a user may not issue invites (not an Admin, or owns no team)."""

    def __init__(self, admin_id: UUID, detail: str) -> None:
        self.admin_id = admin_id
        self.detail = detail
        super().__init__(f"Not authorized to issue invitations: {detail}")

    def context(self) -> dict[str, Any]:
        return {"admin_id": str(self.admin_id), "detail": self.detail}
