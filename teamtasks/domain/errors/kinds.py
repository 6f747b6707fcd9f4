"""Error kind bases (NotFound, Forbidden, BadRequest, Conflict, Infrastructure).

Every concrete domain error inherits from exactly one of these. The
kind decides how a caller renders the failure and whether it may retry:
only InfrastructureError is retryable, all other kinds are terminal for
the current request.
"""

from __future__ import annotations

from teamtasks.domain.exceptions import ErrorKind, TeamTasksError


class NotFoundError(TeamTasksError):
    """A referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    title = "Not found"


class ForbiddenError(TeamTasksError):
    """The actor is authenticated but not permitted to do this."""

    kind = ErrorKind.FORBIDDEN
    title = "Forbidden"


class BadRequestError(TeamTasksError):
    """The request is structurally invalid or lacks a required choice."""

    kind = ErrorKind.BAD_REQUEST
    title = "Bad request"


class ConflictError(TeamTasksError):
    """The request conflicts with existing state (e.g. uniqueness)."""

    kind = ErrorKind.CONFLICT
    title = "Conflict"


class InfrastructureError(TeamTasksError):
    """Storage or timeout failure. Retryable a bounded number of times."""

    kind = ErrorKind.INFRASTRUCTURE
    retryable = True
    title = "Service temporarily unavailable"


class StorageTimeoutError(InfrastructureError):
    """A storage call exceeded its caller-imposed timeout."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Storage operation '{operation}' timed out after {timeout_seconds}s"
        )


class StorageUnavailableError(InfrastructureError):
    """The storage backend could not be reached."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Storage unavailable during '{operation}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
