"""Base exception classes for the Team Tasks domain layer."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Top-level error taxonomy.

    Every domain error maps to exactly one kind. Callers translate kinds
    to transport status codes; only INFRASTRUCTURE is retryable.
    """

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    CONFLICT = "conflict"
    INVALID_TOKEN = "invalid_token"
    INFRASTRUCTURE = "infrastructure"


class TeamTasksError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class (or one
    of the kind bases in teamtasks.domain.errors). This enables
    consistent error handling across the application.

    Attributes:
        kind: Taxonomy bucket for the error.
        retryable: Whether the caller may retry the operation.
    """

    kind: ErrorKind = ErrorKind.BAD_REQUEST
    retryable: bool = False
    title: str = "Request failed"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        """Message safe to show to the requesting client."""
        return self.message

    def context(self) -> dict[str, Any]:
        """Structured attributes for logging. Subclasses extend this."""
        return {}

    def to_problem_dict(self) -> dict[str, Any]:
        """Serialize to an RFC 7807 style problem dictionary.

        Returns:
            Dictionary with type, title, detail and kind fields.
        """
        return {
            "type": f"urn:teamtasks:error:{self.kind.value}",
            "title": self.title,
            "detail": self.public_message,
            "kind": self.kind.value,
            "retryable": self.retryable,
        }
