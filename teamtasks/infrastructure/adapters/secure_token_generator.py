"""Invite token generator backed by the secrets module."""

from __future__ import annotations

import secrets

from teamtasks.application.ports.token_generator import TokenGeneratorProtocol


class SecureTokenGenerator(TokenGeneratorProtocol):
    """Generates URL-safe tokens from the OS CSPRNG.

    Attributes:
        nbytes: Random bytes per token.
    """

    def __init__(self, nbytes: int = 32) -> None:
        if nbytes < 16:
            raise ValueError(f"nbytes must be at least 16, got {nbytes}")
        self.nbytes = nbytes

    def generate(self) -> str:
        """Return a new random URL-safe token."""
        return secrets.token_urlsafe(self.nbytes)
