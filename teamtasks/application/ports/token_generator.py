"""Token generator port for unguessable invite token values."""

from __future__ import annotations

from typing import Protocol


class TokenGeneratorProtocol(Protocol):
    """Protocol for generating random token strings."""

    def generate(self) -> str:
        """Return a new random, URL-safe, unguessable token."""
        ...
