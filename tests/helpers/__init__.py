"""Test helpers for Team Tasks tests.

This package contains reusable test utilities and fake implementations
for dependency injection in unit tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    SequenceTokenGenerator: Predictable invite token values

Usage:
    from tests.helpers import FakeTimeAuthority
"""

from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.sequence_token_generator import SequenceTokenGenerator

__all__ = ["FakeTimeAuthority", "SequenceTokenGenerator"]
