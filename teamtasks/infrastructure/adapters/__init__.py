"""Production adapters for Team Tasks ports."""

from teamtasks.infrastructure.adapters.secure_token_generator import SecureTokenGenerator
from teamtasks.infrastructure.adapters.system_time_authority import SystemTimeAuthority

__all__: list[str] = ["SecureTokenGenerator", "SystemTimeAuthority"]
