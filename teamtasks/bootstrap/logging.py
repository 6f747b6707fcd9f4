"""Bootstrap wiring for logging configuration.

Logging is configured once per process, the first time the service
container is requested. The environment name comes from the ENVIRONMENT
variable: 'production' renders JSON lines, anything else renders for a
console.
"""

from __future__ import annotations

import os

from structlog import get_logger

from teamtasks.infrastructure.observability import configure_structlog

ENVIRONMENT_ENV = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "production"

_configured_environment: str | None = None


def configure_logging(environment: str | None = None, *, force: bool = False) -> str:
    """Configure structlog unless this process already did.

    Args:
        environment: Environment name; read from ENVIRONMENT when None.
        force: Reconfigure even if logging was configured before.

    Returns:
        The environment logging is configured for.
    """
    global _configured_environment
    if _configured_environment is not None and not force:
        return _configured_environment

    resolved = environment or os.getenv(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)
    configure_structlog(environment=resolved)
    _configured_environment = resolved
    get_logger(__name__).info("logging_configured", environment=resolved)
    return resolved


def reset_logging() -> None:
    """Forget the configured environment (for testing)."""
    global _configured_environment
    _configured_environment = None


__all__ = ["configure_logging", "reset_logging"]
