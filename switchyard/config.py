"""Runtime configuration — environment-driven via pydantic-settings.

All settings can be overridden with ``SWITCHYARD_*`` environment variables::

    export SWITCHYARD_LOG_LEVEL=DEBUG
    export SWITCHYARD_TRACE_ENABLED=false
    export SWITCHYARD_REQUEST_TIMEOUT=2.5

Graph wiring is never read from configuration; it is assembled in code.
"""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Process-wide defaults for the dispatch engine and built-in nodes."""

    model_config = SettingsConfigDict(env_prefix="SWITCHYARD_")

    # Logging / diagnostics
    log_level: str = "INFO"
    trace_enabled: bool = True

    # Outbound invocation timeouts, in seconds
    request_timeout: float = Field(default=1.0, gt=0)
    response_timeout: float = Field(default=1.0, gt=0)

    # Copy-on-fan-out for nodes that do not choose explicitly
    isolate_fanout: bool = False


# Module-level singleton — import as `from switchyard.config import settings`
settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for command-line use.

    The library itself never calls this on import.
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
