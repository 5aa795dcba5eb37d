"""Logfire tracing for the Library Catalog service."""

import logging

import logfire

from .config import ObservabilityConfig
from .decorators import trace_query

logger = logging.getLogger(__name__)

_config: ObservabilityConfig | None = None


def initialize_observability(config: ObservabilityConfig | None = None) -> None:
    """Configure Logfire from ``config`` (or the environment)."""
    global _config  # noqa: PLW0603
    _config = config or ObservabilityConfig()

    if not _config.enabled:
        logger.debug("Observability disabled via configuration")
        return

    logfire.configure(
        token=_config.token or None,
        service_name=_config.service_name,
        environment=_config.environment,
        send_to_logfire=_config.send_to_logfire,
        console=None if _config.console_output else False,
    )
    logger.info(
        "Logfire configured (environment=%s, send=%s)",
        _config.environment,
        _config.send_to_logfire,
    )


def get_config() -> ObservabilityConfig:
    """Get current observability configuration."""
    global _config  # noqa: PLW0603
    if _config is None:
        _config = ObservabilityConfig()
    return _config


__all__ = [
    "ObservabilityConfig",
    "get_config",
    "initialize_observability",
    "trace_query",
]
