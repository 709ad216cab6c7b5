"""unigalaxy observability: structured logging with swappable formatter x destination.

Public API:
    configure(cfg)             - Set up logging from env-driven config (call once at startup)
    get_logger(name)           - Get a structured logger (kwargs API)
    register_formatter(n, cls) - Register custom LogFormatter
    register_destination(n, cls) - Register custom LogDestination
"""

from __future__ import annotations

from unigalaxy.observability.config import ObservabilityConfig
from unigalaxy.observability.logging import (
    LogDestination,
    LogFormatter,
    get_logger,
    register_destination,
    register_formatter,
    setup_logging,
    shutdown_logging,
)

_configured = False


def configure(config: ObservabilityConfig | None = None) -> None:
    """Initialize logging. Idempotent unless a config is passed explicitly."""
    global _configured
    if _configured and config is None:
        return
    setup_logging(config or ObservabilityConfig())
    _configured = True


def is_configured() -> bool:
    return _configured


def reset() -> None:
    """Tear down logging state. Use in tests."""
    global _configured
    shutdown_logging()
    _configured = False


__all__ = [
    "ObservabilityConfig",
    "configure",
    "is_configured",
    "reset",
    "get_logger",
    "LogFormatter",
    "LogDestination",
    "register_formatter",
    "register_destination",
    "setup_logging",
    "shutdown_logging",
]
