"""CLI configuration via environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field


def _int_env(var: str, default: int) -> int:
    """Parse an integer from an environment variable with a helpful error on bad input."""
    raw = os.environ.get(var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as err:
        print(f"Error: {var}={raw!r} is not a valid integer", file=sys.stderr)
        raise SystemExit(1) from err


@dataclass
class UnigalaxyConfig:
    """Configuration for the unigalaxy CLI and MCP server.

    Reads from environment variables with UNIGALAXY_ prefix.
    Falls back to sensible defaults for local development.
    """

    # Converted corpus (metadata/ + components/)
    data_dir: str = field(default_factory=lambda: os.environ.get("UNIGALAXY_DATA_DIR", "./data"))

    # Rule table override (YAML or JSON); None = built-in table
    rules_path: str | None = field(default_factory=lambda: os.environ.get("UNIGALAXY_RULES_PATH"))

    preview_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "UNIGALAXY_PREVIEW_BASE_URL", "https://uiverse.io/preview"
        )
    )

    # Default page sizes
    search_limit: int = field(default_factory=lambda: _int_env("UNIGALAXY_SEARCH_LIMIT", 10))
    list_limit: int = field(default_factory=lambda: _int_env("UNIGALAXY_LIST_LIMIT", 50))


def get_config() -> UnigalaxyConfig:
    """Get the current configuration."""
    return UnigalaxyConfig()
