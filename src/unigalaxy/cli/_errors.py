"""CLI error handling and decorators."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any, Callable

import typer

from unigalaxy.cli._config import get_config
from unigalaxy.core.store import JsonRecordStore

# Module-level holder for the opened corpus (set by require_corpus)
_current_store: JsonRecordStore | None = None


def get_store() -> JsonRecordStore:
    """Get the store set by the require_corpus decorator."""
    if _current_store is None:
        raise RuntimeError("No corpus opened; decorate the command with @require_corpus")
    return _current_store


def require_corpus(f: Callable) -> Callable:
    """Decorator that opens the converted corpus before running a command.

    Reads the corpus root from a ``data_dir`` keyword argument when the
    command has one, else from UNIGALAXY_DATA_DIR. If the root holds no
    index, prints a helpful error and exits.
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _current_store
        root = Path(kwargs.get("data_dir") or get_config().data_dir)
        store = JsonRecordStore(root)
        if not store.index_path.is_file():
            typer.echo(
                f"No converted corpus at {root}.\n"
                f"\n"
                f"Create one with: unigalaxy convert <source-dir> --output {root}",
                err=True,
            )
            raise typer.Exit(1)
        _current_store = store
        return f(*args, **kwargs)

    return wrapper


def handle_error(msg: str) -> None:
    """Print an error message and exit."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)
