"""Log setup for the converter CLI and the MCP server.

A formatter decides the record shape (structlog pipeline or plain stdlib
JSON); a destination decides where records land (stderr or a JSONL file).
setup_logging() pairs one of each on the root logger:

    UNIGALAXY_LOG_FORMATTER=structlog|stdlib
    UNIGALAXY_LOG_DESTINATION=stderr|jsonl

Nothing here writes to stdout. The stdio MCP transport owns it, and the
CLI prints its own results there.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from unigalaxy.observability.config import ObservabilityConfig

# Marks root-logger handlers that setup_logging() owns
_MANAGED_ATTR = "_unigalaxy_managed"


@runtime_checkable
class LogFormatter(Protocol):
    """Builds the logging.Formatter and hands out kwargs-style loggers."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter: ...

    def get_logger(self, name: str, **kwargs: Any) -> Any: ...


@runtime_checkable
class LogDestination(Protocol):
    def create_handler(self, formatter: logging.Formatter) -> logging.Handler: ...

    def shutdown(self) -> None: ...


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class StructlogFormatter:
    """Routes structlog events through the stdlib handler so both APIs share output."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        import structlog

        if config.log_format == "console":
            renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
        else:
            renderer = structlog.processors.JSONRenderer()

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        return structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        import structlog

        return structlog.get_logger(name, **kwargs)


class StdlibFormatter:
    """No structlog: one JSON object per line, or a plain console line."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        if config.log_format == "console":
            return logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        return _JsonLineFormatter()

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        return _KwargsLogger(logging.getLogger(name))


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **getattr(record, "fields", {}),
        }
        if record.exc_info and record.exc_info[1]:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


class _KwargsLogger:
    """stdlib logger accepting ``logger.warning("event.name", key=value)``.

    The kwargs ride on the LogRecord as ``fields`` for _JsonLineFormatter.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _emit(self, level: int, event: str, exc_info: Any = None, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if exc_info is True:
            exc_info = sys.exc_info()
        record = self._logger.makeRecord(
            self._logger.name, level, "(unknown)", 0, event, (), exc_info or None
        )
        record.fields = fields
        self._logger.handle(record)

    def debug(self, event: str, **kw: Any) -> None:
        self._emit(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._emit(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._emit(logging.WARNING, event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._emit(logging.ERROR, event, **kw)

    def exception(self, event: str, **kw: Any) -> None:
        self._emit(logging.ERROR, event, exc_info=True, **kw)


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------


class StderrDestination:
    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        return handler

    def shutdown(self) -> None:
        pass


class JsonlFileDestination:
    """Appends to UNIGALAXY_LOG_PATH (default ./unigalaxy.jsonl), creating its directory."""

    def __init__(self, config: ObservabilityConfig) -> None:
        self._path = Path(config.jsonl_path or "unigalaxy.jsonl")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handler: logging.Handler | None = None

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        self._handler = logging.FileHandler(str(self._path), mode="a", encoding="utf-8")
        self._handler.setFormatter(formatter)
        return self._handler

    def shutdown(self) -> None:
        if self._handler is not None:
            self._handler.flush()
            self._handler.close()


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------

_FORMATTERS: dict[str, type] = {
    "structlog": StructlogFormatter,
    "stdlib": StdlibFormatter,
}

_DESTINATIONS: dict[str, type] = {
    "stderr": StderrDestination,
    "jsonl": JsonlFileDestination,
}

# Destination names constructed with the config
_CONFIGURED_DESTINATIONS: set[str] = {"jsonl"}


def register_formatter(name: str, cls: type) -> None:
    _FORMATTERS[name] = cls


def register_destination(name: str, cls: type, needs_config: bool = False) -> None:
    """Add a destination; ``needs_config`` passes ObservabilityConfig to its constructor."""
    _DESTINATIONS[name] = cls
    if needs_config:
        _CONFIGURED_DESTINATIONS.add(name)


def _lookup(registry: dict[str, type], kind: str, name: str) -> type:
    try:
        return registry[name]
    except KeyError:
        raise ValueError(
            f"Unknown log {kind}: {name!r}. Available: {sorted(registry)}. "
            f"Add one with register_{kind}()."
        ) from None


# ---------------------------------------------------------------------------
# Active pair
# ---------------------------------------------------------------------------

_active_formatter: LogFormatter | None = None
_active_destination: LogDestination | None = None


def setup_logging(config: ObservabilityConfig) -> None:
    """Install the configured formatter and destination on the root logger.

    Calling again swaps out the previous managed handler and leaves any
    other root handlers (pytest's caplog, for one) in place.
    """
    global _active_formatter, _active_destination

    formatter_cls = _lookup(_FORMATTERS, "formatter", config.log_formatter)
    dest_cls = _lookup(_DESTINATIONS, "destination", config.log_destination)

    formatter = formatter_cls()
    if config.log_destination in _CONFIGURED_DESTINATIONS:
        destination = dest_cls(config)
    else:
        destination = dest_cls()

    handler = destination.create_handler(formatter.setup(config))
    setattr(handler, _MANAGED_ATTR, True)

    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not getattr(h, _MANAGED_ATTR, False)]
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    if _active_destination is not None:
        _active_destination.shutdown()
    _active_formatter = formatter
    _active_destination = destination


def get_logger(name: str = "", **kwargs: Any) -> Any:
    """Logger usable at import time; it binds to whatever formatter is active when called."""
    return _LazyLogger(name, kwargs)


class _LazyLogger:
    def __init__(self, name: str, bind: dict[str, Any]) -> None:
        self._name = name
        self._bind = bind

    def _resolve(self) -> Any:
        if _active_formatter is not None:
            return _active_formatter.get_logger(self._name, **self._bind)
        return _KwargsLogger(logging.getLogger(self._name))

    def __getattr__(self, attr: str) -> Any:
        return getattr(self._resolve(), attr)


def shutdown_logging() -> None:
    global _active_formatter, _active_destination
    if _active_destination is not None:
        _active_destination.shutdown()
    _active_formatter = None
    _active_destination = None
