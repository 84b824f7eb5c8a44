"""Structured logging: swappable formatter × destination via config.

Architecture:
    LogFormatter  -- HOW records are structured (structlog, stdlib)
    LogDestination -- WHERE output goes (stderr, JSONL file)

    setup_logging(config) composes them: formatter.setup() returns a
    logging.Formatter, destination.create_handler() returns a logging.Handler,
    the handler gets the formatter, and it's attached to the root logger.

    Modules log through get_logger(__name__) with key=value kwargs:
        logger.warning("projection.untyped_reference", uri=..., attribute=...)
    The kwargs travel on the LogRecord and both formatters render them.

Swapping:
    GRAPHDOC_LOG_FORMATTER=structlog   (default)
    GRAPHDOC_LOG_DESTINATION=stderr    (default)

    Or register your own:
        from graphdoc.observability.logging import register_destination
        register_destination("syslog", MySyslogDestination)
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from graphdoc.observability.config import ObservabilityConfig


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class LogFormatter(Protocol):
    """Strategy: how log records are structured.

    setup() configures the formatting pipeline and returns a
    logging.Formatter that handlers will use.
    """

    def setup(self, config: ObservabilityConfig) -> logging.Formatter: ...


@runtime_checkable
class LogDestination(Protocol):
    """Strategy: where formatted log output is shipped."""

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler: ...

    def shutdown(self) -> None: ...


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def _merge_structured(_logger: Any, _method: str, event_dict: dict) -> dict:
    """structlog processor: lift kwargs stored by _StructuredStdlibLogger."""
    record = event_dict.get("_record")
    structured = getattr(record, "_structured", None)
    if structured:
        for key, value in structured.items():
            event_dict.setdefault(key, value)
    return event_dict


class StructlogFormatter:
    """structlog processors rendering stdlib records (JSON or console)."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        import structlog

        shared_processors: list = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if config.log_format == "console":
            renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
        else:
            renderer = structlog.processors.JSONRenderer()

        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*shared_processors, _merge_structured],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )


class StdlibFormatter:
    """Pure stdlib logging with JSON formatting."""

    def setup(self, config: ObservabilityConfig) -> logging.Formatter:
        if config.log_format == "console":
            return _StdlibConsoleFormatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        return _StdlibJsonFormatter()


class _StdlibJsonFormatter(logging.Formatter):
    """JSON formatter for stdlib logging (no structlog dependency)."""

    def format(self, record: logging.LogRecord) -> str:
        d: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if hasattr(record, "_structured"):
            d.update(record._structured)  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            d["exception"] = self.formatException(record.exc_info)
        return json.dumps(d, default=str)


class _StdlibConsoleFormatter(logging.Formatter):
    """Plain text, with structured kwargs appended as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        structured = getattr(record, "_structured", None)
        if structured:
            line += " " + " ".join(f"{k}={v!r}" for k, v in structured.items())
        return line


class _StructuredStdlibLogger:
    """Wrapper that gives stdlib loggers a structlog-like kwargs API.

    logger.info("projection.completed", root="...", included=3) -- stdlib
    loggers don't accept arbitrary kwargs, so this wrapper stores them on
    the LogRecord for the formatter.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _log(self, level: int, event: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "(unknown)",
            0,
            event,
            (),
            None,
        )
        record._structured = kwargs  # type: ignore[attr-defined]
        self._logger.handle(record)

    def debug(self, event: str, **kw: Any) -> None:
        self._log(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._log(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._log(logging.WARNING, event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._log(logging.ERROR, event, **kw)

    def critical(self, event: str, **kw: Any) -> None:
        self._log(logging.CRITICAL, event, **kw)


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------


class StderrDestination:
    """Write to stderr. Default."""

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        return handler

    def shutdown(self) -> None:
        pass


class JsonlFileDestination:
    """Append to a JSONL file."""

    def __init__(self, config: ObservabilityConfig) -> None:
        path = config.jsonl_path or "graphdoc.jsonl"
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handler: logging.Handler | None = None

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.FileHandler(str(self._path), mode="a", encoding="utf-8")
        handler.setFormatter(formatter)
        self._handler = handler
        return handler

    def shutdown(self) -> None:
        if self._handler is not None:
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


def register_formatter(name: str, cls: type) -> None:
    """Register a custom log formatter. Call before setup_logging()."""
    _FORMATTERS[name] = cls


def register_destination(name: str, cls: type) -> None:
    """Register a custom log destination. Call before setup_logging()."""
    _DESTINATIONS[name] = cls


# ---------------------------------------------------------------------------
# Module state
# ---------------------------------------------------------------------------

_active_destination: LogDestination | None = None


def setup_logging(config: ObservabilityConfig) -> None:
    """Compose formatter × destination from config and wire to root logger."""
    global _active_destination

    formatter_cls = _FORMATTERS.get(config.log_formatter)
    if formatter_cls is None:
        raise ValueError(
            f"Unknown log formatter: {config.log_formatter!r}. "
            f"Available: {list(_FORMATTERS)}. "
            f"Register custom formatters with register_formatter()."
        )

    dest_cls = _DESTINATIONS.get(config.log_destination)
    if dest_cls is None:
        raise ValueError(
            f"Unknown log destination: {config.log_destination!r}. "
            f"Available: {list(_DESTINATIONS)}. "
            f"Register custom destinations with register_destination()."
        )

    formatter = formatter_cls()
    if dest_cls is JsonlFileDestination:
        destination = dest_cls(config)
    else:
        destination = dest_cls()

    log_formatter = formatter.setup(config)
    handler = destination.create_handler(log_formatter)

    # Only replace our own handler, preserve external ones (pytest caplog etc.)
    handler._graphdoc_managed = True  # type: ignore[attr-defined]
    root_logger = logging.getLogger()
    root_logger.handlers = [
        h for h in root_logger.handlers
        if not getattr(h, "_graphdoc_managed", False)
    ]
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.WARNING))

    _active_destination = destination


def get_logger(name: str = "") -> Any:
    """Get a logger that accepts logger.info("event", key=value) kwargs.

    Always a _StructuredStdlibLogger: module-level loggers are created at
    import time, before setup_logging(), and the stdlib bridge is what both
    formatters render.
    """
    return _StructuredStdlibLogger(logging.getLogger(name))


def shutdown_logging() -> None:
    """Flush and close the active destination. Call on process exit."""
    global _active_destination
    if _active_destination is not None:
        _active_destination.shutdown()
    _active_destination = None
