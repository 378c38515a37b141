"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from .sinks import BaseSink, LogFormat, StdioSink

if TYPE_CHECKING:
    from grpclogstruct.config import Settings

# =============================================================================
# Global State
# =============================================================================

_sinks: list[BaseSink] = []


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or "root")


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message', unless a 'message' field is already bound."""
    if "event" in event_dict and "message" not in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def multi_sink_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Render log to all configured sinks. Returns empty to suppress default output."""
    for sink in _sinks:
        try:
            sink.emit(event_dict)
        except Exception:
            pass  # a broken sink must not break the caller
    return ""


# =============================================================================
# Configuration Logic
# =============================================================================


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)


def _initialize_sinks(sinks: str, fmt: str) -> None:
    """Initialize the requested sinks, closing any previous ones."""
    for sink in _sinks:
        sink.close()
    _sinks.clear()

    log_format: LogFormat = "json" if fmt.lower() == "json" else "console"

    for name in (s.strip().lower() for s in sinks.split(",")):
        if name == "stdio":
            _sinks.append(StdioSink(fmt=log_format, stream=sys.stderr))


def _configure_structlog(level: str) -> None:
    """Configure structlog processors and factory."""
    shared_processors = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_logger_name,
        rename_event_key,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [multi_sink_renderer],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    *,
    level: str = "INFO",
    sinks: str = "stdio",
    fmt: str = "console",
    intercept_grpc: bool = False,
    grpc_loggers: tuple[str, ...] = ("grpc",),
) -> None:
    """
    Configure the structured logging pipeline.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        sinks: Comma-separated sink names (stdio)
        fmt: Output format for stdio sink (console, json)
        intercept_grpc: Route the stdlib ``grpc`` loggers through the rule dispatcher
        grpc_loggers: Stdlib logger names to intercept
    """
    _initialize_sinks(sinks, fmt)
    _configure_structlog(level)

    if intercept_grpc:
        # Imported here: interceptors depend on the dispatcher, which depends on this module.
        from .interceptors import intercept_grpc_loggers

        intercept_grpc_loggers(names=grpc_loggers)


def configure_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from ``GLS_LOG_*`` / ``GLS_ADAPTER_*`` settings."""
    if settings is None:
        from grpclogstruct.config import settings

    from .formatters import ConsoleFormatter

    log = settings.logging
    ConsoleFormatter.configure(
        timestamp_format=log.console_timestamp_format,
        level_width=log.console_level_width,
        logger_width=log.console_logger_width,
        separator=log.console_separator,
    )
    configure_logging(
        level=log.level.value,
        sinks=log.sinks,
        fmt=log.format.value,
        intercept_grpc=settings.adapter.intercept_stdlib,
        grpc_loggers=tuple(settings.adapter.stdlib_loggers),
    )
