"""
Interceptors for capturing the gRPC runtime's stdlib logs.

The Python gRPC runtime logs through stdlib ``logging`` under the ``grpc``
logger hierarchy, with printf-style ``msg`` and ``args``. Those records go
through the same rule dispatcher as ``grpclog`` calls.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..backend import StructlogEntry, default_entry
from ..dispatch import parse_format, parse_line
from .formatters import safe_str

_STANDARD_LEVELS = (logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG)


def _standard_level(levelno: int) -> int:
    """Map custom stdlib levels onto the nearest standard level below them."""
    for level in _STANDARD_LEVELS:
        if levelno >= level:
            return level
    return logging.DEBUG


class GrpcLogHandler(logging.Handler):
    """
    Redirect gRPC stdlib logging records to structlog.

    Records are emitted at their own level; a CRITICAL record never
    terminates the process.
    """

    def __init__(self, entry: StructlogEntry | None = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        if entry is None:
            entry = default_entry()
        self.entry = entry

    def emit(self, record: logging.LogRecord) -> None:
        try:
            fields, message = self.parse_record(record)
            extra: dict[str, Any] = {}
            if record.exc_info:
                extra["exc_info"] = record.exc_info
            self.entry.with_fields({**fields, "stdlib.logger": record.name}).log(
                _standard_level(record.levelno), message, **extra
            )
        except Exception:
            self.handleError(record)

    @staticmethod
    def parse_record(record: logging.LogRecord) -> tuple[dict[str, Any], str]:
        """Parse a record the way the matching ``grpclog`` call would be parsed."""
        args = record.args
        if not args:
            return parse_line((record.msg,))
        if not isinstance(args, tuple):
            # logging collapses a lone mapping argument into record.args
            args = (args,)
        return parse_format(safe_str(record.msg), args)


def intercept_grpc_loggers(
    entry: StructlogEntry | None = None,
    names: Iterable[str] = ("grpc",),
) -> GrpcLogHandler:
    """Route the given stdlib logger hierarchies through :class:`GrpcLogHandler`."""
    handler = GrpcLogHandler(entry)
    roots = tuple(names)

    for logger_name in roots:
        lg = logging.getLogger(logger_name)
        lg.handlers = [handler]
        lg.setLevel(logging.DEBUG)
        lg.propagate = False

    # Children created before us may carry their own handlers.
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.PlaceHolder) or name in roots:
            continue
        if any(name.startswith(root + ".") for root in roots):
            logger.handlers = []
            logger.propagate = True

    return handler
