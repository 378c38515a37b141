"""
The gRPC logging contract and the process-wide active logger.

gRPC code logs through six calls: ``fatal``, ``fatalf``, ``fatalln``,
``print``, ``printf`` and ``println``. Fatal calls do not return. The active
logger starts as a plain-text logger over the stdlib ``grpc`` logger and is
replaced with :func:`set_logger` (see :func:`grpclogstruct.adapter.inject`).
"""

from __future__ import annotations

import logging
import sys
from typing import Any, NoReturn, Protocol, runtime_checkable


@runtime_checkable
class Logger(Protocol):
    """The logging interface gRPC calls into."""

    def fatal(self, *args: Any) -> NoReturn: ...

    def fatalf(self, fmt: str, *args: Any) -> NoReturn: ...

    def fatalln(self, *args: Any) -> NoReturn: ...

    def print(self, *args: Any) -> None: ...

    def printf(self, fmt: str, *args: Any) -> None: ...

    def println(self, *args: Any) -> None: ...


def _fatal_exit_code() -> int:
    """Exit code for fatal calls, ``GLS_ADAPTER_FATAL_EXIT_CODE`` (default 1)."""
    from .config import settings

    return settings.adapter.fatal_exit_code


class StdlibLogger:
    """Default logger: unstructured text on a stdlib logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("grpc")

    @staticmethod
    def _sprint(args: tuple[Any, ...]) -> str:
        return " ".join(str(arg) for arg in args)

    @staticmethod
    def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
        if not args:
            return fmt
        try:
            return fmt % args
        except (TypeError, ValueError):
            # Go verbs such as %v and %q have no Python equivalent.
            return f"{fmt} {StdlibLogger._sprint(args)}"

    def fatal(self, *args: Any) -> NoReturn:
        self._logger.critical(self._sprint(args))
        sys.exit(_fatal_exit_code())

    def fatalf(self, fmt: str, *args: Any) -> NoReturn:
        self._logger.critical(self._sprintf(fmt, args))
        sys.exit(_fatal_exit_code())

    def fatalln(self, *args: Any) -> NoReturn:
        self._logger.critical(self._sprint(args))
        sys.exit(_fatal_exit_code())

    def print(self, *args: Any) -> None:
        self._logger.info(self._sprint(args))

    def printf(self, fmt: str, *args: Any) -> None:
        self._logger.info(self._sprintf(fmt, args))

    def println(self, *args: Any) -> None:
        self._logger.info(self._sprint(args))


# =============================================================================
# Global State
# =============================================================================

_logger: Logger = StdlibLogger()


def set_logger(logger: Logger) -> None:
    """Install ``logger`` as the process-wide gRPC logger.

    Not synchronized; call once during startup, before gRPC starts logging.
    """
    global _logger
    _logger = logger


def get_logger() -> Logger:
    """Return the active gRPC logger."""
    return _logger


# =============================================================================
# Forwarding functions (what library code calls)
# =============================================================================


def fatal(*args: Any) -> NoReturn:
    _logger.fatal(*args)
    raise SystemExit(_fatal_exit_code())


def fatalf(fmt: str, *args: Any) -> NoReturn:
    _logger.fatalf(fmt, *args)
    raise SystemExit(_fatal_exit_code())


def fatalln(*args: Any) -> NoReturn:
    _logger.fatalln(*args)
    raise SystemExit(_fatal_exit_code())


def print_(*args: Any) -> None:
    _logger.print(*args)


def printf(fmt: str, *args: Any) -> None:
    _logger.printf(fmt, *args)


def println(*args: Any) -> None:
    _logger.println(*args)
