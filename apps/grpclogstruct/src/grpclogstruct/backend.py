"""
Structured entry over a structlog logger.

``StructlogEntry`` is what the adapter emits into: a structlog logger, the
fields bound so far, and the process-exit behaviour of fatal events.
Termination after a fatal event happens here and nowhere else.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Mapping, NoReturn

from .logging import get_logger


class StructlogEntry:
    """A structlog logger plus bound fields, with fatal-terminates semantics.

    Fields are bound at emit time so a logger obtained before
    ``configure_logging`` still follows the current configuration.

    Args:
        logger: structlog logger (lazy proxy or bound logger) to emit through.
        fields: Fields attached to every event.
        exit_func: Called with ``exit_code`` after a fatal event.
        exit_code: Process exit code used after a fatal event.
    """

    def __init__(
        self,
        logger: Any,
        *,
        fields: Mapping[str, Any] | None = None,
        exit_func: Callable[[int], Any] = sys.exit,
        exit_code: int = 1,
    ) -> None:
        self._logger = logger
        self._fields = dict(fields or {})
        self._exit_func = exit_func
        self._exit_code = exit_code

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)

    def with_fields(self, fields: Mapping[str, Any]) -> StructlogEntry:
        """Return a new entry with ``fields`` added to the bound ones."""
        return StructlogEntry(
            self._logger,
            fields={**self._fields, **fields},
            exit_func=self._exit_func,
            exit_code=self._exit_code,
        )

    def info(self, message: str) -> None:
        self._bound().info(message)

    def log(self, level: int, message: str, **extra: Any) -> None:
        self._bound().log(level, message, **extra)

    def fatal(self, message: str) -> NoReturn:
        """Emit at CRITICAL, then terminate the process."""
        self._bound().log(logging.CRITICAL, message)
        self._exit_func(self._exit_code)
        raise SystemExit(self._exit_code)

    def _bound(self) -> Any:
        return self._logger.bind(**self._fields)


def default_entry() -> StructlogEntry:
    """Entry tagging every event with the configured source identifier."""
    from .config import settings

    adapter = settings.adapter
    return StructlogEntry(
        get_logger(adapter.logger_name),
        fields={"source": adapter.source},
        exit_code=adapter.fatal_exit_code,
    )
