"""
gRPC logger that emits structlog events.

Implements the six-call :class:`grpclogstruct.grpclog.Logger` contract by
parsing each call into fields and a message (see :mod:`grpclogstruct.dispatch`)
and emitting exactly one structured event per call.
"""

from __future__ import annotations

from typing import Any, NoReturn

from . import grpclog
from .backend import StructlogEntry, default_entry
from .dispatch import parse_format, parse_line
from .rules import Fields


class GrpcLogAdapter:
    """gRPC logger backed by a :class:`StructlogEntry`."""

    def __init__(self, entry: StructlogEntry) -> None:
        self._entry = entry

    @property
    def entry(self) -> StructlogEntry:
        return self._entry

    def fatal(self, *args: Any) -> NoReturn:
        self._fatal(*parse_line(args))

    def fatalf(self, fmt: str, *args: Any) -> NoReturn:
        self._fatal(*parse_format(fmt, args))

    def fatalln(self, *args: Any) -> NoReturn:
        self._fatal(*parse_line(args))

    def print(self, *args: Any) -> None:
        self._print(*parse_line(args))

    def printf(self, fmt: str, *args: Any) -> None:
        self._print(*parse_format(fmt, args))

    def println(self, *args: Any) -> None:
        self._print(*parse_line(args))

    def _fatal(self, fields: Fields, message: str) -> NoReturn:
        self._entry.with_fields(fields).fatal(message)

    def _print(self, fields: Fields, message: str) -> None:
        self._entry.with_fields(fields).info(message)


def new(entry: StructlogEntry | None = None) -> GrpcLogAdapter:
    """Make a gRPC logger from a structured entry.

    Without an entry, events are tagged with the configured source
    (``source="grpc"`` by default).
    """
    if entry is None:
        entry = default_entry()
    return GrpcLogAdapter(entry)


def inject(entry: StructlogEntry | None = None) -> GrpcLogAdapter:
    """Install a structured gRPC logger as the process-wide active logger."""
    adapter = new(entry)
    grpclog.set_logger(adapter)
    return adapter
