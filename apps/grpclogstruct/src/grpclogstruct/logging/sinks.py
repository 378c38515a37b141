"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Any, Literal

import orjson
from structlog.typing import EventDict

from .formatters import ConsoleFormatter, safe_str

LogFormat = Literal["console", "json"]


_JSON_OPTIONS = orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS

# orjson only encodes integers in this range.
_INT_MIN, _INT_MAX = -(2**63), 2**64 - 1


def _is_json_scalar(v: Any) -> bool:
    if isinstance(v, int) and not isinstance(v, bool):
        return _INT_MIN <= v <= _INT_MAX
    return v is None or isinstance(v, (str, bool, float))


def _as_text(event_dict: dict) -> dict[str, Any]:
    return {safe_str(k): v if _is_json_scalar(v) else safe_str(v) for k, v in event_dict.items()}


def orjson_dumps(v: Any) -> str:
    """JSON serialization; values orjson can't encode are rendered as text.

    Objects go through ``default``. Values orjson rejects outright, such as
    integers wider than 64 bits or unsupported dict keys nested anywhere in an
    event, make every non-scalar field of that event fall back to its text form.
    """
    try:
        return orjson.dumps(v, default=safe_str, option=_JSON_OPTIONS).decode()
    except orjson.JSONEncodeError:
        if not isinstance(v, dict):
            return orjson.dumps(safe_str(v)).decode()
        return orjson.dumps(_as_text(v), default=safe_str, option=_JSON_OPTIONS).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def emit(self, event_dict: EventDict) -> None:
        """Emit a log event to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Standard I/O sink with configurable format.

    Args:
        fmt: Output format - "console" (aligned human-readable) or "json"
        stream: Output stream (default: stderr)
    """

    def __init__(self, fmt: LogFormat = "console", stream: Any = None):
        self._fmt = fmt
        self._stream = stream or sys.stderr

    def emit(self, event_dict: EventDict) -> None:
        if self._fmt == "json":
            output = orjson_dumps(event_dict)
        else:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(event_dict, use_color=use_color)

        self._stream.write(output + "\n")
        self._stream.flush()

    def close(self) -> None:
        pass
