"""
Log formatters and text helpers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from structlog.typing import EventDict

# =============================================================================
# Text Helpers
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def safe_str(value: Any) -> str:
    """Render ``value`` as text without ever raising.

    Falls back to ``repr`` when ``__str__`` fails, and to a placeholder when
    both do.
    """
    try:
        return str(value)
    except Exception:
        pass
    try:
        return repr(value)
    except Exception:
        return f"<unprintable {type(value).__name__} object>"


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================


class ConsoleFormatter:
    """Handles human-readable console log rendering (fixed width, right-aligned)."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "CRITICAL": "\x1b[1;31m",
    }

    EXCLUDED_KEYS = {"level", "message", "event", "logger", "timestamp", "_name"}
    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIMESTAMP_WIDTH = 19
    LEVEL_WIDTH = 8
    LOGGER_WIDTH = 24
    SEPARATOR = " | "

    @classmethod
    def configure(
        cls,
        *,
        timestamp_format: str | None = None,
        level_width: int | None = None,
        logger_width: int | None = None,
        separator: str | None = None,
    ) -> None:
        """Configure alignment and rendering parameters."""
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format
            cls.TIMESTAMP_WIDTH = len(datetime.now().strftime(timestamp_format))
        if level_width:
            cls.LEVEL_WIDTH = level_width
        if logger_width:
            cls.LOGGER_WIDTH = logger_width
        if separator is not None:
            cls.SEPARATOR = separator

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def _format_timestamp(cls, raw_timestamp: str | None) -> str:
        if raw_timestamp:
            try:
                dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return dt.astimezone().strftime(cls.TIMESTAMP_FORMAT)
            except (ValueError, TypeError):
                pass
        return datetime.now().strftime(cls.TIMESTAMP_FORMAT)

    @classmethod
    def _paint(cls, text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        level_color = cls._LEVEL_COLORS.get(color)
        if level_color:
            return f"{level_color}{text}{cls._RESET}"
        return colorize(text, color)

    @classmethod
    def format(cls, event_dict: EventDict, *, use_color: bool = True) -> str:
        """Format an event dict into an aligned string."""
        # A "message" field wins over the rename, so "event" may still be present.
        if "event" in event_dict:
            message = event_dict["event"]
            excluded = cls.EXCLUDED_KEYS - {"message"}
        else:
            message = event_dict.get("message", "")
            excluded = cls.EXCLUDED_KEYS

        extras = []
        for k, v in event_dict.items():
            if k not in excluded:
                extras.append(f"{cls._paint(k, 'key', use_color)}={cls._paint(safe_str(v), 'dim', use_color)}")

        message_text = safe_str(message)
        if extras:
            message_text = f"{message_text} " + " ".join(extras)

        level_upper = str(event_dict.get("level", "info")).upper()
        timestamp = cls._format_timestamp(event_dict.get("timestamp"))
        logger_name = safe_str(event_dict.get("logger", "root"))

        return cls.SEPARATOR.join(
            [
                cls._paint(cls._fit_right(timestamp, cls.TIMESTAMP_WIDTH), "timestamp", use_color),
                cls._paint(cls._fit_right(level_upper, cls.LEVEL_WIDTH), level_upper, use_color),
                cls._paint(cls._fit_right(logger_name, cls.LOGGER_WIDTH), "logger", use_color),
                message_text,
            ]
        )
