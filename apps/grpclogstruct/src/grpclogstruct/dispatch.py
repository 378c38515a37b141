"""
Rule dispatch with generic fallback.

Turns one gRPC log call into a ``(fields, message)`` pair. Known call sites
go through their parse rule; unknown call sites, and known ones whose rule
faults on the supplied arguments, fall back to positional ``argN`` fields
with the raw format string as the message. Nothing here raises.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .exceptions import RuleInvocationError
from .logging import get_logger
from .logging.formatters import safe_str
from .rules import PARSEF_RULES, PARSELN_RULES, Fields, Rule, invoke_rule

logger = get_logger(__name__)


def parse_format(fmt: str, args: Sequence[Any]) -> tuple[Fields, str]:
    """Parse a formatted call (``Printf`` / ``Fatalf``)."""
    return _try_parse(PARSEF_RULES, fmt, args)


def parse_line(args: Sequence[Any]) -> tuple[Fields, str]:
    """Parse a plain or line call (``Print`` / ``Println`` / ``Fatal`` / ``Fatalln``).

    The first argument is the lookup key, the rest are the rule's arguments.
    An empty call yields an empty event.
    """
    if len(args) < 1:
        return {}, ""
    return _try_parse(PARSELN_RULES, safe_str(args[0]), args[1:])


def default_fields(fmt: str, args: Sequence[Any]) -> tuple[Fields, str]:
    """Generic representation: ``arg0``, ``arg1``, ... and the unparsed format."""
    fields = {f"arg{i}": safe_str(arg) for i, arg in enumerate(args)}
    return fields, fmt


def _try_parse(rules: Mapping[str, Rule], key: str, args: Sequence[Any]) -> tuple[Fields, str]:
    try:
        parsed = invoke_rule(rules, key, args)
    except RuleInvocationError as exc:
        logger.debug(
            "parse rule failed, using generic fields",
            key=key,
            arg_count=exc.details["arg_count"],
            cause=exc.details["cause"],
        )
        return default_fields(key, args)
    if parsed is None:
        return default_fields(key, args)
    return parsed


__all__ = ["default_fields", "parse_format", "parse_line", "safe_str"]
