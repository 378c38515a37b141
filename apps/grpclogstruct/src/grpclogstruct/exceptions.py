"""
grpclogstruct exception hierarchy.

None of these errors reaches callers of the logging adapter: the dispatcher
recovers from them locally and degrades to the generic representation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class GrpcLogStructError(Exception):
    """Base exception for all grpclogstruct errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class RuleInvocationError(GrpcLogStructError):
    """A parse rule faulted on the arguments it was given.

    Usually means the call site no longer matches the rule's assumptions
    (argument count or types changed in a newer gRPC release).
    """

    def __init__(
        self,
        *,
        key: str,
        args: Sequence[Any],
        cause: BaseException,
    ) -> None:
        message = f"Parse rule {key!r} failed on {len(args)} argument(s): {type(cause).__name__}"
        details = {
            "key": key,
            "arg_count": len(args),
            "cause": type(cause).__name__,
        }
        super().__init__(message, code="RULE_INVOCATION_FAILED", details=details)
        self.key = key
        self.args_seen = tuple(args)
        self.cause = cause
