"""
Structured logging for grpclogstruct.

- stdio sink: console (aligned columns) or JSON lines
- optional interception of the gRPC runtime's stdlib loggers

Library: structlog + orjson for JSON serialization.
"""

from .core import configure_from_settings, configure_logging, get_logger

__all__ = ["configure_from_settings", "configure_logging", "get_logger"]
