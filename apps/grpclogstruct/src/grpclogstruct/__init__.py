"""
grpclogstruct: structured logging for gRPC log calls.

Parses the printf-style calls gRPC makes through its logging interface and
re-emits them as structlog events with named fields.

Usage:
    from grpclogstruct import inject
    from grpclogstruct.logging import configure_logging

    configure_logging(fmt="json")
    inject()
"""


def __getattr__(name: str):
    if name in {"GrpcLogAdapter", "new", "inject"}:
        from grpclogstruct import adapter

        return getattr(adapter, name)
    if name == "StructlogEntry":
        from grpclogstruct.backend import StructlogEntry

        return StructlogEntry
    raise AttributeError(f"module 'grpclogstruct' has no attribute {name}")


__all__ = ["GrpcLogAdapter", "StructlogEntry", "inject", "new"]
