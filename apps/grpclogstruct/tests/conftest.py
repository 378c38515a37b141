import pytest
import structlog

from grpclogstruct import grpclog
from grpclogstruct.backend import StructlogEntry
from grpclogstruct.logging import core as logging_core
from grpclogstruct.logging import get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    """
    Restores structlog defaults and drops configured sinks after each test,
    so a configure_logging() call in one test can't leak into the next.
    """
    yield
    for sink in logging_core._sinks:
        sink.close()
    logging_core._sinks.clear()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def restore_grpclog():
    """Puts the original process-wide gRPC logger back after each test."""
    original = grpclog.get_logger()
    yield
    grpclog.set_logger(original)


@pytest.fixture
def exit_codes() -> list[int]:
    return []


@pytest.fixture
def entry(exit_codes) -> StructlogEntry:
    """Entry tagged like the default one, recording exit codes instead of exiting."""
    return StructlogEntry(
        get_logger("grpc"),
        fields={"source": "grpc"},
        exit_func=exit_codes.append,
    )
