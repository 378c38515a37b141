"""
Tests for grpclogstruct.logging: structlog pipeline, sinks and rendering.
"""

from __future__ import annotations

import json
import logging

import pytest

from grpclogstruct import grpclog
from grpclogstruct.adapter import inject
from grpclogstruct.logging import configure_from_settings, configure_logging, get_logger
from grpclogstruct.logging import core as logging_core
from grpclogstruct.logging.formatters import ConsoleFormatter
from grpclogstruct.logging.sinks import BaseSink, StdioSink


@pytest.fixture(autouse=True)
def _restore_grpc_logger():
    lg = logging.getLogger("grpc")
    old = (lg.handlers[:], lg.propagate, lg.level)
    yield
    lg.handlers, lg.propagate = old[0], old[1]
    lg.setLevel(old[2])


@pytest.fixture(autouse=True)
def _restore_console_formatter():
    attrs = ("TIMESTAMP_FORMAT", "TIMESTAMP_WIDTH", "LEVEL_WIDTH", "LOGGER_WIDTH", "SEPARATOR")
    old = {name: getattr(ConsoleFormatter, name) for name in attrs}
    yield
    for name, value in old.items():
        setattr(ConsoleFormatter, name, value)


def _json_lines(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


class TestJSONOutput:
    def test_event_shape(self, capsys) -> None:
        configure_logging(fmt="json")
        get_logger("test.json").info("json test", user="alice")

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["message"] == "json test"
        assert line["logger"] == "test.json"
        assert line["level"] == "info"
        assert line["user"] == "alice"
        assert "timestamp" in line
        assert "event" not in line
        assert "_name" not in line

    def test_message_field_keeps_event(self, capsys) -> None:
        configure_logging(fmt="json")
        get_logger("test.json").info("got message at point", message="hi")

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["event"] == "got message at point"
        assert line["message"] == "hi"

    def test_unserializable_values_are_rendered_as_text(self, capsys) -> None:
        configure_logging(fmt="json")
        get_logger("test.json").info("boom", err=ConnectionError("reset by peer"))

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["err"] == "reset by peer"

    def test_grpc_call_end_to_end(self, capsys) -> None:
        configure_logging(fmt="json")
        inject()
        grpclog.printf("Got %d reply, want %d", 5, 3)

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["message"] == "got wrong count of replies"
        assert line["want.count"] == 5
        assert line["got.count"] == 3
        assert line["source"] == "grpc"
        assert line["logger"] == "grpc"
        assert line["level"] == "info"

    def test_integer_wider_than_64_bits_is_rendered_as_text(self, capsys) -> None:
        configure_logging(fmt="json")
        inject()
        grpclog.printf("Got %d reply, want %d", 2**64, 3)

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["message"] == "got wrong count of replies"
        assert line["want.count"] == "18446744073709551616"
        assert line["got.count"] == 3
        assert line["source"] == "grpc"

    def test_non_string_dict_keys(self, capsys) -> None:
        configure_logging(fmt="json")
        inject()
        grpclog.printf("%v.SendHeader(%v) = %v, want %v", "stream", {1: "a"}, "err", None)

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["message"] == "SendHeader"
        assert line["md"] == {"1": "a"}
        assert line["stream"] == "stream"

    def test_unencodable_dict_key_falls_back_to_text(self, capsys) -> None:
        configure_logging(fmt="json")
        get_logger("test.json").info("headers", md={("grpc-status", 0): "ok"}, count=2)

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["message"] == "headers"
        assert line["md"] == "{('grpc-status', 0): 'ok'}"
        assert line["count"] == 2

    def test_adapter_injected_before_configure_follows_configuration(self, capsys) -> None:
        inject()
        configure_logging(fmt="json")
        grpclog.println("Pingpong done")

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["message"] == "Pingpong done"


class TestConsoleOutput:
    def test_human_readable(self, capsys) -> None:
        configure_logging(fmt="console")
        get_logger("test.console").info("hello world", addr="127.0.0.1")

        err = capsys.readouterr().err
        assert "hello world" in err
        assert "addr=127.0.0.1" in err
        assert "INFO" in err
        assert not err.strip().startswith("{")

    def test_format_columns(self) -> None:
        text = ConsoleFormatter.format(
            {"level": "warning", "logger": "grpc", "message": "careful", "timestamp": "2024-01-01T00:00:00+00:00"},
            use_color=False,
        )
        parts = text.split(ConsoleFormatter.SEPARATOR)
        assert len(parts) == 4
        assert parts[1].strip() == "WARNING"
        assert parts[2].strip() == "grpc"
        assert parts[3] == "careful"

    def test_event_wins_over_message_field(self) -> None:
        text = ConsoleFormatter.format({"event": "got message at point", "message": "hi"}, use_color=False)
        assert text.endswith("got message at point message=hi")

    def test_long_logger_name_is_truncated(self) -> None:
        text = ConsoleFormatter.format({"logger": "x" * 100, "message": "m"}, use_color=False)
        logger_column = text.split(ConsoleFormatter.SEPARATOR)[2]
        assert len(logger_column) == ConsoleFormatter.LOGGER_WIDTH
        assert logger_column.startswith("...")

    def test_color(self) -> None:
        text = ConsoleFormatter.format({"level": "error", "message": "m"}, use_color=True)
        assert "\x1b[31m" in text


class TestLevels:
    def test_below_level_is_dropped(self, capsys) -> None:
        configure_logging(level="WARNING", fmt="json")
        log = get_logger("test.level")
        log.info("dropped")
        log.warning("kept")

        lines = _json_lines(capsys.readouterr().err)
        assert [line["message"] for line in lines] == ["kept"]

    def test_invalid_level_falls_back_to_info(self, capsys) -> None:
        configure_logging(level="NONEXISTENT", fmt="json")
        log = get_logger("test.level")
        log.debug("dropped")
        log.info("kept")

        lines = _json_lines(capsys.readouterr().err)
        assert [line["message"] for line in lines] == ["kept"]


class TestSinks:
    def test_reconfigure_does_not_stack_sinks(self) -> None:
        configure_logging(fmt="console")
        configure_logging(fmt="json")
        configure_logging(fmt="console")
        assert len(logging_core._sinks) == 1
        assert isinstance(logging_core._sinks[0], StdioSink)

    def test_unknown_sinks_are_ignored(self) -> None:
        configure_logging(sinks="stdio, gcloud")
        assert len(logging_core._sinks) == 1

    def test_broken_sink_does_not_break_caller(self, capsys) -> None:
        class BrokenSink(BaseSink):
            def emit(self, event_dict):
                raise OSError("disk full")

            def close(self) -> None:
                pass

        configure_logging(fmt="json")
        logging_core._sinks.insert(0, BrokenSink())
        get_logger("test.sink").info("still delivered")

        (line,) = _json_lines(capsys.readouterr().err)
        assert line["message"] == "still delivered"


class TestConfigureFromSettings:
    def test_reads_environment(self, monkeypatch, capsys) -> None:
        from grpclogstruct.config import Settings

        monkeypatch.setenv("GLS_LOG_FORMAT", "json")
        monkeypatch.setenv("GLS_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("GLS_LOG_CONSOLE_LOGGER_WIDTH", "12")
        monkeypatch.setenv("GLS_ADAPTER_INTERCEPT_STDLIB", "false")

        configure_from_settings(Settings())
        log = get_logger("test.settings")
        log.warning("dropped")
        log.error("kept")

        lines = _json_lines(capsys.readouterr().err)
        assert [line["message"] for line in lines] == ["kept"]
        assert ConsoleFormatter.LOGGER_WIDTH == 12
        assert logging.getLogger("grpc").propagate is True

    def test_intercepts_grpc_by_default(self, monkeypatch, capsys) -> None:
        from grpclogstruct.config import Settings
        from grpclogstruct.logging.interceptors import GrpcLogHandler

        monkeypatch.setenv("GLS_LOG_FORMAT", "json")
        configure_from_settings(Settings())

        grpc_logger = logging.getLogger("grpc")
        assert any(isinstance(h, GrpcLogHandler) for h in grpc_logger.handlers)
        assert grpc_logger.propagate is False
