"""Tests for unified logging format and role-driven logging setup.

Target format: 2026-01-06T14:05:52Z [source] LEVEL message
"""

from __future__ import annotations

import logging
import re
import sys
from datetime import datetime
from pathlib import Path

import pytest

from worldconf.models import DispatcherConfig, GameConfig, GateConfig


def _record(msg: str = "Test message", level: int = logging.INFO, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestISO8601Formatter:
    """Test the custom ISO8601 formatter produces correct output."""

    def test_format_matches_layout(self):
        """Verify output matches: 2026-01-06T14:05:52Z [source] LEVEL message"""
        from worldconf.logging_config import ISO8601Formatter

        output = ISO8601Formatter(source="game1").format(_record())

        pattern = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z \[game1\] INFO Test message$"
        assert re.match(pattern, output), f"Output '{output}' doesn't match expected format"

    def test_timestamp_is_utc(self):
        """Verify timestamp is in UTC (ends with Z)."""
        from worldconf.logging_config import ISO8601Formatter

        output = ISO8601Formatter(source="gate1").format(_record("Test"))
        timestamp_str = output.split(" ")[0]

        assert timestamp_str.endswith("Z"), f"Timestamp '{timestamp_str}' should end with Z"
        assert datetime.fromisoformat(timestamp_str.replace("Z", "+00:00")) is not None

    def test_different_log_levels(self):
        """Verify all log levels are formatted correctly."""
        from worldconf.logging_config import TRACE, ISO8601Formatter

        formatter = ISO8601Formatter(source="test")
        for level, level_name in [
            (TRACE, "TRACE"),
            (logging.DEBUG, "DEBUG"),
            (logging.INFO, "INFO"),
            (logging.WARNING, "WARNING"),
            (logging.ERROR, "ERROR"),
            (logging.CRITICAL, "CRITICAL"),
        ]:
            output = formatter.format(_record("Message", level))
            assert f"] {level_name} " in output, f"Level {level_name} not found in output"

    def test_message_formatting_with_args(self):
        """Verify message formatting works with arguments."""
        from worldconf.logging_config import ISO8601Formatter

        output = ISO8601Formatter(source="test").format(_record("dispatcher %s at %s", args=("1", "10.0.0.1")))

        assert "dispatcher 1 at 10.0.0.1" in output


class TestConfigureLogging:
    """Test root logger setup from environment."""

    def test_level_from_env(self, monkeypatch: pytest.MonkeyPatch, restore_root_logger: None):
        from worldconf.logging_config import TRACE, configure_logging

        monkeypatch.setenv("LOG_LEVEL", "trace")
        assert configure_logging(source="test").level == TRACE

        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert configure_logging(source="test").level == logging.DEBUG

        monkeypatch.delenv("LOG_LEVEL")
        assert configure_logging(source="test").level == logging.INFO

    def test_debug_flag(self, monkeypatch: pytest.MonkeyPatch, restore_root_logger: None):
        from worldconf.logging_config import configure_logging

        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert configure_logging(source="test", debug=True).level == logging.DEBUG

    def test_single_stdout_handler(self, restore_root_logger: None):
        from worldconf.logging_config import configure_logging

        configure_logging(source="test")
        root = configure_logging(source="test")

        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stdout  # type: ignore[attr-defined]

    def test_trace_method(self, restore_root_logger: None, capsys: pytest.CaptureFixture[str]):
        from worldconf.logging_config import TRACE, configure_logging

        configure_logging(source="test", level=TRACE)
        logging.getLogger("worldconf.test").trace("very verbose")  # type: ignore[attr-defined]

        assert "[test] TRACE very verbose" in capsys.readouterr().out


class TestRoleLogging:
    """Test logging configured from game, gate and dispatcher configs."""

    @pytest.mark.parametrize(
        ("value", "level"),
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warn", logging.WARNING),
            ("error", logging.ERROR),
            ("panic", logging.CRITICAL),
            ("fatal", logging.CRITICAL),
            ("nonsense", logging.DEBUG),
        ],
    )
    def test_parse_role_log_level(self, value: str, level: int):
        from worldconf.logging_config import parse_role_log_level

        assert parse_role_log_level(value) == level

    def test_file_and_stderr(self, tmp_path: Path, restore_root_logger: None):
        from worldconf.logging_config import configure_role_logging

        log_file = tmp_path / "game1.log"
        root = configure_role_logging("game1", GameConfig(log_file=str(log_file), log_level="info"))

        assert root.level == logging.INFO
        assert {type(h) for h in root.handlers} == {logging.FileHandler, logging.StreamHandler}

        logging.getLogger("worldconf.test").info("entity saved")
        for handler in root.handlers:
            handler.flush()
        assert "[game1] INFO entity saved" in log_file.read_text(encoding="utf-8")

    def test_stderr_only(self, restore_root_logger: None):
        from worldconf.logging_config import configure_role_logging

        root = configure_role_logging("gate2", GateConfig(log_file="", log_level="error"))

        assert root.level == logging.ERROR
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr  # type: ignore[attr-defined]

    def test_file_only(self, tmp_path: Path, restore_root_logger: None):
        from worldconf.logging_config import configure_role_logging

        config = DispatcherConfig(log_file=str(tmp_path / "dispatcher.log"), log_stderr=False)
        root = configure_role_logging("dispatcher1", config)

        assert [type(h) for h in root.handlers] == [logging.FileHandler]

    def test_reconfigure_closes_previous_file(self, tmp_path: Path, restore_root_logger: None):
        from worldconf.logging_config import configure_role_logging

        config = GameConfig(log_file=str(tmp_path / "game.log"), log_stderr=False)
        first = configure_role_logging("game1", config).handlers[0]
        logging.getLogger("worldconf.test").info("before reload")

        root = configure_role_logging("game1", config)

        assert first not in root.handlers
        assert first.stream is None  # type: ignore[attr-defined]
        assert "before reload" in (tmp_path / "game.log").read_text(encoding="utf-8")
