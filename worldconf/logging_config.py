"""
Centralized logging configuration for worldconf processes.

Provides unified logging format across all server roles:
Format: 2026-01-06T14:05:52Z [source] LEVEL message

Environment Variables:
    LOG_LEVEL: Set to "DEBUG", "TRACE", or "INFO" (default)
               - INFO: Normal operation logs
               - DEBUG: Detailed diagnostic information
               - TRACE: Very verbose low-level diagnostics

Usage:
    from worldconf.logging_config import configure_logging, configure_role_logging

    configure_logging(source="worldconf")

    # Once the role's own config is known
    configure_role_logging("game1", loader.get_game(1))
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from typing import TextIO

from .models import DispatcherConfig, GameConfig, GateConfig

# Custom TRACE level for very verbose diagnostics
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# log_level values accepted in role sections
ROLE_LOG_LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
}


def _trace(self: logging.Logger, message: object, *args: object, **kw: object) -> None:
    """Log a message at TRACE level (5)."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kw)  # type: ignore[arg-type]


# Add trace method to Logger class
logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Custom formatter producing ISO8601 timestamps in UTC.

    Output format: 2026-01-06T14:05:52Z [source] LEVEL message
    """

    def __init__(self, source: str = "worldconf"):
        """Initialize formatter with a source identifier.

        Args:
            source: Identifier shown in brackets (e.g., "dispatcher1", "game2")
        """
        self.source = source
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with ISO8601 UTC timestamp."""
        timestamp = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        message = record.getMessage()

        if record.exc_info:
            exception_text = self.formatException(record.exc_info)
            message = f"{message}\n{exception_text}"

        return f"{timestamp} [{self.source}] {record.levelname} {message}"


def _install_handlers(level: int, handlers: list[logging.Handler], source: str) -> logging.Logger:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace existing handlers; close the ones installed here so log files are released
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if isinstance(handler.formatter, ISO8601Formatter):
            handler.close()

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(ISO8601Formatter(source=source))
        root_logger.addHandler(handler)
    return root_logger


def configure_logging(
    source: str = "worldconf",
    level: int | None = None,
    debug: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure logging for a process that has no role config yet.

    Args:
        source: Source identifier for log messages
        level: Logging level (defaults to INFO, or DEBUG/TRACE from LOG_LEVEL env var)
        debug: Enable debug mode (overrides level to DEBUG)
        stream: Output stream (defaults to stdout)

    Returns:
        Configured root logger
    """
    if level is None:
        log_level_env = os.getenv("LOG_LEVEL", "").upper()
        if log_level_env == "TRACE":
            level = TRACE
        elif log_level_env == "DEBUG" or debug:
            level = logging.DEBUG
        else:
            level = logging.INFO

    return _install_handlers(level, [logging.StreamHandler(stream or sys.stdout)], source)


def parse_role_log_level(log_level: str) -> int:
    """Map a role ``log_level`` value to a logging level, defaulting to DEBUG."""
    return ROLE_LOG_LEVELS.get(log_level.strip().lower(), logging.DEBUG)


def configure_role_logging(
    source: str,
    role_config: GameConfig | GateConfig | DispatcherConfig,
) -> logging.Logger:
    """Configure logging from a resolved role config.

    Writes to ``log_file`` when it is set and to stderr when ``log_stderr``
    is true.

    Args:
        source: Source identifier for log messages (e.g., "game1")
        role_config: The game, gate or dispatcher config of this process

    Returns:
        Configured root logger
    """
    handlers: list[logging.Handler] = []
    if role_config.log_file:
        handlers.append(logging.FileHandler(role_config.log_file, encoding="utf-8"))
    if role_config.log_stderr:
        handlers.append(logging.StreamHandler(sys.stderr))

    root_logger = _install_handlers(parse_role_log_level(role_config.log_level), handlers, source)
    if not handlers:
        root_logger.warning("log_file is empty and log_stderr is off; log output is discarded")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
