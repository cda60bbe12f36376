"""
Root test configuration and fixtures for worldconf.

Provides INI writers over pytest's tmp_path and a minimal valid deployment
file that individual tests extend.
"""

from __future__ import annotations

import logging
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from worldconf import ConfigLoader
from worldconf.logging_config import ISO8601Formatter

# Smallest file that passes global validation
MINIMAL_INI = """
[deployment]
desired_games = 2
desired_gates = 1

[dispatcher1]
ip = 127.0.0.1
port = 13001
"""

# Mirrors a typical production deployment
FULL_INI = """
[deployment]
desired_games = 3
desired_gates = 2

[dispatcher_common]
bind_ip = 0.0.0.0
log_level = info

[dispatcher1]
ip = 10.0.0.1
port = 13001
bind_port = 13101

[dispatcher2]
ip = 10.0.0.2
port = 13002

[game_common]
boot_entity = Account
save_interval = 600
log_file = game.log
log_stderr = false
http_ip = 127.0.0.1
log_level = info
position_sync_interval_ms = 50

[game1]
boot_entity = Lobby
http_port = 25001

[game3]
gomaxprocs = 4
ban_boot_entity = true

[gate_common]
ip = 0.0.0.0
compress_connection = true
encrypt_connection = true
heartbeat_check_interval = 30

[gate1]
port = 14001

[gate2]
port = 14002
compress_format = zlib

[storage]
type = mongodb
url = mongodb://127.0.0.1:27017/
db = world

[kvdb]
type = redis
url = redis://127.0.0.1:6379

[debug]
debug = true
"""


def dedent_ini(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Return a function writing INI text to a file and returning its path."""

    def _write(text: str, name: str = "world.ini") -> Path:
        path = tmp_path / name
        path.write_text(dedent_ini(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def minimal_config_file(write_config: Callable[..., Path]) -> Path:
    return write_config(MINIMAL_INI)


@pytest.fixture
def full_config_file(write_config: Callable[..., Path]) -> Path:
    return write_config(FULL_INI)


@pytest.fixture
def full_loader(full_config_file: Path) -> ConfigLoader:
    return ConfigLoader(full_config_file)


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """Remove handlers installed by configure_logging and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, ISO8601Formatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def minimal_ini() -> str:
    return MINIMAL_INI
