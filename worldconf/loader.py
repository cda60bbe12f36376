"""
ConfigLoader - lazily built, reloadable configuration provider.

One instance is created by the process entry point and handed to every
consumer. The aggregate is built on first access while holding a lock, so
concurrent callers never trigger concurrent builds.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping
from os import PathLike
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_json

from .builder import build_config
from .models import DeploymentConfig, DispatcherConfig, GameConfig, GateConfig, KVDBConfig, StorageConfig, WorldConfig
from .schema import DEFAULT_CONFIG_FILE

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Configuration provider with fast-fail behavior.

    States: unloaded -> building (lock held) -> ready -> (reload) -> unloaded.
    A failed build leaves the loader unloaded and propagates the ConfigError.

    Usage:
        # Create once at process startup
        loader = ConfigLoader("world.ini")

        # Typed accessors
        game = loader.get_game(1)
        dispatcher_ids = loader.get_dispatcher_ids()

        # Rebuild from the file
        loader.reload()
    """

    def __init__(self, config_file: str | PathLike[str] = DEFAULT_CONFIG_FILE):
        """
        Initialize the config loader.

        Args:
            config_file: Path of the INI file. Nothing is read until first access.
        """
        self._config_file = os.fspath(config_file)
        self._lock = threading.Lock()
        self._config: WorldConfig | None = None

    def set_config_file(self, config_file: str | PathLike[str]) -> None:
        """Set the config file path. Takes effect on the next build."""
        with self._lock:
            self._config_file = os.fspath(config_file)
            if self._config is not None:
                logger.warning(f"Config file set to {self._config_file} after load; call reload() to use it")

    @property
    def config_file_path(self) -> str:
        return self._config_file

    @property
    def config_dir(self) -> str:
        """Directory part of the config file path (empty for a bare file name)."""
        return os.path.dirname(self._config_file)

    @property
    def is_loaded(self) -> bool:
        return self._config is not None

    def get(self) -> WorldConfig:
        """
        Get the aggregate config, building it if necessary.

        Raises:
            ConfigError: If the file cannot be read or fails validation
        """
        with self._lock:
            if self._config is None:
                self._config = self._build()
            return self._config

    def reload(self) -> WorldConfig:
        """Discard the cached config and build it again from the file."""
        with self._lock:
            self._config = None
        return self.get()

    def _build(self) -> WorldConfig:
        logger.info(f"Using config file: {self._config_file}")
        config = build_config(self._config_file)
        logger.info(f">>> config <<< debug = {config.debug.debug}")
        logger.info(f">>> config <<< dispatcher count = {len(config.dispatchers)}")
        logger.info(f">>> config <<< desired game count = {config.deployment.desired_games}")
        logger.info(f">>> config <<< desired gate count = {config.deployment.desired_gates}")
        logger.info(f">>> config <<< storage type = {config.storage.type}")
        logger.info(f">>> config <<< KVDB type = {config.kvdb.type}")
        return config

    def get_deployment(self) -> DeploymentConfig:
        return self.get().deployment

    def get_game(self, game_id: int) -> GameConfig:
        """Config of game ``game_id``, or the common game config if it has no section."""
        config = self.get()
        return config.games.get(game_id, config.game_common)

    def get_gate(self, gate_id: int) -> GateConfig:
        """Config of gate ``gate_id``, or the common gate config if it has no section."""
        config = self.get()
        return config.gates.get(gate_id, config.gate_common)

    def get_dispatcher(self, dispatcher_id: int) -> DispatcherConfig | None:
        return self.get().dispatchers.get(dispatcher_id)

    def get_dispatcher_ids(self) -> list[int]:
        """All configured dispatcher IDs in ascending order."""
        return sorted(self.get().dispatchers)

    def get_storage(self) -> StorageConfig:
        return self.get().storage

    def get_kvdb(self) -> KVDBConfig:
        return self.get().kvdb

    def debug(self) -> bool:
        return self.get().debug.debug


def dump_pretty(obj: Any) -> str:
    """
    Format any resolved config (or a dict/list of them) as indented JSON.

    Returns the error text instead of raising, since output is for diagnostics only.
    """
    try:
        if isinstance(obj, BaseModel):
            return obj.model_dump_json(indent=4)
        if isinstance(obj, Mapping):
            obj = dict(obj)
        return to_json(obj, indent=4).decode()
    except (TypeError, ValueError) as e:
        return str(e)
