"""
Deployment configuration resolution for multi-role game server clusters.

Reads one INI file describing dispatchers, games, gates and their backends,
and serves validated, immutable config objects.

Usage:
    from worldconf import ConfigLoader, ConfigError

    loader = ConfigLoader("world.ini")
    game = loader.get_game(1)
    storage = loader.get_storage()
"""

from __future__ import annotations

from .builder import build_config, build_config_from_string, validate_world_config
from .errors import (
    BackendValidationError,
    ConfigError,
    ConfigFileError,
    ConfigStructureError,
    DuplicateSectionError,
    InvalidSectionIdError,
    UnknownKeyError,
    UnknownSectionError,
    ValidationError,
)
from .loader import ConfigLoader, dump_pretty
from .models import (
    DebugConfig,
    DeploymentConfig,
    DispatcherConfig,
    GameConfig,
    GateConfig,
    KVDBConfig,
    StorageConfig,
    WorldConfig,
)

__all__ = [
    # Main loader
    "ConfigLoader",
    "build_config",
    "build_config_from_string",
    "validate_world_config",
    "dump_pretty",
    # Error classes
    "ConfigError",
    "ConfigFileError",
    "ConfigStructureError",
    "UnknownSectionError",
    "InvalidSectionIdError",
    "DuplicateSectionError",
    "UnknownKeyError",
    "ValidationError",
    "BackendValidationError",
    # Models
    "WorldConfig",
    "DeploymentConfig",
    "DispatcherConfig",
    "GameConfig",
    "GateConfig",
    "StorageConfig",
    "KVDBConfig",
    "DebugConfig",
]
