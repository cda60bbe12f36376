"""
Role parsers.

Each role has a common reader, which starts from the literal model defaults,
and an instance reader, which starts from a value copy of the common config.
Both overlay the keys found in the section and reject unknown keys.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .errors import UnknownKeyError, ValidationError
from .models import DebugConfig, DeploymentConfig, DispatcherConfig, GameConfig, GateConfig, KVDBConfig, StorageConfig
from .schema import (
    DEBUG_KEYS,
    DEPLOYMENT_KEYS,
    DISPATCHER_KEYS,
    GAME_KEYS,
    GATE_KEYS,
    KVDB_KEYS,
    START_NODES_PREFIX,
    STORAGE_KEYS,
    get_schema_key,
)
from .types import ConfigKey, ConfigType
from .validators import REDIS, validate_kvdb_config, validate_storage_config

logger = logging.getLogger(__name__)

# (key, value) pairs of one section, in file order
SectionItems = Iterable[tuple[str, str]]


def _overlay(
    section: str,
    items: SectionItems,
    keys: dict[str, ConfigKey],
    values: dict[str, Any],
    start_nodes: set[str] | None = None,
) -> dict[str, Any]:
    """
    Assign every key of a section onto ``values``.

    Empty values leave the current value untouched, except for durations
    (which fall back to their declared default) and seed nodes (which are
    collected as-is so the backend validator can reject them).

    Raises:
        UnknownKeyError: If a key is not recognized for this section
        ValidationError: If a value cannot be converted to the key's type
    """
    for name, raw in items:
        if start_nodes is not None and name.lower().startswith(START_NODES_PREFIX):
            start_nodes.add(raw)
            continue

        schema = get_schema_key(keys, name)
        if schema is None:
            raise UnknownKeyError(f"section {section} has unknown key: {name}")
        if raw == "" and schema.config_type != ConfigType.SECONDS:
            continue
        values[schema.target] = schema.convert(raw, section)
    return values


def read_deployment_config(section: str, items: SectionItems) -> DeploymentConfig:
    return DeploymentConfig.model_validate(_overlay(section, items, DEPLOYMENT_KEYS, {}))


def read_game_common_config(section: str, items: SectionItems) -> GameConfig:
    return GameConfig.model_validate(_overlay(section, items, GAME_KEYS, {}))


def read_game_config(section: str, items: SectionItems, common: GameConfig) -> GameConfig:
    """Read a ``[gameN]`` section on top of a copy of the common game config."""
    config = GameConfig.model_validate(_overlay(section, items, GAME_KEYS, common.model_dump()))
    if not config.boot_entity:
        raise ValidationError(f"section {section}: boot_entity is not set in game config")
    return config


def read_gate_common_config(section: str, items: SectionItems) -> GateConfig:
    return GateConfig.model_validate(_overlay(section, items, GATE_KEYS, {}))


def read_gate_config(section: str, items: SectionItems, common: GateConfig) -> GateConfig:
    """
    Read a ``[gateN]`` section on top of a copy of the common gate config.

    Compression needs a format; encryption needs both a key and a certificate.
    """
    config = GateConfig.model_validate(_overlay(section, items, GATE_KEYS, common.model_dump()))
    if config.compress_connection and not config.compress_format:
        raise ValidationError(f"gate {section}: compress_connection is enabled, but compress_format is not set")
    if config.encrypt_connection and not config.rsa_key:
        raise ValidationError(f"gate {section}: encrypt_connection is enabled, but rsa_key is not set")
    if config.encrypt_connection and not config.rsa_certificate:
        raise ValidationError(f"gate {section}: encrypt_connection is enabled, but rsa_certificate is not set")
    return config


def read_dispatcher_common_config(section: str, items: SectionItems) -> DispatcherConfig:
    return DispatcherConfig.model_validate(_overlay(section, items, DISPATCHER_KEYS, {}))


def read_dispatcher_config(section: str, items: SectionItems, common: DispatcherConfig) -> DispatcherConfig:
    return DispatcherConfig.model_validate(_overlay(section, items, DISPATCHER_KEYS, common.model_dump()))


def read_storage_config(section: str, items: SectionItems) -> StorageConfig:
    """Read and validate the ``[storage]`` section."""
    start_nodes: set[str] = set()
    values = _overlay(section, items, STORAGE_KEYS, {}, start_nodes)
    if values.get("type") == REDIS and not values.get("db"):
        values["db"] = "0"
    values["start_nodes"] = frozenset(start_nodes)

    config = StorageConfig.model_validate(values)
    validate_storage_config(config)
    return config


def read_kvdb_config(section: str, items: SectionItems) -> KVDBConfig:
    """Read and validate the ``[kvdb]`` section."""
    start_nodes: set[str] = set()
    values = _overlay(section, items, KVDB_KEYS, {}, start_nodes)
    if values.get("type") == REDIS and not values.get("db"):
        values["db"] = "0"
    values["start_nodes"] = frozenset(start_nodes)

    config = KVDBConfig.model_validate(values)
    validate_kvdb_config(config)
    if not config.type:
        logger.debug("kvdb is not enabled")
    return config


def read_debug_config(section: str, items: SectionItems) -> DebugConfig:
    return DebugConfig.model_validate(_overlay(section, items, DEBUG_KEYS, {}))
