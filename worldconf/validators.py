"""
Backend validators for storage and kvdb sections.

The set of fields that must be non-empty is determined entirely by the
declared backend type.
"""

from __future__ import annotations

from .errors import BackendValidationError
from .models import KVDBConfig, StorageConfig

FILESYSTEM = "filesystem"
MONGODB = "mongodb"
REDIS = "redis"
REDIS_CLUSTER = "redis_cluster"
SQL = "sql"


def _describe(config: StorageConfig | KVDBConfig) -> str:
    return config.model_dump_json(indent=4)


def _require(config: StorageConfig | KVDBConfig, section: str, *fields: str) -> None:
    missing = [name for name in fields if not getattr(config, name)]
    if missing:
        raise BackendValidationError(
            f"[{section}] {', '.join(missing)} must be set for type {config.type}:\n{_describe(config)}"
        )


def _check_redis_db(config: StorageConfig | KVDBConfig, section: str) -> None:
    try:
        int(config.db, 10)
    except ValueError as e:
        raise BackendValidationError(f"[{section}] redis db must be integer, got {config.db!r}") from e


def _check_start_nodes(config: StorageConfig | KVDBConfig, section: str) -> None:
    if not config.start_nodes:
        raise BackendValidationError(f"must have at least 1 start_nodes for [{section}].{REDIS_CLUSTER}")
    if "" in config.start_nodes:
        raise BackendValidationError(f"[{section}] start_nodes must not be empty")


def validate_storage_config(config: StorageConfig) -> None:
    """
    Check a fully overlaid storage config against its declared type.

    Raises:
        BackendValidationError: If a required field is missing or malformed
    """
    section = "storage"
    if config.type == FILESYSTEM:
        _require(config, section, "directory")
    elif config.type == MONGODB:
        _require(config, section, "url", "db")
    elif config.type == REDIS:
        _require(config, section, "url")
        _check_redis_db(config, section)
    elif config.type == REDIS_CLUSTER:
        _check_start_nodes(config, section)
    elif config.type == SQL:
        _require(config, section, "driver", "url")
    else:
        raise BackendValidationError(f"unknown storage type: {config.type!r}")


def validate_kvdb_config(config: KVDBConfig) -> None:
    """
    Check a fully overlaid kvdb config against its declared type.

    An empty type means kvdb is disabled and is always valid.

    Raises:
        BackendValidationError: If a required field is missing or malformed
    """
    section = "kvdb"
    if config.type == "":
        return
    if config.type == MONGODB:
        _require(config, section, "url", "db", "collection")
    elif config.type == REDIS:
        _require(config, section, "url")
        _check_redis_db(config, section)
    elif config.type == REDIS_CLUSTER:
        _check_start_nodes(config, section)
    elif config.type == SQL:
        _require(config, section, "driver", "url")
    else:
        raise BackendValidationError(f"unknown kvdb storage type: {config.type!r}")
