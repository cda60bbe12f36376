"""
Resolved configuration models.

Every model is frozen: an aggregate is built once per load cycle and never
mutated afterwards. Field defaults are the literal defaults applied to the
common section of each role.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

DEFAULT_LOCALHOST_IP = "127.0.0.1"
DEFAULT_HTTP_IP = "127.0.0.1"
DEFAULT_LOG_LEVEL = "debug"
DEFAULT_SAVE_INTERVAL = timedelta(minutes=5)
DEFAULT_STORAGE_DB = "goworld"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class DeploymentConfig(_FrozenModel):
    """Desired number of game and gate processes."""

    desired_games: int = 0
    desired_gates: int = 0


class GameConfig(_FrozenModel):
    """Worker (game) process settings."""

    boot_entity: str = "Boot"
    save_interval: timedelta = DEFAULT_SAVE_INTERVAL
    log_file: str = "game.log"
    log_stderr: bool = True
    http_ip: str = DEFAULT_HTTP_IP
    http_port: int = 0  # diagnostics HTTP disabled by default
    log_level: str = DEFAULT_LOG_LEVEL
    gomaxprocs: int = 0
    position_sync_interval_ms: int = 100
    ban_boot_entity: bool = False


class GateConfig(_FrozenModel):
    """Gateway (gate) process settings."""

    listen_ip: str = "0.0.0.0"
    listen_port: int = 0
    log_file: str = "gate.log"
    log_stderr: bool = True
    http_ip: str = DEFAULT_HTTP_IP
    http_port: int = 0
    log_level: str = DEFAULT_LOG_LEVEL
    gomaxprocs: int = 0
    compress_connection: bool = False
    compress_format: str = "gwsnappy"
    encrypt_connection: bool = False
    rsa_key: str = "rsa.key"
    rsa_certificate: str = "rsa.crt"
    heartbeat_check_interval: int = 0
    position_sync_interval_ms: int = 100


class DispatcherConfig(_FrozenModel):
    """Coordinator peer (dispatcher) settings."""

    bind_ip: str = DEFAULT_LOCALHOST_IP
    bind_port: int = 0
    ip: str = DEFAULT_LOCALHOST_IP
    port: int = 0
    log_file: str = "dispatcher.log"
    log_stderr: bool = True
    http_ip: str = DEFAULT_HTTP_IP
    http_port: int = 0
    log_level: str = DEFAULT_LOG_LEVEL


class _BackendConfig(_FrozenModel):
    type: str = ""
    url: str = ""
    db: str = ""
    driver: str = ""
    start_nodes: frozenset[str] = Field(default_factory=frozenset)

    @field_serializer("start_nodes")
    def serialize_start_nodes(self, nodes: frozenset[str]) -> list[str]:
        return sorted(nodes)


class StorageConfig(_BackendConfig):
    """Entity storage backend (filesystem, mongodb, redis, redis_cluster, sql)."""

    type: str = "filesystem"
    directory: str = "_entity_storage"
    db: str = DEFAULT_STORAGE_DB


class KVDBConfig(_BackendConfig):
    """Key-value database backend. An empty type disables the feature."""

    collection: str = ""


class DebugConfig(_FrozenModel):
    debug: bool = False


class WorldConfig(_FrozenModel):
    """
    The complete resolved configuration tree for one deployment.

    The per-instance mappings are keyed by the numeric section suffix and are
    read-only views.
    """

    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)
    dispatcher_common: DispatcherConfig = Field(default_factory=DispatcherConfig)
    game_common: GameConfig = Field(default_factory=GameConfig)
    gate_common: GateConfig = Field(default_factory=GateConfig)
    dispatchers: Mapping[int, DispatcherConfig] = Field(default_factory=dict, validate_default=True)
    games: Mapping[int, GameConfig] = Field(default_factory=dict, validate_default=True)
    gates: Mapping[int, GateConfig] = Field(default_factory=dict, validate_default=True)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    kvdb: KVDBConfig = Field(default_factory=KVDBConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)

    @field_validator("dispatchers", "games", "gates", mode="after")
    @classmethod
    def freeze_instances(cls, instances: Mapping[int, Any]) -> Mapping[int, Any]:
        return MappingProxyType(dict(instances))

    @field_serializer("dispatchers", "games", "gates")
    def serialize_instances(self, instances: Mapping[int, Any]) -> dict[int, Any]:
        return dict(instances)
