"""Configuration schema registry.

Defines every section name and every recognized key with its type.
Unknown sections and keys are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import DEFAULT_SAVE_INTERVAL
from .types import ConfigKey, ConfigType

DEFAULT_CONFIG_FILE = "world.ini"

# Reserved section that is never parsed
DEFAULT_SECTION = "default"

DEPLOYMENT_SECTION = "deployment"
STORAGE_SECTION = "storage"
KVDB_SECTION = "kvdb"
DEBUG_SECTION = "debug"

SINGLETON_SECTIONS = (DEPLOYMENT_SECTION, STORAGE_SECTION, KVDB_SECTION, DEBUG_SECTION)

# Any key starting with this prefix adds its value to the seed node set
START_NODES_PREFIX = "start_nodes_"

MAX_INSTANCE_ID = 0xFFFF


@dataclass(frozen=True)
class RoleSections:
    """
    Section naming for one role.

    Attributes:
        role: Canonical role name ("dispatcher", "game", "gate")
        common_names: Accepted names of the role's common section
        prefixes: Accepted per-instance section prefixes
    """

    role: str
    common_names: tuple[str, ...]
    prefixes: tuple[str, ...]


DISPATCHER_ROLE = RoleSections(
    role="dispatcher",
    common_names=("dispatcher_common", "coordinator_common", "coordinator-peer_common"),
    prefixes=("dispatcher", "coordinator-peer"),
)
GAME_ROLE = RoleSections(
    role="game",
    common_names=("game_common", "worker_common"),
    prefixes=("game", "worker"),
)
GATE_ROLE = RoleSections(
    role="gate",
    common_names=("gate_common", "gateway_common"),
    prefixes=("gate", "gateway"),
)

ROLES = (DISPATCHER_ROLE, GAME_ROLE, GATE_ROLE)


def _keys(*keys: ConfigKey) -> dict[str, ConfigKey]:
    return {k.key: k for k in keys}


# =============================================================================
# SECTION KEY REGISTRIES
# =============================================================================

DEPLOYMENT_KEYS = _keys(
    ConfigKey("desired_games", ConfigType.INT, description="Number of game processes to run"),
    ConfigKey("desired_workers", ConfigType.INT, field="desired_games", description="Alias of desired_games"),
    ConfigKey("desired_gates", ConfigType.INT, description="Number of gate processes to run"),
    ConfigKey("desired_gateways", ConfigType.INT, field="desired_gates", description="Alias of desired_gates"),
)

GAME_KEYS = _keys(
    ConfigKey("boot_entity", ConfigType.STRING, description="Entity type created for each new client"),
    ConfigKey(
        "save_interval",
        ConfigType.SECONDS,
        description="Entity save interval in seconds",
        default=DEFAULT_SAVE_INTERVAL,
    ),
    ConfigKey("log_file", ConfigType.STRING),
    ConfigKey("log_stderr", ConfigType.BOOL),
    ConfigKey("http_ip", ConfigType.STRING, description="Diagnostics HTTP listen address"),
    ConfigKey("http_port", ConfigType.INT, description="Diagnostics HTTP port (0 disables)"),
    ConfigKey("log_level", ConfigType.STRING),
    ConfigKey("gomaxprocs", ConfigType.INT, description="Processor count hint (0 keeps runtime default)"),
    ConfigKey("position_sync_interval_ms", ConfigType.INT),
    ConfigKey("ban_boot_entity", ConfigType.BOOL, description="Refuse to create the boot entity"),
)

GATE_KEYS = _keys(
    ConfigKey("ip", ConfigType.STRING, field="listen_ip", description="Client listen address"),
    ConfigKey("port", ConfigType.INT, field="listen_port", description="Client listen port"),
    ConfigKey("log_file", ConfigType.STRING),
    ConfigKey("log_stderr", ConfigType.BOOL),
    ConfigKey("http_ip", ConfigType.STRING),
    ConfigKey("http_port", ConfigType.INT),
    ConfigKey("log_level", ConfigType.STRING),
    ConfigKey("gomaxprocs", ConfigType.INT),
    ConfigKey("compress_connection", ConfigType.BOOL),
    ConfigKey("compress_format", ConfigType.STRING),
    ConfigKey("encrypt_connection", ConfigType.BOOL),
    ConfigKey("rsa_key", ConfigType.STRING, description="TLS key file"),
    ConfigKey("rsa_certificate", ConfigType.STRING, description="TLS certificate file"),
    ConfigKey("heartbeat_check_interval", ConfigType.INT, description="Client heartbeat timeout in seconds"),
    ConfigKey("position_sync_interval_ms", ConfigType.INT),
)

DISPATCHER_KEYS = _keys(
    ConfigKey("bind_ip", ConfigType.STRING, description="Local listen address"),
    ConfigKey("bind_port", ConfigType.INT, description="Local listen port"),
    ConfigKey("ip", ConfigType.STRING, description="Address advertised to peers"),
    ConfigKey("port", ConfigType.INT, description="Port advertised to peers"),
    ConfigKey("log_file", ConfigType.STRING),
    ConfigKey("log_stderr", ConfigType.BOOL),
    ConfigKey("http_ip", ConfigType.STRING),
    ConfigKey("http_port", ConfigType.INT),
    ConfigKey("log_level", ConfigType.STRING),
)

STORAGE_KEYS = _keys(
    ConfigKey("type", ConfigType.STRING, description="filesystem, mongodb, redis, redis_cluster or sql"),
    ConfigKey("directory", ConfigType.STRING),
    ConfigKey("url", ConfigType.STRING),
    ConfigKey("db", ConfigType.STRING),
    ConfigKey("driver", ConfigType.STRING, description="SQL driver name"),
)

KVDB_KEYS = _keys(
    ConfigKey("type", ConfigType.STRING, description="mongodb, redis, redis_cluster, sql or empty"),
    ConfigKey("url", ConfigType.STRING),
    ConfigKey("db", ConfigType.STRING),
    ConfigKey("collection", ConfigType.STRING),
    ConfigKey("driver", ConfigType.STRING),
)

DEBUG_KEYS = _keys(
    ConfigKey("debug", ConfigType.BOOL),
)


def get_schema_key(keys: dict[str, ConfigKey], name: str) -> ConfigKey | None:
    """
    Look up a key definition by its case-insensitive name.

    Args:
        keys: One of the section key registries
        name: The key as written in the file

    Returns:
        ConfigKey if found, None if unknown
    """
    return keys.get(name.lower())
