"""
Aggregate builder.

Reads an INI file, routes every section to its role parser and produces one
validated WorldConfig. Common sections are read first because per-instance
sections use them as override bases.
"""

from __future__ import annotations

import configparser
import logging
from os import PathLike
from typing import Any

from .errors import ConfigFileError, DuplicateSectionError, UnknownSectionError, ValidationError
from .models import DebugConfig, DeploymentConfig, KVDBConfig, StorageConfig, WorldConfig
from .parsers import (
    SectionItems,
    read_debug_config,
    read_deployment_config,
    read_dispatcher_common_config,
    read_dispatcher_config,
    read_game_common_config,
    read_game_config,
    read_gate_common_config,
    read_gate_config,
    read_kvdb_config,
    read_storage_config,
)
from .router import SectionKind, classify_section
from .schema import (
    DEBUG_SECTION,
    DEPLOYMENT_SECTION,
    DISPATCHER_ROLE,
    GAME_ROLE,
    GATE_ROLE,
    KVDB_SECTION,
    ROLES,
    STORAGE_SECTION,
)

logger = logging.getLogger(__name__)

# configparser merges its default section into every other section; give it a
# name no file can declare so a literal [DEFAULT] stays a plain, ignored section
_PARSER_DEFAULT_SECTION = "\x00"

# Keys written before the first header land here and are ignored like [default]
_LEADING_SECTION = "\x00leading"


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=True,
        inline_comment_prefixes=("#", ";"),
        default_section=_PARSER_DEFAULT_SECTION,
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def _parse_text(text: str, source: str) -> configparser.ConfigParser:
    parser = _new_parser()
    try:
        try:
            parser.read_string(text, source=source)
        except configparser.MissingSectionHeaderError:
            parser = _new_parser()
            parser.read_string(f"[{_LEADING_SECTION}]\n{text}", source=source)
    except configparser.DuplicateSectionError as e:
        raise DuplicateSectionError(f"duplicate section: {e.section} (line {e.lineno})") from e
    except configparser.DuplicateOptionError as e:
        raise DuplicateSectionError(f"section {e.section} has duplicate key: {e.option} (line {e.lineno})") from e
    except configparser.Error as e:
        raise ConfigFileError(f"read config error: {e}") from e
    return parser


def read_config_file(path: str | PathLike[str]) -> configparser.ConfigParser:
    """
    Load an INI file.

    Raises:
        ConfigFileError: If the file is missing, unreadable or not valid INI
        DuplicateSectionError: If a section name or a key within one section repeats
    """
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigFileError(f"read config error: cannot open {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigFileError(f"read config error: {e}") from e
    return _parse_text(text, str(path))


def read_config_string(text: str, source: str = "<string>") -> configparser.ConfigParser:
    return _parse_text(text, source)


def _items(parser: configparser.ConfigParser, section: str | None) -> SectionItems:
    if section is None:
        return []
    return parser.items(section, raw=True)


def _find_common_sections(parser: configparser.ConfigParser) -> dict[str, str]:
    """Map each role to the name of its common section as written in the file."""
    found: dict[str, str] = {}
    for section in parser.sections():
        name = section.lower()
        for role in ROLES:
            if name not in role.common_names:
                continue
            if role.role in found:
                raise DuplicateSectionError(
                    f"duplicate common section for {role.role}: {found[role.role]} and {section}"
                )
            found[role.role] = section
    return found


def build_config_from_parser(parser: configparser.ConfigParser) -> WorldConfig:
    """
    Build and validate the aggregate config from a loaded INI parser.

    Raises:
        ConfigError: On any structural or validation problem
    """
    commons = _find_common_sections(parser)
    dispatcher_common = read_dispatcher_common_config(
        commons.get(DISPATCHER_ROLE.role, DISPATCHER_ROLE.common_names[0]),
        _items(parser, commons.get(DISPATCHER_ROLE.role)),
    )
    game_common = read_game_common_config(
        commons.get(GAME_ROLE.role, GAME_ROLE.common_names[0]),
        _items(parser, commons.get(GAME_ROLE.role)),
    )
    gate_common = read_gate_common_config(
        commons.get(GATE_ROLE.role, GATE_ROLE.common_names[0]),
        _items(parser, commons.get(GATE_ROLE.role)),
    )

    parts: dict[str, Any] = {
        DEPLOYMENT_SECTION: DeploymentConfig(),
        STORAGE_SECTION: StorageConfig(),
        KVDB_SECTION: KVDBConfig(),
        DEBUG_SECTION: DebugConfig(),
    }
    seen_singletons: dict[str, str] = {}
    instances: dict[str, dict[int, Any]] = {role.role: {} for role in ROLES}
    instance_sections: dict[tuple[str, int], str] = {}

    for section in parser.sections():
        if section == _LEADING_SECTION:
            continue
        route = classify_section(section)
        if route.kind in (SectionKind.DEFAULT, SectionKind.COMMON):
            continue

        items = _items(parser, section)
        if route.kind == SectionKind.SINGLETON:
            if route.target in seen_singletons:
                raise DuplicateSectionError(f"duplicate section: {seen_singletons[route.target]} and {section}")
            seen_singletons[route.target] = section

            if route.target == DEPLOYMENT_SECTION:
                parts[DEPLOYMENT_SECTION] = read_deployment_config(section, items)
            elif route.target == STORAGE_SECTION:
                parts[STORAGE_SECTION] = read_storage_config(section, items)
            elif route.target == KVDB_SECTION:
                parts[KVDB_SECTION] = read_kvdb_config(section, items)
            elif route.target == DEBUG_SECTION:
                parts[DEBUG_SECTION] = read_debug_config(section, items)
            continue

        if route.instance_id is None:
            raise UnknownSectionError(f"unknown section: {section}")
        key = (route.target, route.instance_id)
        if key in instance_sections:
            raise DuplicateSectionError(f"duplicate section: {instance_sections[key]} and {section}")
        instance_sections[key] = section

        if route.target == DISPATCHER_ROLE.role:
            instances[route.target][route.instance_id] = read_dispatcher_config(section, items, dispatcher_common)
        elif route.target == GAME_ROLE.role:
            instances[route.target][route.instance_id] = read_game_config(section, items, game_common)
        elif route.target == GATE_ROLE.role:
            instances[route.target][route.instance_id] = read_gate_config(section, items, gate_common)
        logger.debug(f"Read section {section} as {route.target} {route.instance_id}")

    config = WorldConfig(
        deployment=parts[DEPLOYMENT_SECTION],
        dispatcher_common=dispatcher_common,
        game_common=game_common,
        gate_common=gate_common,
        dispatchers=instances[DISPATCHER_ROLE.role],
        games=instances[GAME_ROLE.role],
        gates=instances[GATE_ROLE.role],
        storage=parts[STORAGE_SECTION],
        kvdb=parts[KVDB_SECTION],
        debug=parts[DEBUG_SECTION],
    )
    validate_world_config(config)
    return config


def build_config(path: str | PathLike[str]) -> WorldConfig:
    """Read ``path`` and build the aggregate config, without caching."""
    return build_config_from_parser(read_config_file(path))


def build_config_from_string(text: str) -> WorldConfig:
    return build_config_from_parser(read_config_string(text))


def validate_world_config(config: WorldConfig) -> None:
    """
    Cross-section checks on a built config.

    Desired game and gate counts must be positive, and dispatcher IDs must be
    exactly 1..N.

    Raises:
        ValidationError: If any check fails
    """
    deployment = config.deployment
    if deployment.desired_gates <= 0:
        raise ValidationError(f"[deployment].desired_gates is {deployment.desired_gates}, which must be positive")
    if deployment.desired_games <= 0:
        raise ValidationError(f"[deployment].desired_games is {deployment.desired_games}, which must be positive")

    count = len(config.dispatchers)
    if count <= 0:
        raise ValidationError("dispatcher not found in config file, must have at least 1 dispatcher")
    for dispatcher_id in range(1, count + 1):
        if dispatcher_id not in config.dispatchers:
            raise ValidationError(
                f"found {count} dispatchers in config file, but dispatcher{dispatcher_id} is not found. "
                f"dispatcher IDs must be 1~{count}"
            )
