"""
Command line entry point.

Validates a config file and prints resolved sections for diagnostics. This is
the only place a configuration error terminates the process.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import Any

from .errors import ConfigError
from .loader import ConfigLoader, dump_pretty
from .logging_config import configure_logging, get_logger
from .schema import DEFAULT_CONFIG_FILE

logger = get_logger(__name__)

DUMP_SECTIONS = ("deployment", "dispatcher", "game", "gate", "storage", "kvdb", "debug")


def load_or_exit(loader: ConfigLoader) -> ConfigLoader:
    """
    Build the loader's config, terminating the process on any config error.

    Returns:
        The same loader, now loaded
    """
    try:
        loader.get()
    except ConfigError as e:
        logger.critical(f"read config error: {e}")
        sys.exit(1)
    return loader


def _select(loader: ConfigLoader, section: str | None, instance_id: int | None) -> Any:
    config = loader.get()
    if section is None:
        return config
    if section == "dispatcher":
        if instance_id is None:
            return config.dispatcher_common
        dispatcher = loader.get_dispatcher(instance_id)
        if dispatcher is None:
            raise ConfigError(f"dispatcher{instance_id} is not configured")
        return dispatcher
    if section == "game":
        return config.game_common if instance_id is None else loader.get_game(instance_id)
    if section == "gate":
        return config.gate_common if instance_id is None else loader.get_gate(instance_id)
    return getattr(config, section)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="worldconf", description="Validate and inspect a deployment config file")
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_FILE, help="config file (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("check", help="validate the config file")

    dump = subparsers.add_parser("dump", help="print the resolved config as JSON")
    dump.add_argument("section", nargs="?", choices=DUMP_SECTIONS)
    dump.add_argument("id", nargs="?", type=int, help="instance ID for dispatcher, game or gate")

    subparsers.add_parser("dispatchers", help="print configured dispatcher IDs")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(source="worldconf", debug=args.verbose, stream=sys.stderr)

    loader = load_or_exit(ConfigLoader(args.config))

    if args.command == "check":
        logger.info(f"{loader.config_file_path} is valid")
    elif args.command == "dump":
        if args.id is not None and args.section not in ("dispatcher", "game", "gate"):
            logger.critical(f"section {args.section} has no instances")
            return 2
        try:
            print(dump_pretty(_select(loader, args.section, args.id)))
        except ConfigError as e:
            logger.critical(str(e))
            return 1
    elif args.command == "dispatchers":
        print(" ".join(str(i) for i in loader.get_dispatcher_ids()))
    return 0
