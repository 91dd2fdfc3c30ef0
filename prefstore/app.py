"""Command line access to preference files."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import ConfigError, StoreConfig
from .logging_config import LOG_LEVELS, setup_logging
from .preferences import AsyncPreferences, Preferences
from .store import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = Path.home() / ".prefstore"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prefstore", description="Read and write JSON preference files")
    parser.add_argument("--config", type=Path, help="Path to a YAML configuration", default=None)
    parser.add_argument("--dir", type=Path, help="Storage directory for preference files", default=None)
    parser.add_argument("--default-path", type=Path, help="Override the default preference file", default=None)
    parser.add_argument("--file", type=str, help="Logical preference file name", default=None)
    parser.add_argument("--async", dest="use_async", action="store_true", help="Use the asyncio API")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=None, help="Logging level (default: WARNING)"
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("path", help="Print the default preference file path")
    commands.add_parser("dump", help="Print the whole preference document")

    has = commands.add_parser("has", help="Exit 0 if KEY is set, 1 otherwise")
    has.add_argument("key")

    get = commands.add_parser("get", help="Print the value of KEY")
    get.add_argument("key")
    get.add_argument("--default", default="", help="Value printed when KEY is not set")

    get_many = commands.add_parser("get-many", help="Print the values of several keys as JSON")
    get_many.add_argument("keys", nargs="+")

    set_ = commands.add_parser("set", help="Store VALUE under KEY")
    set_.add_argument("key")
    set_.add_argument("value")

    set_many = commands.add_parser("set-many", help="Store several KEY=VALUE pairs in one write")
    set_many.add_argument("pairs", nargs="+", metavar="KEY=VALUE")

    delete = commands.add_parser("delete", help="Remove KEY")
    delete.add_argument("key")
    return parser


def load_config(args: argparse.Namespace) -> StoreConfig:
    if args.config:
        config = StoreConfig.from_yaml(args.config)
    else:
        config = StoreConfig.for_directory(DEFAULT_STORAGE_DIR)
    # CLI overrides file
    if args.dir:
        config = replace(config, storage_dir=args.dir)
    if args.default_path:
        config = replace(config, default_path=args.default_path)
    return config


def parse_pairs(pairs: List[str]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        result[key] = value
    return result


def run_command(api: Preferences | AsyncPreferences, args: argparse.Namespace) -> Any:
    """Dispatch ``args.command``; returns a coroutine when ``api`` is asynchronous."""

    command = args.command
    if command == "path":
        return api.get_default_preference_file_path()
    if command == "dump":
        return api.get_preferences(args.file)
    if command == "has":
        return api.has_key(args.key, args.file)
    if command == "get":
        return api.get_state(args.key, args.default, args.file)
    if command == "get-many":
        return api.get_states(args.keys, args.file)
    if command == "set":
        return api.set_state(args.key, args.value, args.file)
    if command == "set-many":
        return api.set_states(parse_pairs(args.pairs), args.file)
    if command == "delete":
        return api.delete_key(args.key, args.file)
    raise ValueError(f"Unknown command {command!r}")


def render(command: str, result: Any) -> tuple[int, Optional[str]]:
    if command in {"set", "delete"}:
        return (0 if result else 1), None
    if command == "has":
        return (0 if result else 1), "true" if result else "false"
    if command in {"get-many", "set-many"}:
        return 0, json.dumps(result, ensure_ascii=False)
    if command == "dump":
        return 0, json.dumps(result, indent=2, sort_keys=True, ensure_ascii=False)
    return 0, str(result)


def main(argv: Optional[list[str]] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(args)
    except ConfigError as exc:
        print(f"prefstore: {exc}", file=sys.stderr)
        return 2

    api: Preferences | AsyncPreferences = AsyncPreferences(config) if args.use_async else Preferences(config)
    try:
        result = run_command(api, args)
        if asyncio.iscoroutine(result):
            result = asyncio.run(result)
    except (InvalidArgumentError, ValueError) as exc:
        arg_parser.error(str(exc))

    exit_code, output = render(args.command, result)
    if output is not None:
        print(output)
    logger.debug("Command %s finished with exit code %d", args.command, exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
