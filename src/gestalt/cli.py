"""Gestalt CLI: inspect what a configuration directory loads to.

Usage:
    gestalt show                          # whole ./config directory
    gestalt show --env production         # one environment branch per file
    gestalt show --key database.host      # navigate to a dotted key
    gestalt show --format json --strict   # JSON output, fail on unknown files
    gestalt files --path ~/app/config     # what would be loaded or skipped
"""

import argparse
import json
import logging
import os
import sys
from typing import Any

import yaml

from .errors import GestaltError, UnsupportedExtensionError
from .handlers import handler_for
from .loader import ConfigLoader, destination_key
from .settings import GestaltSettings
from .store import Store

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _settings_from_args(args: argparse.Namespace) -> GestaltSettings:
    """Environment settings, overridden by command line flags."""
    settings = GestaltSettings.from_env()
    if getattr(args, "path", None):
        settings.config_path = args.path
    if getattr(args, "strict", False):
        settings.ignore_unsupported_extensions = False
    return settings


def _plain(value: Any) -> Any:
    return value.to_dict() if isinstance(value, Store) else value


def _render(value: Any, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(value, indent=2, default=str)
    return yaml.safe_dump(value, sort_keys=False, default_flow_style=False).rstrip("\n")


def cmd_show(args: argparse.Namespace) -> int:
    """Load the configuration directory and print it (or one key of it)."""
    settings = _settings_from_args(args)
    env = args.env or os.environ.get("GESTALT_ENV")

    try:
        value: Any = ConfigLoader(settings).load(env)
        if args.key:
            value = value.get_path(args.key.split("."))
    except (GestaltError, ValueError, yaml.YAMLError, OSError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(_render(_plain(value), args.format))
    return 0


def cmd_files(args: argparse.Namespace) -> int:
    """List every file in the configuration directory and what happens to it."""
    settings = _settings_from_args(args)
    loader = ConfigLoader(settings)

    files = loader.config_files()
    if not files:
        print(f"No files found in {settings.config_path}")
        return 0

    for path in files:
        if settings.is_ignored(path):
            status = "ignored"
        else:
            try:
                handler_for(path, loader.handlers)
                status = "load"
            except UnsupportedExtensionError:
                status = "unsupported"
        print(f"{status:<12} {destination_key(path):<24} {path}")
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="gestalt",
        description="Gestalt: directory-based JSON/YAML configuration",
    )

    # options accepted after any subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", type=str, default=None,
                        choices=["debug", "info", "warning", "error"])

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # show
    show_parser = subparsers.add_parser(
        "show", parents=[common], help="Print the loaded configuration"
    )
    show_parser.add_argument("--path", "-p", type=str, default=None,
                             help="Configuration directory (default: $GESTALT_CONFIG_PATH or ./config)")
    show_parser.add_argument("--env", "-e", type=str, default=None,
                             help="Root key to extract from every file (default: $GESTALT_ENV)")
    show_parser.add_argument("--key", "-k", type=str, default=None,
                             help="Dotted key to print, e.g. database.host")
    show_parser.add_argument("--format", "-f", type=str, default="yaml",
                             choices=["yaml", "json"])
    show_parser.add_argument("--strict", action="store_true",
                             help="Fail on files with unsupported extensions")

    # files
    files_parser = subparsers.add_parser(
        "files", parents=[common], help="List configuration files"
    )
    files_parser.add_argument("--path", "-p", type=str, default=None)

    args = parser.parse_args()

    if getattr(args, "log_level", None):
        logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)

    if args.command == "show":
        sys.exit(cmd_show(args))
    elif args.command == "files":
        sys.exit(cmd_files(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
