"""CLI commands for inspecting and checking wormbot settings."""

import argparse
import json
import os
from pathlib import Path

import yaml

from wormbot.config import (
    Config,
    ConfigError,
    find_config_file,
    load_config,
    validate_config,
)
from wormbot.config.config import ENV_VARS


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wormbot config",
        description="Inspect and check wormbot settings",
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>")

    validate = commands.add_parser(
        "validate", help="Load settings and check they are usable"
    )
    validate.add_argument("file", type=Path, nargs="?", help="Configuration file")

    show = commands.add_parser("show", help="Print the effective settings")
    show.add_argument("file", type=Path, nargs="?", help="Configuration file")
    show.add_argument(
        "--format",
        "-f",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml)",
    )

    commands.add_parser(
        "env", help="List environment overrides and the settings they control"
    )
    return parser


def _setting(config: Config, dotted: str) -> object:
    section, field = dotted.split(".")
    return getattr(getattr(config, section), field)


def config_validate_command(file: Path | None) -> int:
    """Check that the settings load and point at a usable state file.

    Args:
        file: Explicit configuration file, or None to discover one

    Returns:
        Exit code (0 for success, 1 for error)
    """
    source = file or find_config_file()
    print(f"Validating settings from {source or 'defaults'} and environment")

    try:
        config = load_config(file)
        validate_config(config)
    except ConfigError as e:
        print(f"✗ {e}")
        return 1

    print(f"✓ Configuration is valid (state file: {config.loader.state_file})")
    return 0


def config_show_command(file: Path | None, output_format: str) -> int:
    """Print the effective settings after file and environment overrides.

    Args:
        file: Explicit configuration file, or None to discover one
        output_format: "yaml" or "json"

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config = load_config(file)
    except ConfigError as e:
        print(f"Error loading configuration: {e}")
        return 1

    settings = config.model_dump()
    if output_format == "json":
        print(json.dumps(settings, indent=2))
    else:
        print(yaml.safe_dump(settings, default_flow_style=False, sort_keys=True))
    return 0


def config_env_command() -> int:
    """List each environment override, its raw value and the resulting setting.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config = load_config()
    except ConfigError as e:
        print(f"Error loading configuration: {e}")
        return 1

    print(f"Config file: {find_config_file() or 'none found'}")
    for var, dotted in ENV_VARS.items():
        raw = os.getenv(var)
        state = f"{var}={raw}" if raw else f"{var} (not set)"
        print(f"  {state:<40} {dotted} = {_setting(config, dotted)!r}")
    return 0


def run_config_command(args: list[str]) -> int:
    """Run configuration management commands.

    Args:
        args: Command line arguments

    Returns:
        Exit code (0 for success, 1 for error, 2 for usage errors)
    """
    parser = _build_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    if parsed_args.command == "validate":
        return config_validate_command(parsed_args.file)
    elif parsed_args.command == "show":
        return config_show_command(parsed_args.file, parsed_args.format)
    elif parsed_args.command == "env":
        return config_env_command()

    parser.print_help()
    return 0
