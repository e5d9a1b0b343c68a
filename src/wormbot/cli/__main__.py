"""Entry point for `python -m wormbot.cli` command."""

import sys


def main(args: list[str] | None = None) -> int:
    """Main entry point for the wormbot CLI."""
    if args is None:
        args = sys.argv[1:]

    if not args or args[0] in ["-h", "--help", "help"]:
        print_help()
        return 0

    command = args[0]

    if command == "version":
        print_version()
        return 0
    elif command == "inspect":
        return run_inspect(args[1:])
    elif command == "config":
        return run_config(args[1:])
    else:
        print(f"Unknown command: {command}")
        print_help()
        return 1


def print_help() -> None:
    """Print CLI help message."""
    print(
        """wormbot - Worms game bot starter kit

Usage:
    wormbot <command> [options]

Commands:
    version     Show version information
    inspect     Load a state snapshot and print a summary
    config      Configuration management
    help        Show this help message

Options:
    -h, --help  Show help message
"""
    )


def print_version() -> None:
    """Print version information."""
    from wormbot import __version__

    print(f"wormbot {__version__}")


def run_inspect(args: list[str]) -> int:
    """Run the inspect command."""
    from wormbot.cli.snapshot import run_inspect_command

    return run_inspect_command(args)


def run_config(args: list[str]) -> int:
    """Run the config command."""
    from wormbot.cli.config import run_config_command

    return run_config_command(args)


if __name__ == "__main__":
    sys.exit(main())
