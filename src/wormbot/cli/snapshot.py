"""CLI utility for loading and summarizing a game state snapshot."""

import argparse
import sys
from pathlib import Path

from wormbot.config import ConfigError, load_config
from wormbot.core.loader import check_consistency, dump_state, load_state
from wormbot.schemas.state import State
from wormbot.utils.errors import StateError
from wormbot.utils.telemetry import get_logger, setup_logging

logger = get_logger(__name__)


def summarize_state(state: State) -> list[str]:
    """Build a human-readable summary of a snapshot.

    Args:
        state: Snapshot to describe

    Returns:
        Summary lines
    """
    lines = [
        f"Round {state.current_round}/{state.max_rounds}, "
        f"map {state.map_size}x{state.map_size}",
        f"Player {state.my_player.id}: score={state.my_player.score} "
        f"health={state.my_player.health} "
        f"worms alive={len(state.my_player.alive_worms())}/{len(state.my_player.worms)}",
    ]

    active = next(
        (w for w in state.my_player.worms if w.id == state.current_worm_id), None
    )
    if active is None:
        lines.append(f"Active worm {state.current_worm_id}: missing")
    else:
        lines.append(
            f"Active worm {active.id} at ({active.position.x}, {active.position.y}) "
            f"health={active.health} weapon={active.weapon.damage}dmg/"
            f"{active.weapon.range}rng"
        )

    for opponent in state.opponents:
        positions = ", ".join(
            f"{w.id}@({w.position.x}, {w.position.y})" for w in opponent.worms
        )
        lines.append(
            f"Opponent {opponent.id}: score={opponent.score} worms=[{positions}]"
        )

    cells = state.cells()
    powerups = [c for c in cells if c.powerup is not None]
    lines.append(
        f"Cells: {len(cells)} in {len(state.map)} rows, "
        f"{sum(1 for c in cells if c.is_occupied())} occupied, "
        f"{len(powerups)} with powerups"
    )
    for cell in powerups:
        lines.append(
            f"  {cell.powerup.type.value} worth {cell.powerup.value} at ({cell.x}, {cell.y})"
        )

    if state.consecutive_do_nothing_count:
        lines.append(f"Consecutive do-nothings: {state.consecutive_do_nothing_count}")

    return lines


def run_inspect_command(args: list[str]) -> int:
    """Run the inspect command with parsed arguments.

    Args:
        args: Command line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = argparse.ArgumentParser(
        prog="wormbot inspect",
        description="Load a game state snapshot and print a summary",
    )

    parser.add_argument(
        "state_file",
        type=Path,
        nargs="?",
        help="Path to the state file (default: loader.state_file from config)",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Configuration file to use",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the re-encoded snapshot instead of a summary",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when the snapshot violates map or worm invariants",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    try:
        config = load_config(parsed_args.config)
    except ConfigError as e:
        print(f"Error loading configuration: {e}")
        return 1

    log_level = "DEBUG" if parsed_args.verbose else config.logging.level
    setup_logging(log_level, config.logging.format)

    state_file = parsed_args.state_file or Path(config.loader.state_file)
    strict = parsed_args.strict or config.loader.strict

    try:
        state = load_state(state_file)
    except StateError as e:
        print(f"✗ {e}")
        return 1

    problems = check_consistency(state)
    for problem in problems:
        logger.warning("Inconsistent snapshot", source=str(state_file), problem=problem)

    if parsed_args.json:
        print(dump_state(state, indent=2))
    else:
        for line in summarize_state(state):
            print(line)

    if problems:
        report = sys.stderr if parsed_args.json else sys.stdout
        marker = "✗" if strict else "!"
        print(f"{marker} {len(problems)} consistency problem(s):", file=report)
        for problem in problems:
            print(f"  - {problem}", file=report)
        if strict:
            return 1

    return 0
