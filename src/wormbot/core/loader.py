"""Game state loading.

The game engine writes the current round's snapshot as a JSON file before
asking the bot for a command. This module turns that file into a validated,
immutable :class:`~wormbot.schemas.state.State`, and back.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from wormbot.schemas.state import State
from wormbot.utils.errors import StateParseError, StateReadError
from wormbot.utils.telemetry import PerformanceTimer, get_logger, record_state_load

logger = get_logger(__name__)

MEMORY_SOURCE = "<memory>"


def _describe_validation_error(
    error: ValidationError,
) -> tuple[list[str], list[str]]:
    """Flatten a pydantic error into messages and dotted wire field paths."""
    messages: list[str] = []
    paths: list[str] = []
    for err in error.errors(include_url=False):
        path = ".".join(str(part) for part in err["loc"])
        if path:
            paths.append(path)
            messages.append(f"{path}: {err['msg']}")
        else:
            messages.append(err["msg"])
    return messages, paths


def parse_state(data: str | bytes, source: str = MEMORY_SOURCE) -> State:
    """Parse a JSON document into a :class:`State`.

    Args:
        data: Document text, or its UTF-8 encoded bytes
        source: Name used in error messages and logs

    Returns:
        The validated state

    Raises:
        StateParseError: If the document is not UTF-8, not JSON, or does not
            match the snapshot schema
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StateParseError(
                [f"document is not valid UTF-8: {e.reason} at byte {e.start}"],
                source=source,
            ) from e

    try:
        return State.model_validate_json(data)
    except ValidationError as e:
        messages, paths = _describe_validation_error(e)
        raise StateParseError(messages, field_paths=paths, source=source) from e


def load_state(path: str | Path) -> State:
    """Read and parse the state file at ``path``.

    The whole file is read at once and the handle released before parsing.

    Args:
        path: Location of the JSON snapshot

    Returns:
        The validated state

    Raises:
        StateReadError: If the file cannot be read
        StateParseError: If its content is not a valid snapshot
    """
    source = str(path)

    with PerformanceTimer("load_state", source=source, logger=logger) as timer:
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            record_state_load("read_error")
            raise StateReadError(path, e) from e

        timer.add_context(size_bytes=len(raw))

        try:
            state = parse_state(raw, source=source)
        except StateParseError as e:
            record_state_load("parse_error", size_bytes=len(raw))
            timer.add_context(field_paths=e.field_paths)
            raise

        record_state_load("success", size_bytes=len(raw))
        timer.add_context(current_round=state.current_round)

    return state


def dump_state(state: State, indent: int | None = None) -> str:
    """Encode a :class:`State` back into the engine's wire format.

    Absent optional fields (``occupier``, ``powerup``, ``pushbackDamage``) are
    omitted rather than written as ``null``.

    Args:
        state: State to encode
        indent: Pretty-print indentation, compact when None

    Returns:
        JSON document text
    """
    payload = state.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(payload, indent=indent)


def check_consistency(state: State) -> list[str]:
    """Report snapshot invariants that ``state`` violates.

    Loading never enforces these; engine snapshots always satisfy them, so a
    non-empty result points at a hand-written or truncated document.

    Args:
        state: State to check

    Returns:
        Human-readable problem descriptions, empty when consistent
    """
    problems: list[str] = []
    size = state.map_size

    if len(state.map) != size:
        problems.append(f"map has {len(state.map)} rows, expected {size}")

    for y, row in enumerate(state.map):
        if len(row) != size:
            problems.append(f"map row {y} has {len(row)} cells, expected {size}")
        for x, cell in enumerate(row):
            if (cell.x, cell.y) != (x, y):
                problems.append(
                    f"cell at map[{y}][{x}] reports coordinates ({cell.x}, {cell.y})"
                )

    worm_ids = [worm.id for worm in state.my_player.worms]
    if state.current_worm_id not in worm_ids:
        problems.append(
            f"currentWormId {state.current_worm_id} not among player worms {worm_ids}"
        )

    positions = [worm.position for worm in state.my_player.worms]
    positions.extend(
        worm.position for opponent in state.opponents for worm in opponent.worms
    )
    for position in positions:
        if position.x >= size or position.y >= size:
            problems.append(
                f"worm position ({position.x}, {position.y}) outside map of size {size}"
            )

    return problems
