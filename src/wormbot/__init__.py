"""wormbot - Starter kit for a worms game bot.

wormbot reads the game state snapshot the engine writes each round into
immutable, validated models, and offers a few grid helpers to build a bot's
decision logic on.
"""

__version__ = "0.1.0"

from .core import check_consistency, dump_state, load_state, parse_state
from .schemas import (
    Cell,
    CellOpponentWorm,
    CellPlayerWorm,
    CellType,
    Opponent,
    OpponentWorm,
    Player,
    PlayerWorm,
    Position,
    Powerup,
    PowerupType,
    State,
    Weapon,
    Worm,
)
from .utils.errors import (
    InvariantViolationError,
    StateError,
    StateParseError,
    StateReadError,
)

__all__ = [
    "Cell",
    "CellOpponentWorm",
    "CellPlayerWorm",
    "CellType",
    "InvariantViolationError",
    "Opponent",
    "OpponentWorm",
    "Player",
    "PlayerWorm",
    "Position",
    "Powerup",
    "PowerupType",
    "State",
    "StateError",
    "StateParseError",
    "StateReadError",
    "Weapon",
    "Worm",
    "__version__",
    "check_consistency",
    "dump_state",
    "load_state",
    "parse_state",
]
