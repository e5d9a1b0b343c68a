"""Data models for the game state snapshot."""

from .state import (
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

__all__ = [
    "Cell",
    "CellOpponentWorm",
    "CellPlayerWorm",
    "CellType",
    "Opponent",
    "OpponentWorm",
    "Player",
    "PlayerWorm",
    "Position",
    "Powerup",
    "PowerupType",
    "State",
    "Weapon",
    "Worm",
]
