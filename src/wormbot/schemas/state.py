"""Pydantic models for the per-round game state snapshot.

The game engine writes one JSON document per round describing the world from
the perspective of the player the bot controls. Wire field names are
lowerCamelCase and enumeration tokens are UPPER_SNAKE_CASE; Python attributes
use snake_case. Every model is frozen once validated.
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from wormbot.utils.errors import InvariantViolationError

U32_MAX = 2**32 - 1

UInt = Annotated[int, Field(strict=True, ge=0, le=U32_MAX)]
"""Unsigned 32-bit integer; strings, floats and booleans are rejected."""


class WireModel(BaseModel):
    """Base model mapping snake_case attributes onto camelCase wire names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class CellType(str, Enum):
    """Terrain of a map cell."""

    AIR = "AIR"
    DIRT = "DIRT"
    DEEP_SPACE = "DEEP_SPACE"


class PowerupType(str, Enum):
    """Kind of powerup lying on a cell."""

    HEALTH_PACK = "HEALTH_PACK"


def _check_distance(distance: int) -> None:
    if distance < 0:
        raise ValueError(f"distance must be non-negative, got {distance}")


class Position(WireModel):
    """Integer grid coordinate."""

    x: UInt
    y: UInt

    def west(self, distance: int) -> "Position | None":
        """Step ``distance`` cells towards x = 0, or None past the edge."""
        _check_distance(distance)
        x = self.x - distance
        if x < 0:
            return None
        return Position(x=x, y=self.y)

    def east(self, distance: int, bound: int) -> "Position | None":
        """Step ``distance`` cells towards ``bound``, or None unless x < bound."""
        _check_distance(distance)
        x = self.x + distance
        if x >= bound or x > U32_MAX:
            return None
        return Position(x=x, y=self.y)

    def north(self, distance: int) -> "Position | None":
        """Step ``distance`` cells towards y = 0, or None past the edge."""
        _check_distance(distance)
        y = self.y - distance
        if y < 0:
            return None
        return Position(x=self.x, y=y)

    def south(self, distance: int, bound: int) -> "Position | None":
        """Step ``distance`` cells towards ``bound``, or None unless y < bound."""
        _check_distance(distance)
        y = self.y + distance
        if y >= bound or y > U32_MAX:
            return None
        return Position(x=self.x, y=y)


class Weapon(WireModel):
    """Weapon stats of a worm controlled by the viewing player."""

    damage: UInt
    range: UInt


class Worm(WireModel):
    """Fields shared by every worm variant."""

    id: UInt
    health: UInt
    position: Position
    digging_range: UInt
    movement_range: UInt

    def is_alive(self) -> bool:
        return self.health > 0


class PlayerWorm(Worm):
    """Worm owned by the viewing player, including its weapon."""

    weapon: Weapon


class OpponentWorm(Worm):
    """Opponent worm; weapon stats are hidden from the viewer."""


class CellPlayerWorm(PlayerWorm):
    """Player-owned worm standing on a cell."""

    player_id: UInt


class CellOpponentWorm(OpponentWorm):
    """Opponent-owned worm standing on a cell."""

    player_id: UInt


class Powerup(WireModel):
    """Collectable item lying on a cell."""

    type: PowerupType
    value: UInt


class Cell(WireModel):
    """One square of the map grid."""

    x: UInt
    y: UInt
    type: CellType
    occupier: CellPlayerWorm | CellOpponentWorm | None = None
    powerup: Powerup | None = None

    @field_validator("occupier", mode="before")
    @classmethod
    def validate_occupier(cls, v: Any) -> Any:
        """Resolve the untagged occupier shape.

        The weapon-bearing variant is tried first; only when it does not fit
        is the weapon-less variant tried. The reverse order would accept every
        player worm as an opponent worm.
        """
        if v is None or isinstance(v, (CellPlayerWorm, CellOpponentWorm)):
            return v
        try:
            return CellPlayerWorm.model_validate(v)
        except ValidationError:
            pass
        try:
            return CellOpponentWorm.model_validate(v)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
                for err in e.errors()
            )
            raise ValueError(
                f"Occupier matches neither player nor opponent worm ({problems})"
            ) from None

    @property
    def position(self) -> Position:
        return Position(x=self.x, y=self.y)

    def is_occupied(self) -> bool:
        return self.occupier is not None


class Player(WireModel):
    """The player the bot controls."""

    id: UInt
    score: UInt
    health: UInt
    worms: list[PlayerWorm]

    def alive_worms(self) -> list[PlayerWorm]:
        return [worm for worm in self.worms if worm.is_alive()]


class Opponent(WireModel):
    """Summary of an opposing player."""

    id: UInt
    score: UInt
    worms: list[OpponentWorm]


class State(WireModel):
    """Complete snapshot of one round as seen by the controlled player.

    The outer ``map`` list holds rows (constant ``y``) and each inner list
    holds the cells of that row, so engine snapshots satisfy
    ``map[y][x].x == x``.
    """

    current_round: UInt
    max_rounds: UInt
    map_size: UInt
    pushback_damage: UInt | None = None
    current_worm_id: UInt
    consecutive_do_nothing_count: UInt
    my_player: Player
    opponents: list[Opponent]
    map: list[list[Cell]]

    def active_worm(self) -> PlayerWorm:
        """Return the worm whose turn it is.

        Raises:
            InvariantViolationError: If ``current_worm_id`` does not appear in
                the player's worms. This never happens for engine-written
                snapshots.
        """
        for worm in self.my_player.worms:
            if worm.id == self.current_worm_id:
                return worm
        raise InvariantViolationError(
            f"Active worm {self.current_worm_id} not found among the worms "
            f"of player {self.my_player.id}"
        )

    def cell_at(self, position: Position) -> Cell:
        """Return the cell at ``position`` by scanning the whole grid.

        Raises:
            InvariantViolationError: If no cell matches, i.e. the position is
                out of bounds or the grid is incomplete.
        """
        for row in self.map:
            for cell in row:
                if cell.x == position.x and cell.y == position.y:
                    return cell
        raise InvariantViolationError(
            f"No cell at ({position.x}, {position.y}) in a map of size {self.map_size}"
        )

    def cells(self) -> list[Cell]:
        """All cells in row-major order."""
        return [cell for row in self.map for cell in row]
