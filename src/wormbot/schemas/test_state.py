"""Unit tests for game state model validation and helpers."""

import pytest
from pydantic import ValidationError

from wormbot.utils.errors import InvariantViolationError, StateError

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
)


def make_worm(worm_id: int, x: int = 0, y: int = 0, health: int = 100) -> PlayerWorm:
    return PlayerWorm(
        id=worm_id,
        health=health,
        position=Position(x=x, y=y),
        digging_range=1,
        movement_range=1,
        weapon=Weapon(damage=1, range=3),
    )


def make_state(size: int = 3, worm_ids: tuple[int, ...] = (1, 2, 3)) -> State:
    grid = [
        [Cell(x=x, y=y, type=CellType.AIR) for x in range(size)] for y in range(size)
    ]
    return State(
        current_round=1,
        max_rounds=400,
        map_size=size,
        current_worm_id=worm_ids[0] if worm_ids else 1,
        consecutive_do_nothing_count=0,
        my_player=Player(
            id=1,
            score=100,
            health=300,
            worms=[make_worm(worm_id) for worm_id in worm_ids],
        ),
        opponents=[],
        map=grid,
    )


class TestPosition:
    """Test Position step helpers."""

    def test_west(self) -> None:
        """Test west decreases x and keeps y."""
        assert Position(x=5, y=2).west(3) == Position(x=2, y=2)
        assert Position(x=5, y=2).west(5) == Position(x=0, y=2)
        assert Position(x=5, y=2).west(6) is None

    def test_east(self) -> None:
        """Test east increases x below the bound only."""
        assert Position(x=5, y=2).east(3, 33) == Position(x=8, y=2)
        assert Position(x=5, y=2).east(27, 33) == Position(x=32, y=2)
        assert Position(x=5, y=2).east(28, 33) is None

    def test_north(self) -> None:
        """Test north decreases y and keeps x."""
        assert Position(x=2, y=5).north(1) == Position(x=2, y=4)
        assert Position(x=2, y=0).north(1) is None

    def test_south(self) -> None:
        """Test south increases y below the bound only."""
        assert Position(x=2, y=5).south(1, 7) == Position(x=2, y=6)
        assert Position(x=2, y=6).south(1, 7) is None

    def test_zero_distance(self) -> None:
        """Test a zero step returns an equal position inside the bound."""
        pos = Position(x=3, y=3)
        assert pos.west(0) == pos
        assert pos.north(0) == pos
        assert pos.east(0, 4) == pos
        assert pos.south(0, 4) == pos
        assert pos.east(0, 3) is None
        assert pos.south(0, 3) is None

    def test_steps_do_not_mutate(self) -> None:
        """Test helpers return new positions."""
        pos = Position(x=3, y=3)
        pos.west(1)
        pos.east(1, 10)
        assert pos == Position(x=3, y=3)

    def test_bounded_steps_never_reach_bound(self) -> None:
        """Test east/south stay strictly below the bound across a sweep."""
        for coord in range(6):
            for distance in range(8):
                for bound in range(8):
                    pos = Position(x=coord, y=coord)
                    for step, axis in ((pos.east, "x"), (pos.south, "y")):
                        result = step(distance, bound)
                        if coord + distance < bound:
                            assert result is not None
                            assert getattr(result, axis) == coord + distance
                        else:
                            assert result is None

    def test_unbounded_steps_never_go_negative(self) -> None:
        """Test west/north never produce negative coordinates across a sweep."""
        for coord in range(6):
            for distance in range(8):
                pos = Position(x=coord, y=coord)
                for step, axis in ((pos.west, "x"), (pos.north, "y")):
                    result = step(distance)
                    if distance <= coord:
                        assert result is not None
                        assert getattr(result, axis) == coord - distance
                    else:
                        assert result is None

    def test_negative_distance_rejected(self) -> None:
        """Test every helper refuses a negative step."""
        pos = Position(x=2, y=2)
        for distance in (-1, -5, -40):
            for step in (pos.west, pos.north):
                with pytest.raises(ValueError, match="distance must be non-negative"):
                    step(distance)
            for bounded_step in (pos.east, pos.south):
                with pytest.raises(ValueError, match="distance must be non-negative"):
                    bounded_step(distance, 10)

    def test_bounded_steps_past_coordinate_range(self) -> None:
        """Test east/south return None when the result overflows a coordinate."""
        pos = Position(x=2**32 - 1, y=2**32 - 1)
        assert pos.east(1, 2**40) is None
        assert pos.south(1, 2**40) is None

    def test_negative_coordinates_rejected(self) -> None:
        """Test coordinates must be non-negative."""
        with pytest.raises(
            ValidationError, match="Input should be greater than or equal to 0"
        ):
            Position(x=-1, y=0)

    def test_frozen(self) -> None:
        """Test positions are immutable."""
        pos = Position(x=1, y=1)
        with pytest.raises(ValidationError):
            pos.x = 2  # type: ignore[misc]


class TestWireMapping:
    """Test camelCase aliases and strict typing."""

    def test_camel_case_aliases(self) -> None:
        """Test wire names populate snake_case attributes."""
        worm = OpponentWorm.model_validate(
            {
                "id": 1,
                "health": 100,
                "position": {"x": 31, "y": 16},
                "diggingRange": 1,
                "movementRange": 2,
            }
        )
        assert worm.digging_range == 1
        assert worm.movement_range == 2

    def test_dump_uses_wire_names(self) -> None:
        """Test serialization by alias produces camelCase keys."""
        data = make_worm(1).model_dump(by_alias=True)
        assert set(data) == {
            "id",
            "health",
            "position",
            "diggingRange",
            "movementRange",
            "weapon",
        }

    def test_string_numbers_rejected(self) -> None:
        """Test numeric fields do not coerce strings."""
        with pytest.raises(ValidationError, match="Input should be a valid integer"):
            Weapon.model_validate({"damage": "1", "range": 3})

    def test_float_numbers_rejected(self) -> None:
        """Test numeric fields do not coerce floats."""
        with pytest.raises(ValidationError, match="Input should be a valid integer"):
            Weapon.model_validate_json('{"damage": 1.5, "range": 3}')

    def test_numbers_limited_to_u32(self) -> None:
        """Test numeric fields stop at the unsigned 32-bit maximum."""
        weapon = Weapon.model_validate({"damage": 2**32 - 1, "range": 3})
        assert weapon.damage == 2**32 - 1
        with pytest.raises(
            ValidationError, match="Input should be less than or equal to 4294967295"
        ):
            Weapon.model_validate_json('{"damage": 1099511627776, "range": 3}')

    def test_booleans_rejected(self) -> None:
        """Test numeric fields do not accept booleans."""
        with pytest.raises(ValidationError):
            Weapon.model_validate({"damage": True, "range": 3})

    def test_enum_tokens(self) -> None:
        """Test terrain and powerup tokens map to enum members."""
        cell = Cell.model_validate_json(
            '{"x": 0, "y": 1, "type": "DEEP_SPACE",'
            ' "powerup": {"type": "HEALTH_PACK", "value": 5}}'
        )
        assert cell.type is CellType.DEEP_SPACE
        assert cell.powerup == Powerup(type=PowerupType.HEALTH_PACK, value=5)

    def test_unknown_cell_type_rejected(self) -> None:
        """Test unknown terrain tokens fail instead of defaulting."""
        with pytest.raises(ValidationError, match="LAVA"):
            Cell.model_validate_json('{"x": 0, "y": 0, "type": "LAVA"}')

    def test_unknown_powerup_type_rejected(self) -> None:
        """Test the powerup enumeration is closed."""
        with pytest.raises(ValidationError):
            Powerup.model_validate_json('{"type": "SUPER_BOMB", "value": 5}')

    def test_lowercase_token_rejected(self) -> None:
        """Test tokens are case-sensitive."""
        with pytest.raises(ValidationError):
            Cell.model_validate_json('{"x": 0, "y": 0, "type": "air"}')

    def test_unknown_fields_ignored(self) -> None:
        """Test extra engine fields do not break parsing."""
        weapon = Weapon.model_validate_json('{"damage": 1, "range": 3, "ammo": 9}')
        assert weapon == Weapon(damage=1, range=3)


class TestCellOccupier:
    """Test structural discrimination of cell occupiers."""

    occupier_base = {
        "id": 1,
        "playerId": 2,
        "health": 100,
        "position": {"x": 1, "y": 1},
        "diggingRange": 1,
        "movementRange": 1,
    }

    def test_absent_optional_fields(self) -> None:
        """Test missing occupier and powerup map to None."""
        cell = Cell.model_validate_json('{"x": 0, "y": 0, "type": "AIR"}')
        assert cell.occupier is None
        assert cell.powerup is None
        assert not cell.is_occupied()

    def test_weaponless_occupier_is_opponent(self) -> None:
        """Test an occupier without weapon parses as opponent worm."""
        cell = Cell.model_validate(
            {"x": 1, "y": 1, "type": "AIR", "occupier": self.occupier_base}
        )
        assert type(cell.occupier) is CellOpponentWorm
        assert cell.occupier.player_id == 2
        assert cell.is_occupied()

    def test_weapon_occupier_is_player(self) -> None:
        """Test an occupier with weapon parses as player worm, keeping the weapon."""
        payload = {**self.occupier_base, "weapon": {"damage": 1, "range": 3}}
        cell = Cell.model_validate({"x": 1, "y": 1, "type": "AIR", "occupier": payload})
        assert type(cell.occupier) is CellPlayerWorm
        assert cell.occupier.weapon == Weapon(damage=1, range=3)

    def test_malformed_weapon_falls_back_to_opponent(self) -> None:
        """Test a weapon that does not fit the player shape is not fatal."""
        payload = {**self.occupier_base, "weapon": {"damage": 1}}
        cell = Cell.model_validate({"x": 1, "y": 1, "type": "AIR", "occupier": payload})
        assert type(cell.occupier) is CellOpponentWorm

    def test_occupier_matching_no_variant(self) -> None:
        """Test an occupier missing shared fields fails with its path."""
        payload = {k: v for k, v in self.occupier_base.items() if k != "health"}
        with pytest.raises(ValidationError) as exc_info:
            Cell.model_validate({"x": 1, "y": 1, "type": "AIR", "occupier": payload})

        errors = exc_info.value.errors()
        assert errors[0]["loc"] == ("occupier",)
        assert "health" in errors[0]["msg"]

    def test_model_instances_accepted(self) -> None:
        """Test occupiers can be passed as model instances."""
        occupier = CellOpponentWorm(
            id=1,
            player_id=2,
            health=100,
            position=Position(x=1, y=1),
            digging_range=1,
            movement_range=1,
        )
        cell = Cell(x=1, y=1, type=CellType.AIR, occupier=occupier)
        assert cell.occupier == occupier
        assert type(cell.occupier) is CellOpponentWorm


class TestWorms:
    """Test worm and player helpers."""

    def test_is_alive(self) -> None:
        """Test worms with no health are dead."""
        assert make_worm(1, health=1).is_alive()
        assert not make_worm(1, health=0).is_alive()

    def test_alive_worms(self) -> None:
        """Test player filters dead worms."""
        player = Player(
            id=1,
            score=0,
            health=100,
            worms=[make_worm(1, health=0), make_worm(2, health=100)],
        )
        assert [w.id for w in player.alive_worms()] == [2]

    def test_opponent_worms_have_no_weapon(self) -> None:
        """Test opponent summaries drop weapon data."""
        opponent = Opponent.model_validate(
            {
                "id": 2,
                "score": 100,
                "worms": [
                    {
                        "id": 1,
                        "health": 100,
                        "position": {"x": 31, "y": 16},
                        "diggingRange": 1,
                        "movementRange": 1,
                        "weapon": {"damage": 1, "range": 3},
                    }
                ],
            }
        )
        assert not hasattr(opponent.worms[0], "weapon")


class TestStateAccessors:
    """Test State convenience accessors."""

    def test_active_worm(self) -> None:
        """Test the active worm matches current_worm_id."""
        state = make_state(worm_ids=(1, 2, 3))
        for worm_id in (1, 2, 3):
            active = state.model_copy(update={"current_worm_id": worm_id}).active_worm()
            assert active.id == worm_id

    def test_active_worm_missing(self) -> None:
        """Test a dangling current_worm_id is an invariant violation."""
        state = make_state(worm_ids=(1, 2)).model_copy(update={"current_worm_id": 7})
        with pytest.raises(InvariantViolationError, match="Active worm 7"):
            state.active_worm()

    def test_invariant_violation_is_not_state_error(self) -> None:
        """Test accessor failures stay outside the recoverable hierarchy."""
        assert not issubclass(InvariantViolationError, StateError)
        assert issubclass(InvariantViolationError, AssertionError)

    def test_cell_at_every_coordinate(self) -> None:
        """Test cell_at finds the unique matching cell across the grid."""
        size = 5
        state = make_state(size=size)
        for y in range(size):
            for x in range(size):
                cell = state.cell_at(Position(x=x, y=y))
                assert (cell.x, cell.y) == (x, y)
                matches = [c for c in state.cells() if (c.x, c.y) == (x, y)]
                assert matches == [cell]

    def test_cell_at_out_of_bounds(self) -> None:
        """Test an out-of-bounds lookup is an invariant violation."""
        state = make_state(size=3)
        with pytest.raises(InvariantViolationError, match=r"No cell at \(3, 0\)"):
            state.cell_at(Position(x=3, y=0))

    def test_cell_position(self) -> None:
        """Test cells expose their coordinates as a Position."""
        state = make_state(size=2)
        assert state.map[1][0].position == Position(x=0, y=1)

    def test_pushback_damage_optional(self) -> None:
        """Test pushback damage defaults to None."""
        assert make_state().pushback_damage is None
        state = make_state().model_copy(update={"pushback_damage": 20})
        assert state.pushback_damage == 20
