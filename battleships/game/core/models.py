"""Core domain models used by the board, the session and the controller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum

BOARD_SIZE = 10


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"


class ShipType(StrEnum):
    """Ship classes making up a fleet."""

    CARRIER = "CARRIER"
    BATTLESHIP = "BATTLESHIP"
    CRUISER = "CRUISER"
    SUBMARINE = "SUBMARINE"
    DESTROYER = "DESTROYER"

    @property
    def size(self) -> int:
        return SHIP_LENGTHS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


SHIP_LENGTHS: dict[ShipType, int] = {
    ShipType.CARRIER: 5,
    ShipType.BATTLESHIP: 4,
    ShipType.CRUISER: 3,
    ShipType.SUBMARINE: 3,
    ShipType.DESTROYER: 2,
}

DEFAULT_FLEET: tuple[ShipType, ...] = (
    ShipType.CARRIER,
    ShipType.BATTLESHIP,
    ShipType.CRUISER,
    ShipType.SUBMARINE,
    ShipType.DESTROYER,
)


class ResultOfAttack(StrEnum):
    """Outcome of a single shot."""

    HIT = "HIT"
    MISS = "MISS"
    DESTROYED = "DESTROYED"
    SHOT_ALREADY = "SHOT_ALREADY"
    GAME_OVER = "GAME_OVER"


class TileView(IntEnum):
    """What an attacker knows about one cell of the enemy grid."""

    UNKNOWN = 0
    MISS = 1
    HIT = 2
    SUNK = 3


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class ShipPlacement:
    """Placement of a single ship."""

    ship_type: ShipType
    bow: Coord
    orientation: Orientation


@dataclass(slots=True)
class FleetPlacement:
    """Collection of ship placements."""

    ships: list[ShipPlacement]


@dataclass(frozen=True, slots=True)
class AttackResult:
    """Immutable outcome of one shot, produced by the session."""

    value: ResultOfAttack
    row: int
    column: int
    text: str
    ship: ShipType | None = None

    @property
    def coord(self) -> Coord:
        return Coord(self.row, self.column)

    @property
    def is_hit(self) -> bool:
        return self.value in (ResultOfAttack.HIT, ResultOfAttack.DESTROYED, ResultOfAttack.GAME_OVER)

    def __str__(self) -> str:
        if self.ship is None:
            return self.text
        return f"{self.text} {self.ship.display_name}"


def cells_for_placement(placement: ShipPlacement) -> list[Coord]:
    """Compute occupied cells for a ship placement."""
    step_row, step_col = (0, 1) if placement.orientation is Orientation.HORIZONTAL else (1, 0)
    return [
        Coord(placement.bow.row + i * step_row, placement.bow.col + i * step_col)
        for i in range(placement.ship_type.size)
    ]
