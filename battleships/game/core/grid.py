"""Sea grid state representation and mutation helpers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from battleships.game.core.models import (
    BOARD_SIZE,
    DEFAULT_FLEET,
    Coord,
    FleetPlacement,
    ResultOfAttack,
    ShipPlacement,
    ShipType,
    TileView,
    cells_for_placement,
)

_SHIP_IDS: dict[ShipType, int] = {ship_type: idx for idx, ship_type in enumerate(DEFAULT_FLEET, start=1)}
_SHIP_BY_ID: dict[int, ShipType] = {idx: ship_type for ship_type, idx in _SHIP_IDS.items()}


@dataclass(frozen=True, slots=True)
class TargetView:
    """Attacker-side knowledge of a grid: shot marks and the ships still afloat."""

    cells: np.ndarray
    remaining_lengths: tuple[int, ...]

    @property
    def size(self) -> int:
        return int(self.cells.shape[0])

    def unknown_cells(self) -> list[Coord]:
        return [Coord(int(r), int(c)) for r, c in np.argwhere(self.cells == TileView.UNKNOWN)]


class SeaGrid:
    """Numpy-backed grid owned by exactly one player."""

    def __init__(
        self,
        size: int = BOARD_SIZE,
        on_changed: Callable[[SeaGrid], None] | None = None,
    ) -> None:
        self.size = size
        self._ships = np.zeros((size, size), dtype=np.int16)
        self._shots = np.zeros((size, size), dtype=np.int8)
        self._placements: dict[ShipType, ShipPlacement] = {}
        self._remaining: dict[int, int] = {}
        self._locked = False
        self._on_changed = on_changed

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        """Freeze the deployment; shots are still accepted."""
        self._locked = True

    def in_bounds(self, row: int, col: int) -> bool:
        """Return whether the coordinate is in grid bounds."""
        return 0 <= row < self.size and 0 <= col < self.size

    def can_place(self, placement: ShipPlacement) -> bool:
        """Return whether a placement fits and overlaps no other ship."""
        own_id = _SHIP_IDS[placement.ship_type]
        for cell in cells_for_placement(placement):
            if not self.in_bounds(cell.row, cell.col):
                return False
            if self._ships[cell.row, cell.col] not in (0, own_id):
                return False
        return True

    def place_ship(self, placement: ShipPlacement) -> None:
        """Place a ship, moving it if that ship type is already on the grid."""
        self._require_unlocked()
        if not self.can_place(placement):
            raise ValueError(f"Invalid placement for {placement.ship_type.value}.")
        self._lift(placement.ship_type)
        self._drop(placement)
        self._notify()

    def remove_ship(self, ship_type: ShipType) -> None:
        self._require_unlocked()
        if self._lift(ship_type):
            self._notify()

    def deploy(self, fleet: FleetPlacement) -> None:
        """Replace the whole deployment with the given fleet."""
        self._require_unlocked()
        previous = list(self._placements.values())
        self._clear_ships()
        try:
            for placement in fleet.ships:
                if not self.can_place(placement):
                    raise ValueError(f"Invalid placement for {placement.ship_type.value}.")
                self._drop(placement)
        except ValueError:
            self._clear_ships()
            for placement in previous:
                self._drop(placement)
            raise
        self._notify()

    def placements(self) -> dict[ShipType, ShipPlacement]:
        return dict(self._placements)

    def fleet_complete(self) -> bool:
        """Return whether every ship of the default fleet is on the grid."""
        return all(ship_type in self._placements for ship_type in DEFAULT_FLEET)

    def ship_at(self, row: int, col: int) -> ShipType | None:
        return _SHIP_BY_ID.get(int(self._ships[row, col]))

    def tile_view(self, row: int, col: int) -> TileView:
        """Return the shot mark of one cell, including sunk status."""
        mark = TileView(int(self._shots[row, col]))
        if mark is TileView.HIT and self._remaining.get(int(self._ships[row, col])) == 0:
            return TileView.SUNK
        return mark

    def hit_tile(self, row: int, col: int) -> tuple[ResultOfAttack, ShipType | None]:
        """Apply a shot and return the outcome plus the sunk ship type, if any.

        Shots do not call the change listener; the session publishes the change
        once the whole shot is resolved.
        """
        if not self.in_bounds(row, col):
            raise ValueError(f"Shot ({row}, {col}) is outside the {self.size}x{self.size} grid.")
        if self._shots[row, col] != TileView.UNKNOWN:
            return ResultOfAttack.SHOT_ALREADY, None

        ship_id = int(self._ships[row, col])
        if ship_id == 0:
            self._shots[row, col] = TileView.MISS
            return ResultOfAttack.MISS, None

        self._shots[row, col] = TileView.HIT
        self._remaining[ship_id] -= 1
        if self._remaining[ship_id] == 0:
            return ResultOfAttack.DESTROYED, _SHIP_BY_ID[ship_id]
        return ResultOfAttack.HIT, None

    def all_ships_sunk(self) -> bool:
        """Return whether a deployed fleet has been fully sunk."""
        return bool(self._remaining) and all(left == 0 for left in self._remaining.values())

    def ships_afloat(self) -> tuple[ShipType, ...]:
        return tuple(_SHIP_BY_ID[ship_id] for ship_id, left in self._remaining.items() if left > 0)

    def target_view(self) -> TargetView:
        """Project the grid as seen by the opponent."""
        cells = self._shots.copy()
        sunk_ids = [ship_id for ship_id, left in self._remaining.items() if left == 0]
        if sunk_ids:
            cells[np.isin(self._ships, sunk_ids)] = TileView.SUNK
        cells.setflags(write=False)
        lengths = tuple(sorted((ship.size for ship in self.ships_afloat()), reverse=True))
        return TargetView(cells=cells, remaining_lengths=lengths)

    def _lift(self, ship_type: ShipType) -> bool:
        if self._placements.pop(ship_type, None) is None:
            return False
        ship_id = _SHIP_IDS[ship_type]
        self._ships[self._ships == ship_id] = 0
        self._remaining.pop(ship_id, None)
        return True

    def _drop(self, placement: ShipPlacement) -> None:
        ship_id = _SHIP_IDS[placement.ship_type]
        cells = cells_for_placement(placement)
        for cell in cells:
            self._ships[cell.row, cell.col] = ship_id
        self._placements[placement.ship_type] = placement
        self._remaining[ship_id] = len(cells)

    def _clear_ships(self) -> None:
        self._ships.fill(0)
        self._placements.clear()
        self._remaining.clear()

    def _require_unlocked(self) -> None:
        if self._locked:
            raise RuntimeError("Grid deployment is locked once the battle has started.")

    def _notify(self) -> None:
        if self._on_changed is not None:
            self._on_changed(self)
