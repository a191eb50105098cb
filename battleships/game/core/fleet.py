"""Random fleet deployment."""

from __future__ import annotations

import random

import numpy as np

from battleships.game.core.models import (
    BOARD_SIZE,
    DEFAULT_FLEET,
    Coord,
    FleetPlacement,
    Orientation,
    ShipPlacement,
    ShipType,
    cells_for_placement,
)

_ATTEMPTS = 400


def random_fleet(rng: random.Random, size: int = BOARD_SIZE) -> FleetPlacement:
    """Generate a random fleet, preferring ships that do not touch each other."""
    # Small grids may have no spaced layout at all.
    for spaced in (True, False):
        for _ in range(_ATTEMPTS):
            fleet = _generate(rng, size, spaced=spaced)
            if fleet is not None:
                return fleet
    raise RuntimeError(f"Cannot fit the fleet on a {size}x{size} grid.")


def _generate(rng: random.Random, size: int, *, spaced: bool) -> FleetPlacement | None:
    blocked = np.zeros((size, size), dtype=bool)
    chosen: dict[ShipType, ShipPlacement] = {}
    order = sorted(DEFAULT_FLEET, key=lambda ship: ship.size, reverse=True)

    for ship_type in order:
        candidates = _candidates(ship_type, size, blocked)
        if not candidates:
            return None
        placement = rng.choice(candidates)
        chosen[ship_type] = placement
        for cell in cells_for_placement(placement):
            if spaced:
                blocked[max(cell.row - 1, 0) : cell.row + 2, max(cell.col - 1, 0) : cell.col + 2] = True
            else:
                blocked[cell.row, cell.col] = True

    return FleetPlacement(ships=[chosen[ship_type] for ship_type in DEFAULT_FLEET])


def _candidates(ship_type: ShipType, size: int, blocked: np.ndarray) -> list[ShipPlacement]:
    length = ship_type.size
    result: list[ShipPlacement] = []
    for orientation in Orientation:
        horizontal = orientation is Orientation.HORIZONTAL
        rows = size if horizontal else size - length + 1
        cols = size - length + 1 if horizontal else size
        for row in range(max(rows, 0)):
            for col in range(max(cols, 0)):
                span = blocked[row, col : col + length] if horizontal else blocked[row : row + length, col]
                if not span.any():
                    result.append(ShipPlacement(ship_type, Coord(row, col), orientation))
    return result
