"""Hunt/target strategy used for the medium difficulty."""

from __future__ import annotations

import random

import numpy as np

from battleships.game.core.grid import TargetView
from battleships.game.core.models import Coord, TileView

_NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class HuntTargetStrategy:
    """Hunts on a parity lattice; finishes wounded ships along their axis."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def choose_shot(self, view: TargetView) -> Coord:
        unknown = view.cells == TileView.UNKNOWN
        if not unknown.any():
            raise ValueError("No unknown cells left to target.")

        targets = self._target_cells(view, unknown)
        if targets:
            return self._rng.choice(targets)

        open_cells = view.unknown_cells()
        parity = [cell for cell in open_cells if (cell.row + cell.col) % 2 == 0]
        return self._rng.choice(parity or open_cells)

    def _target_cells(self, view: TargetView, unknown: np.ndarray) -> list[Coord]:
        hits = [(int(r), int(c)) for r, c in np.argwhere(view.cells == TileView.HIT)]
        if not hits:
            return []

        rows = {row for row, _ in hits}
        cols = {col for _, col in hits}
        if len(hits) >= 2 and len(rows) == 1:
            row = next(iter(rows))
            ends = [(row, min(cols) - 1), (row, max(cols) + 1)]
        elif len(hits) >= 2 and len(cols) == 1:
            col = next(iter(cols))
            ends = [(min(rows) - 1, col), (max(rows) + 1, col)]
        else:
            ends = []
        line = _open(ends, unknown)
        if line:
            return line

        around = {(row + dr, col + dc) for row, col in hits for dr, dc in _NEIGHBOURS}
        return _open(sorted(around), unknown)


def _open(cells: list[tuple[int, int]], unknown: np.ndarray) -> list[Coord]:
    size = unknown.shape[0]
    return [
        Coord(row, col)
        for row, col in cells
        if 0 <= row < size and 0 <= col < size and unknown[row, col]
    ]
