"""Hard strategy: hunt by ship-pattern density, lock onto wounded ships."""

from __future__ import annotations

import random

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from battleships.game.core.grid import TargetView
from battleships.game.core.models import Coord, TileView

# Placements through an unsunk hit outweigh any open-water placement.
_HIT_WEIGHT = 100.0


class PatternHardStrategy:
    """Scores every cell by the legal placements of the ships still afloat."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def choose_shot(self, view: TargetView) -> Coord:
        unknown = view.cells == TileView.UNKNOWN
        if not unknown.any():
            raise ValueError("No unknown cells left to target.")

        scores = np.where(unknown, self.density(view), 0.0)
        best_score = scores.max()
        if best_score <= 0.0:
            return self._rng.choice(view.unknown_cells())

        best = [Coord(int(r), int(c)) for r, c in np.argwhere(scores == best_score)]
        hunting = not (view.cells == TileView.HIT).any()
        if hunting and min(view.remaining_lengths, default=1) > 1:
            parity = [coord for coord in best if (coord.row + coord.col) % 2 == 0]
            best = parity or best
        return self._rng.choice(best)

    @staticmethod
    def density(view: TargetView) -> np.ndarray:
        """Sum placement weights over every cell for all remaining ship lengths."""
        blocked = (view.cells == TileView.MISS) | (view.cells == TileView.SUNK)
        hits = view.cells == TileView.HIT
        density = np.zeros(view.cells.shape, dtype=np.float64)
        size = view.size

        for length in view.remaining_lengths:
            if length > size:
                continue
            count = size - length + 1
            # Rows first, then columns through the transposed views.
            for lane_blocked, lane_hits, target in ((blocked, hits, density), (blocked.T, hits.T, density.T)):
                window_blocked = sliding_window_view(lane_blocked, length, axis=1).any(axis=-1)
                window_hits = sliding_window_view(lane_hits, length, axis=1).sum(axis=-1)
                weight = np.where(window_blocked, 0.0, 1.0 + _HIT_WEIGHT * window_hits)
                for offset in range(length):
                    target[:, offset : offset + count] += weight
        return density
