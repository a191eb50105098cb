"""Session participants: the human role and the strategy-driven computer role."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from battleships.game.core.events import GridChanged
from battleships.game.core.fleet import random_fleet
from battleships.game.core.grid import SeaGrid
from battleships.game.core.models import BOARD_SIZE, AttackResult, ResultOfAttack, ShipType

if TYPE_CHECKING:
    from battleships.game.ai.strategy import TargetingStrategy
    from battleships.game.core.game import BattleShipsGame

logger = logging.getLogger(__name__)

HIT_SCORE = 12


class Player:
    """A participant owning one grid; starts with a random deployment."""

    is_computer = False

    def __init__(
        self,
        game: BattleShipsGame,
        *,
        rng: random.Random | None = None,
        size: int = BOARD_SIZE,
    ) -> None:
        self._game = game
        self._rng = rng if rng is not None else random.Random()
        self.grid = SeaGrid(size=size, on_changed=self._on_grid_changed)
        self.enemy_grid: SeaGrid | None = None
        self.shots = 0
        self.hits = 0
        self.missed = 0
        self.randomize_deployment()

    @property
    def game(self) -> BattleShipsGame:
        return self._game

    @property
    def is_destroyed(self) -> bool:
        return self.grid.all_ships_sunk()

    @property
    def ready_to_deploy(self) -> bool:
        return self.grid.fleet_complete()

    @property
    def score(self) -> int:
        if self.is_destroyed:
            return 0
        return self.hits * HIT_SCORE - self.shots

    def randomize_deployment(self) -> None:
        self.grid.deploy(random_fleet(self._rng, self.grid.size))

    def fire_at(self, row: int, col: int) -> tuple[ResultOfAttack, ShipType | None]:
        """Shoot the enemy grid and keep shot statistics."""
        if self.enemy_grid is None:
            raise RuntimeError("Player has no enemy grid; deployment is not complete.")
        outcome, ship = self.enemy_grid.hit_tile(row, col)
        if outcome is ResultOfAttack.SHOT_ALREADY:
            return outcome, ship
        self.shots += 1
        if outcome is ResultOfAttack.MISS:
            self.missed += 1
        else:
            self.hits += 1
        return outcome, ship

    def _on_grid_changed(self, grid: SeaGrid) -> None:
        self._game.events.publish(GridChanged(owner=self, grid=grid))


class ComputerPlayer(Player):
    """Player whose shots come from a targeting strategy."""

    is_computer = True

    def __init__(
        self,
        game: BattleShipsGame,
        strategy: TargetingStrategy,
        *,
        rng: random.Random | None = None,
        size: int = BOARD_SIZE,
    ) -> None:
        self._strategy = strategy
        super().__init__(game, rng=rng, size=size)

    @property
    def strategy(self) -> TargetingStrategy:
        return self._strategy

    def attack(self) -> AttackResult:
        """Keep firing while shots hit; return the miss or game-over that ends the run."""
        if self._game.player is not self:
            raise RuntimeError("Computer player attacked out of turn.")
        if self.enemy_grid is None:
            raise RuntimeError("Computer player has no enemy grid; deployment is not complete.")

        for _ in range(self.enemy_grid.size**2 + 1):
            coord = self._strategy.choose_shot(self.enemy_grid.target_view())
            result = self._game.shoot(coord.row, coord.col)
            if result.value in (ResultOfAttack.MISS, ResultOfAttack.GAME_OVER):
                return result
            logger.debug("computer_continues result=%s row=%d col=%d", result.value, result.row, result.column)
        raise RuntimeError(f"{type(self._strategy).__name__} never produced a decisive shot.")
