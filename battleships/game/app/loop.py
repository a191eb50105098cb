"""Fixed-cadence host loop driving the controller once per tick."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from battleships.game.app.controller import GameController
from battleships.game.app.state_machine import GameState

logger = logging.getLogger(__name__)


class AppLoop:
    """Calls ``handle_input`` then ``draw`` each tick until the game is quitting."""

    def __init__(
        self,
        controller: GameController,
        *,
        tick_seconds: float = 1.0 / 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._controller = controller
        self._tick_seconds = max(0.0, tick_seconds)
        self._clock = clock
        self._sleep = sleep

    def run(self, max_ticks: int | None = None) -> int:
        """Run until QUITTING is current or ``max_ticks`` ticks elapsed; return ticks run."""
        ticks = 0
        logger.info("loop_started tick_seconds=%.4f", self._tick_seconds)
        while self._controller.current_state is not GameState.QUITTING:
            if max_ticks is not None and ticks >= max_ticks:
                break
            started = self._clock()
            self._controller.handle_input()
            if self._controller.current_state is GameState.QUITTING:
                ticks += 1
                break
            self._controller.draw()
            ticks += 1
            remaining = self._tick_seconds - (self._clock() - started)
            if remaining > 0:
                self._sleep(remaining)
        logger.info("loop_stopped ticks=%d state=%s", ticks, self._controller.current_state.name)
        return ticks
