"""The live match: two deployed players, shot dispatch and win detection."""

from __future__ import annotations

import logging

from battleships.game.core.events import AttackCompleted, EventBus, GridChanged
from battleships.game.core.models import AttackResult, ResultOfAttack
from battleships.game.core.player import Player

logger = logging.getLogger(__name__)

_RESULT_TEXT: dict[ResultOfAttack, str] = {
    ResultOfAttack.HIT: "hit something!",
    ResultOfAttack.MISS: "missed",
    ResultOfAttack.DESTROYED: "destroyed the enemy's",
    ResultOfAttack.GAME_OVER: "destroyed the enemy's",
}


class SessionFullError(RuntimeError):
    """Raised when a third player is added to a session."""


class BattleShipsGame:
    """Session state.

    Turn rule: a miss hands the turn to the other player; hits and sinks keep it
    with the attacker; repeated shots and the final shot leave it unchanged.
    """

    def __init__(self) -> None:
        self.events = EventBus()
        self._players: list[Player] = []
        self._player_index = 0

    @property
    def player(self) -> Player | None:
        """The player who fires the next shot, once both players are deployed."""
        if len(self._players) < 2:
            return None
        return self._players[self._player_index]

    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(self._players)

    @property
    def deployed(self) -> bool:
        return len(self._players) == 2

    def add_deployed_player(self, player: Player) -> None:
        """Register a player; the first one registered shoots first."""
        if player in self._players:
            raise SessionFullError("Player is already deployed in this game.")
        if len(self._players) == 2:
            raise SessionFullError("The game already has two players.")
        player.grid.lock()
        self._players.append(player)
        if len(self._players) == 2:
            first, second = self._players
            first.enemy_grid = second.grid
            second.enemy_grid = first.grid
            logger.info("deployment_complete first=%s", type(first).__name__)

    def shoot(self, row: int, col: int) -> AttackResult:
        """Fire the current player's shot at the other player's grid."""
        if not self.deployed:
            raise RuntimeError("Both players must be deployed before shooting.")
        attacker = self._players[self._player_index]
        defender = self._players[1 - self._player_index]

        outcome, ship = attacker.fire_at(row, col)
        if outcome is ResultOfAttack.DESTROYED and defender.is_destroyed:
            outcome = ResultOfAttack.GAME_OVER
        result = AttackResult(
            value=outcome,
            row=row,
            column=col,
            text=_result_text(outcome, row, col),
            ship=ship,
        )

        self.events.publish(AttackCompleted(attacker=attacker, result=result))
        if outcome is ResultOfAttack.MISS:
            self._player_index = 1 - self._player_index
        # Grid listeners run only once the turn is settled.
        if outcome is not ResultOfAttack.SHOT_ALREADY:
            self.events.publish(GridChanged(owner=defender, grid=defender.grid))
        return result


def _result_text(outcome: ResultOfAttack, row: int, col: int) -> str:
    if outcome is ResultOfAttack.SHOT_ALREADY:
        return f"have already attacked [{col},{row}]!"
    return _RESULT_TEXT[outcome]
