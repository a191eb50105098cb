"""Application controller: state stack, session lifecycle and attack resolution."""

from __future__ import annotations

import logging
import random

from battleships.game.ai.strategy import AIOption, build_targeting_strategy
from battleships.game.app.dispatch import PhaseRoutes, build_phase_routes
from battleships.game.app.ports import (
    AudioPort,
    DeploymentController,
    DiscoveryController,
    EndingGameController,
    HighScoreController,
    InputPort,
    MenuController,
    ResourcesPort,
    ScreenPort,
)
from battleships.game.app.state_machine import GameState, StateStack
from battleships.game.core.events import AttackCompleted, GridChanged, SubscriptionSet
from battleships.game.core.game import BattleShipsGame
from battleships.game.core.models import AttackResult, ResultOfAttack
from battleships.game.core.player import ComputerPlayer, Player
from battleships.game.infra.errors import (
    RECOVERABLE_PRESENTATION_ERRORS,
    call_tolerant,
    log_recoverable,
)

logger = logging.getLogger(__name__)


class GameController:
    """Single orchestrator built by the entry point and handed to every phase controller.

    Per tick the host calls ``handle_input`` then ``draw``. Phase controllers call
    back into the public methods to start games, attack and move between states.
    """

    def __init__(
        self,
        *,
        screen: ScreenPort,
        audio: AudioPort,
        resources: ResourcesPort,
        input_port: InputPort,
        rng: random.Random | None = None,
        difficulty: AIOption = AIOption.EASY,
    ) -> None:
        self._screen = screen
        self._audio = audio
        self._input = input_port
        self._rng = rng if rng is not None else random.Random()
        self._states = StateStack()
        self._ai_setting = difficulty

        self._game: BattleShipsGame | None = None
        self._human: Player | None = None
        self._ai: ComputerPlayer | None = None
        self._subscriptions: SubscriptionSet | None = None
        self._routes: PhaseRoutes | None = None

        self.resources = resources

    @property
    def resources(self) -> ResourcesPort:
        return self._resources

    @resources.setter
    def resources(self, value: ResourcesPort) -> None:
        """Install resources and restart the background track."""
        self._resources = value
        try:
            if self._audio.music_playing():
                self._audio.stop_music()
            self._audio.play_music(value.game_music("Background"))
        except RECOVERABLE_PRESENTATION_ERRORS:
            log_recoverable(logger, "background_music_failed")

    @property
    def current_state(self) -> GameState:
        return self._states.current

    @property
    def states(self) -> tuple[GameState, ...]:
        return self._states.snapshot()

    @property
    def human_player(self) -> Player | None:
        return self._human

    @property
    def computer_player(self) -> ComputerPlayer | None:
        return self._ai

    @property
    def game(self) -> BattleShipsGame | None:
        return self._game

    @property
    def difficulty(self) -> AIOption:
        return self._ai_setting

    def bind_phase_controllers(
        self,
        *,
        menu: MenuController,
        deployment: DeploymentController,
        discovery: DiscoveryController,
        ending: EndingGameController,
        high_scores: HighScoreController,
    ) -> None:
        """Install the per-state input and draw routes."""
        self._routes = build_phase_routes(
            menu=menu,
            deployment=deployment,
            discovery=discovery,
            ending=ending,
            high_scores=high_scores,
        )

    def start_game(self) -> None:
        """Discard any current match and begin deploying a fresh one."""
        if self._game is not None:
            self._end_game()

        self._game = BattleShipsGame()
        strategy = build_targeting_strategy(self._ai_setting, self._rng)
        self._ai = ComputerPlayer(self._game, strategy, rng=self._rng)
        self._human = Player(self._game, rng=self._rng)

        subscriptions = SubscriptionSet(self._game.events)
        subscriptions.subscribe(GridChanged, self._on_grid_changed)
        subscriptions.subscribe(AttackCompleted, self._on_attack_completed)
        self._subscriptions = subscriptions

        logger.info(
            "game_started difficulty=%s strategy=%s",
            self._ai_setting.value,
            type(strategy).__name__,
        )
        self.add_new_state(GameState.DEPLOYING)

    def _end_game(self) -> None:
        """Stop listening to the old game once a new one is started."""
        if self._subscriptions is None:
            return
        removed = self._subscriptions.revoke()
        self._subscriptions = None
        logger.debug("game_detached subscriptions_removed=%d", removed)

    def end_deployment(self) -> None:
        """Lock both fleets into the session and begin the battle."""
        if self.current_state is not GameState.DEPLOYING or self._game is None:
            logger.warning("end_deployment_ignored state=%s", self.current_state.name)
            return
        if self._human is None or self._ai is None:
            raise RuntimeError("Session has no players to deploy.")
        self._game.add_deployed_player(self._human)
        self._game.add_deployed_player(self._ai)
        self.switch_state(GameState.DISCOVERING)

    def attack(self, row: int, col: int) -> AttackResult | None:
        """Fire the human's shot at the computer's grid and resolve the outcome."""
        if self.current_state is not GameState.DISCOVERING or self._game is None:
            logger.warning("attack_ignored reason=not_discovering state=%s", self.current_state.name)
            return None
        if self._game.player is not self._human:
            logger.warning("attack_ignored reason=not_human_turn")
            return None
        result = self._game.shoot(row, col)
        self._check_attack_result(result)
        return result

    def _ai_attack(self) -> None:
        if self._ai is None:
            raise RuntimeError("No computer player in the current session.")
        result = self._ai.attack()
        self._check_attack_result(result)

    def _check_attack_result(self, result: AttackResult) -> None:
        """Hand a miss over to the computer when it now holds the turn; end on game over."""
        if result.value is ResultOfAttack.MISS:
            if self._game is not None and self._game.player is self._ai:
                self._ai_attack()
        elif result.value is ResultOfAttack.GAME_OVER:
            logger.info("game_over human_destroyed=%s", self._human is not None and self._human.is_destroyed)
            self.switch_state(GameState.ENDING_GAME)

    def set_difficulty(self, setting: AIOption) -> None:
        """Takes effect on the next ``start_game``."""
        self._ai_setting = setting
        logger.info("difficulty_set difficulty=%s", setting.value)

    def add_new_state(self, state: GameState) -> None:
        """Move to a new state, keeping the current one to return to."""
        self._states.push(state)
        self._set_message("")
        logger.debug("state_pushed state=%s depth=%d", state.name, len(self._states))

    def switch_state(self, new_state: GameState) -> None:
        """End the current state and add the new one in its place."""
        self.end_current_state()
        self.add_new_state(new_state)

    def end_current_state(self) -> None:
        """Return to the prior state."""
        ended = self._states.pop()
        logger.debug("state_ended state=%s current=%s", ended.name, self.current_state.name)

    def handle_input(self) -> None:
        """Pump input and hand it to the current state's handler."""
        routes = self._require_routes()
        self._input.process_events()
        state = self.current_state
        if state is not GameState.QUITTING:
            routes.input.dispatch(state)
        call_tolerant(logger, "update_animations", self._screen.update_animations)

    def draw(self) -> None:
        """Draw the current state and present the frame."""
        routes = self._require_routes()
        call_tolerant(logger, "draw_background", self._screen.draw_background)
        state = self.current_state
        if state is not GameState.QUITTING:
            call_tolerant(logger, f"draw:{state.name}", routes.draw.resolve(state))
        call_tolerant(logger, "draw_animations", self._screen.draw_animations)
        call_tolerant(logger, "refresh_screen", self._screen.refresh_screen)

    def _require_routes(self) -> PhaseRoutes:
        if self._routes is None:
            raise RuntimeError("Phase controllers are not bound; call bind_phase_controllers first.")
        return self._routes

    def _on_grid_changed(self, event: GridChanged) -> None:
        _ = event
        self.draw()

    def _on_attack_completed(self, event: AttackCompleted) -> None:
        """Show the outcome and play its presentation sequence."""
        result = event.result
        is_human = event.attacker is self._human
        self._set_message(f"{'You' if is_human else 'The AI'} {result}")
        logger.info(
            "attack_completed attacker=%s result=%s row=%d col=%d",
            "human" if is_human else "ai",
            result.value,
            result.row,
            result.column,
        )

        if result.value is ResultOfAttack.HIT:
            self._play_hit_sequence(result, is_human)
        elif result.value is ResultOfAttack.DESTROYED:
            self._play_hit_sequence(result, is_human)
            self._play_sound("Sink")
        elif result.value is ResultOfAttack.GAME_OVER:
            self._play_hit_sequence(result, is_human)
            self._play_sound("Sink")
            human_lost = self._human is not None and self._human.is_destroyed
            self._play_sound("Lose" if human_lost else "Winner")
        elif result.value is ResultOfAttack.MISS:
            self._play_miss_sequence(result, is_human)
        elif result.value is ResultOfAttack.SHOT_ALREADY:
            self._play_sound("Error")

    def _play_hit_sequence(self, result: AttackResult, show_animation: bool) -> None:
        if show_animation:
            call_tolerant(logger, "add_explosion", self._screen.add_explosion, result.row, result.column)
        self._play_sound("Hit")
        call_tolerant(logger, "draw_animation_sequence", self._screen.draw_animation_sequence)

    def _play_miss_sequence(self, result: AttackResult, show_animation: bool) -> None:
        if show_animation:
            call_tolerant(logger, "add_splash", self._screen.add_splash, result.row, result.column)
        self._play_sound("Miss")
        call_tolerant(logger, "draw_animation_sequence", self._screen.draw_animation_sequence)

    def _play_sound(self, name: str) -> None:
        call_tolerant(
            logger,
            f"sound:{name}",
            lambda: self._audio.play_sound_effect(self._resources.game_sound(name)),
        )

    def _set_message(self, text: str) -> None:
        call_tolerant(logger, "message", setattr, self._screen, "message", text)
