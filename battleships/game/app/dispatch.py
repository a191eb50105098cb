"""Total state -> handler routing for per-tick input and draw dispatch."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from battleships.game.app.ports import (
    DeploymentController,
    DiscoveryController,
    EndingGameController,
    HighScoreController,
    MenuController,
)
from battleships.game.app.state_machine import GameState

PhaseAction = Callable[[], None]

ROUTED_STATES: frozenset[GameState] = frozenset(
    state for state in GameState if state is not GameState.QUITTING
)


class UnmappedStateError(RuntimeError):
    """Raised when a state has no handler in a route table."""


@dataclass(frozen=True, slots=True)
class PhaseDispatcher:
    """Resolve the single handler for a state; every routed state must be mapped."""

    name: str
    handlers: Mapping[GameState, PhaseAction]

    def __post_init__(self) -> None:
        missing = ROUTED_STATES.difference(self.handlers)
        if missing:
            names = ", ".join(sorted(state.name for state in missing))
            raise UnmappedStateError(f"{self.name} routes missing for: {names}")
        if GameState.QUITTING in self.handlers:
            raise UnmappedStateError(f"{self.name} routes must not handle QUITTING")

    def resolve(self, state: GameState) -> PhaseAction:
        handler = self.handlers.get(state)
        if handler is None:
            raise UnmappedStateError(f"No {self.name} route for {state.name}")
        return handler

    def dispatch(self, state: GameState) -> None:
        self.resolve(state)()


@dataclass(frozen=True, slots=True)
class PhaseRoutes:
    """Input and draw dispatchers built from the peer phase controllers."""

    input: PhaseDispatcher
    draw: PhaseDispatcher


def build_phase_routes(
    *,
    menu: MenuController,
    deployment: DeploymentController,
    discovery: DiscoveryController,
    ending: EndingGameController,
    high_scores: HighScoreController,
) -> PhaseRoutes:
    """Map every non-quitting state onto its peer controller."""
    input_handlers: dict[GameState, PhaseAction] = {
        GameState.VIEWING_MAIN_MENU: menu.handle_main_menu_input,
        GameState.VIEWING_GAME_MENU: menu.handle_game_menu_input,
        GameState.ALTERING_SETTINGS: menu.handle_setup_menu_input,
        GameState.DEPLOYING: deployment.handle_deployment_input,
        GameState.DISCOVERING: discovery.handle_discovery_input,
        GameState.ENDING_GAME: ending.handle_end_of_game_input,
        GameState.VIEWING_HIGH_SCORES: high_scores.handle_high_score_input,
    }
    draw_handlers: dict[GameState, PhaseAction] = {
        GameState.VIEWING_MAIN_MENU: menu.draw_main_menu,
        GameState.VIEWING_GAME_MENU: menu.draw_game_menu,
        GameState.ALTERING_SETTINGS: menu.draw_settings,
        GameState.DEPLOYING: deployment.draw_deployment,
        GameState.DISCOVERING: discovery.draw_discovery,
        GameState.ENDING_GAME: ending.draw_end_of_game,
        GameState.VIEWING_HIGH_SCORES: high_scores.draw_high_scores,
    }
    return PhaseRoutes(
        input=PhaseDispatcher("input", input_handlers),
        draw=PhaseDispatcher("draw", draw_handlers),
    )
