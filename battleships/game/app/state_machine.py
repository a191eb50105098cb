"""Screen/phase states and the stack that tracks where the player is."""

from __future__ import annotations

from enum import Enum, auto


class GameState(Enum):
    """Top-level phases of the application."""

    VIEWING_MAIN_MENU = auto()
    VIEWING_GAME_MENU = auto()
    ALTERING_SETTINGS = auto()
    DEPLOYING = auto()
    DISCOVERING = auto()
    ENDING_GAME = auto()
    VIEWING_HIGH_SCORES = auto()
    QUITTING = auto()


class InvalidStateTransition(RuntimeError):
    """Raised when a transition would leave the state stack empty."""


class StateStack:
    """Last-in state is current. QUITTING sits at the bottom and is never popped."""

    def __init__(self) -> None:
        self._states: list[GameState] = [GameState.QUITTING, GameState.VIEWING_MAIN_MENU]

    @property
    def current(self) -> GameState:
        return self._states[-1]

    def push(self, state: GameState) -> None:
        self._states.append(state)

    def pop(self) -> GameState:
        """Remove the current state and reveal the one beneath."""
        if len(self._states) <= 1:
            raise InvalidStateTransition(f"Cannot end {self.current.name}: it is the last state.")
        return self._states.pop()

    def switch(self, state: GameState) -> GameState:
        """Replace the current state; returns the state that was replaced."""
        ended = self.pop()
        self.push(state)
        return ended

    def snapshot(self) -> tuple[GameState, ...]:
        """Return bottom-first stack contents."""
        return tuple(self._states)

    def __len__(self) -> int:
        return len(self._states)
