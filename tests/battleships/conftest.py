from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from battleships.game.ai.strategy import AIOption
from battleships.game.app.controller import GameController
from battleships.game.core.models import Coord, FleetPlacement, Orientation, ShipPlacement, ShipType


def make_valid_fleet() -> FleetPlacement:
    return FleetPlacement(
        ships=[
            ShipPlacement(ShipType.CARRIER, Coord(0, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.BATTLESHIP, Coord(2, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.CRUISER, Coord(4, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.SUBMARINE, Coord(6, 0), Orientation.HORIZONTAL),
            ShipPlacement(ShipType.DESTROYER, Coord(8, 0), Orientation.HORIZONTAL),
        ]
    )


class RecordingScreen:
    def __init__(self) -> None:
        self.messages: list[str] = []
        self._message = ""
        self.calls: list[tuple[str, tuple]] = []
        self.fail_on: set[str] = set()

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    @property
    def message(self) -> str:
        return self._message

    @message.setter
    def message(self, text: str) -> None:
        self._message = text
        self.messages.append(text)

    def draw_background(self) -> None:
        self._record("draw_background")

    def add_explosion(self, row: int, col: int) -> None:
        self._record("add_explosion", row, col)

    def add_splash(self, row: int, col: int) -> None:
        self._record("add_splash", row, col)

    def draw_animation_sequence(self) -> None:
        self._record("draw_animation_sequence")

    def update_animations(self) -> None:
        self._record("update_animations")

    def draw_animations(self) -> None:
        self._record("draw_animations")

    def refresh_screen(self) -> None:
        self._record("refresh_screen")

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class RecordingAudio:
    def __init__(self) -> None:
        self.effects: list[str] = []
        self.music: list[str] = []
        self.stopped = 0
        self.playing_music = False

    def play_sound_effect(self, sound: str) -> None:
        self.effects.append(sound)

    def sound_effect_playing(self, sound: str) -> bool:
        return False

    def play_music(self, music: str) -> None:
        self.music.append(music)
        self.playing_music = True

    def stop_music(self) -> None:
        self.stopped += 1
        self.playing_music = False

    def music_playing(self) -> bool:
        return self.playing_music


class NamedResources:
    def __init__(self, missing: frozenset[str] = frozenset()) -> None:
        self._missing = missing

    def game_sound(self, name: str) -> str:
        if name in self._missing:
            raise KeyError(name)
        return name

    def game_music(self, name: str) -> str:
        if name in self._missing:
            raise KeyError(name)
        return name


class CountingInput:
    def __init__(self) -> None:
        self.pumped = 0

    def process_events(self) -> None:
        self.pumped += 1


class RecordingPhases:
    """Implements every phase controller protocol and records which hook ran."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.on_call: dict[str, Callable[[], None]] = {}

    def _hit(self, name: str) -> None:
        self.calls.append(name)
        action = self.on_call.get(name)
        if action is not None:
            action()

    def handle_main_menu_input(self) -> None:
        self._hit("handle_main_menu_input")

    def handle_game_menu_input(self) -> None:
        self._hit("handle_game_menu_input")

    def handle_setup_menu_input(self) -> None:
        self._hit("handle_setup_menu_input")

    def draw_main_menu(self) -> None:
        self._hit("draw_main_menu")

    def draw_game_menu(self) -> None:
        self._hit("draw_game_menu")

    def draw_settings(self) -> None:
        self._hit("draw_settings")

    def handle_deployment_input(self) -> None:
        self._hit("handle_deployment_input")

    def draw_deployment(self) -> None:
        self._hit("draw_deployment")

    def handle_discovery_input(self) -> None:
        self._hit("handle_discovery_input")

    def draw_discovery(self) -> None:
        self._hit("draw_discovery")

    def handle_end_of_game_input(self) -> None:
        self._hit("handle_end_of_game_input")

    def draw_end_of_game(self) -> None:
        self._hit("draw_end_of_game")

    def handle_high_score_input(self) -> None:
        self._hit("handle_high_score_input")

    def draw_high_scores(self) -> None:
        self._hit("draw_high_scores")


class ControllerRig:
    def __init__(self, seed: int, difficulty: AIOption, missing: frozenset[str]) -> None:
        self.screen = RecordingScreen()
        self.audio = RecordingAudio()
        self.input = CountingInput()
        self.phases = RecordingPhases()
        self.controller = GameController(
            screen=self.screen,
            audio=self.audio,
            resources=NamedResources(missing),
            input_port=self.input,
            rng=random.Random(seed),
            difficulty=difficulty,
        )
        self.controller.bind_phase_controllers(
            menu=self.phases,
            deployment=self.phases,
            discovery=self.phases,
            ending=self.phases,
            high_scores=self.phases,
        )


@pytest.fixture
def valid_fleet() -> FleetPlacement:
    return make_valid_fleet()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def rig_factory():
    def _make(
        seed: int = 1337,
        difficulty: AIOption = AIOption.EASY,
        missing: frozenset[str] = frozenset(),
    ) -> ControllerRig:
        return ControllerRig(seed, difficulty, missing)

    return _make


@pytest.fixture
def rig(rig_factory) -> ControllerRig:
    return rig_factory()
