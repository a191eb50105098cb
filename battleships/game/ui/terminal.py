"""Line-based terminal frontend: ports and phase controllers for a text session."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from battleships.game.ai.strategy import AIOption
from battleships.game.app.controller import GameController
from battleships.game.app.state_machine import GameState
from battleships.game.core.grid import SeaGrid
from battleships.game.core.models import Coord, Orientation, ShipPlacement, ShipType, TileView

logger = logging.getLogger(__name__)

Writer = Callable[[str], None]

KNOWN_SOUNDS = frozenset({"Hit", "Miss", "Sink", "Winner", "Lose", "Error"})
KNOWN_MUSIC = frozenset({"Background"})

_OWN_MARKS = {TileView.UNKNOWN: ".", TileView.MISS: "o", TileView.HIT: "x", TileView.SUNK: "#"}
_ENEMY_MARKS = {TileView.UNKNOWN: "~", TileView.MISS: "o", TileView.HIT: "x", TileView.SUNK: "#"}


class LineInput:
    """Input port reading one command line per tick."""

    def __init__(self, readline: Callable[[], str] = input) -> None:
        self._readline = readline
        self._pending: str | None = None
        self.closed = False

    def process_events(self) -> None:
        if self.closed:
            self._pending = None
            return
        try:
            self._pending = self._readline().strip().lower()
        except EOFError:
            self.closed = True
            self._pending = None

    def take(self) -> str | None:
        command, self._pending = self._pending, None
        return command or None


class TerminalScreen:
    """Screen port writing status, boards and animation captions as text."""

    def __init__(self, write: Writer = print) -> None:
        self._write = write
        self.message = ""
        self._queued: list[str] = []

    def draw_background(self) -> None:
        self._write("")

    def add_explosion(self, row: int, col: int) -> None:
        self._queued.append(f"*** boom at ({row}, {col}) ***")

    def add_splash(self, row: int, col: int) -> None:
        self._queued.append(f"~~~ splash at ({row}, {col}) ~~~")

    def draw_animation_sequence(self) -> None:
        self.draw_animations()

    def update_animations(self) -> None:
        pass

    def draw_animations(self) -> None:
        for caption in self._queued:
            self._write(caption)
        self._queued.clear()

    def refresh_screen(self) -> None:
        if self.message:
            self._write(f"> {self.message}")


class TerminalAudio:
    """Audio port that records cues in the log instead of playing them."""

    def __init__(self) -> None:
        self._music: str | None = None
        self.played: list[str] = []

    def play_sound_effect(self, sound: str) -> None:
        self.played.append(sound)
        logger.debug("sound_effect name=%s", sound)

    def sound_effect_playing(self, sound: str) -> bool:
        _ = sound
        return False

    def play_music(self, music: str) -> None:
        self._music = music

    def stop_music(self) -> None:
        self._music = None

    def music_playing(self) -> bool:
        return self._music is not None


class TerminalResources:
    """Resolves cue names; unknown names raise KeyError."""

    def game_sound(self, name: str) -> str:
        if name not in KNOWN_SOUNDS:
            raise KeyError(f"unknown sound: {name}")
        return name

    def game_music(self, name: str) -> str:
        if name not in KNOWN_MUSIC:
            raise KeyError(f"unknown music: {name}")
        return name


@dataclass(slots=True)
class ScoreTable:
    """In-memory high scores, best first."""

    limit: int = 10
    entries: list[tuple[str, int]] = field(default_factory=list)

    def record(self, name: str, score: int) -> bool:
        """Insert a score; returns whether it made the table."""
        self.entries.append((name, score))
        self.entries.sort(key=lambda entry: entry[1], reverse=True)
        kept = (name, score) in self.entries[: self.limit]
        del self.entries[self.limit :]
        return kept


def render_grid(grid: SeaGrid, *, reveal_ships: bool) -> list[str]:
    """Render a grid as text rows with a column header."""
    marks = _OWN_MARKS if reveal_ships else _ENEMY_MARKS
    lines = ["   " + " ".join(str(col) for col in range(grid.size))]
    for row in range(grid.size):
        cells = []
        for col in range(grid.size):
            view = grid.tile_view(row, col)
            if reveal_ships and view is TileView.UNKNOWN and grid.ship_at(row, col) is not None:
                cells.append("S")
            else:
                cells.append(marks[view])
        lines.append(f"{row:>2} " + " ".join(cells))
    return lines


class _TerminalPeer:
    def __init__(self, controller: GameController, line_input: LineInput, write: Writer = print) -> None:
        self._controller = controller
        self._input = line_input
        self._write = write

    def _command(self) -> str | None:
        """Take this tick's command; on closed input unwind to QUITTING."""
        if self._input.closed:
            while self._controller.current_state is not GameState.QUITTING:
                self._controller.end_current_state()
            return None
        return self._input.take()


class TerminalMenus(_TerminalPeer):
    """Main menu, in-game menu and settings."""

    def handle_main_menu_input(self) -> None:
        command = self._command()
        if command == "play":
            self._controller.start_game()
        elif command == "settings":
            self._controller.add_new_state(GameState.ALTERING_SETTINGS)
        elif command == "scores":
            self._controller.add_new_state(GameState.VIEWING_HIGH_SCORES)
        elif command == "quit":
            self._controller.end_current_state()

    def handle_game_menu_input(self) -> None:
        command = self._command()
        if command == "return":
            self._controller.end_current_state()
        elif command == "surrender":
            self._controller.end_current_state()
            self._controller.switch_state(GameState.ENDING_GAME)
        elif command == "quit":
            self._controller.add_new_state(GameState.QUITTING)

    def handle_setup_menu_input(self) -> None:
        command = self._command()
        if command is None:
            return
        if command == "back":
            self._controller.end_current_state()
            return
        try:
            option = AIOption.parse(command)
        except ValueError as exc:
            self._write(str(exc))
            return
        self._controller.set_difficulty(option)
        self._controller.end_current_state()

    def draw_main_menu(self) -> None:
        self._write("MAIN MENU: play | settings | scores | quit")

    def draw_game_menu(self) -> None:
        self._write("GAME MENU: return | surrender | quit")

    def draw_settings(self) -> None:
        self._write(f"SETTINGS (current {self._controller.difficulty.value.lower()}): easy | medium | hard | back")


class TerminalDeployment(_TerminalPeer):
    """Commands: ``random``, ``place <ship> <row> <col> <h|v>``, ``done``."""

    def handle_deployment_input(self) -> None:
        command = self._command()
        human = self._controller.human_player
        if command is None or human is None:
            return
        parts = command.split()
        if parts[0] == "random":
            human.randomize_deployment()
        elif parts[0] == "place":
            self._place(parts[1:])
        elif parts[0] == "done":
            if human.ready_to_deploy:
                self._controller.end_deployment()
            else:
                self._write("Place every ship before starting.")

    def _place(self, args: list[str]) -> None:
        human = self._controller.human_player
        if human is None:
            return
        try:
            ship_name, row, col, axis = args
            placement = ShipPlacement(
                ShipType(ship_name.upper()),
                Coord(int(row), int(col)),
                Orientation.HORIZONTAL if axis.startswith("h") else Orientation.VERTICAL,
            )
            human.grid.place_ship(placement)
        except ValueError as exc:
            self._write(f"Cannot place ship: {exc}")

    def draw_deployment(self) -> None:
        human = self._controller.human_player
        if human is None:
            return
        self._write("DEPLOY YOUR FLEET: random | place <ship> <row> <col> <h|v> | done")
        for line in render_grid(human.grid, reveal_ships=True):
            self._write(line)


class TerminalDiscovery(_TerminalPeer):
    """Commands: ``<row> <col>`` to fire, ``menu`` for the game menu."""

    def handle_discovery_input(self) -> None:
        command = self._command()
        if command is None:
            return
        if command in {"menu", "esc"}:
            self._controller.add_new_state(GameState.VIEWING_GAME_MENU)
            return
        try:
            row, col = (int(part) for part in command.split())
        except ValueError:
            self._write("Enter a target as '<row> <col>'.")
            return
        computer = self._controller.computer_player
        if computer is None or not computer.grid.in_bounds(row, col):
            self._write(f"({row}, {col}) is off the enemy grid.")
            return
        self._controller.attack(row, col)

    def draw_discovery(self) -> None:
        human = self._controller.human_player
        computer = self._controller.computer_player
        if human is None or computer is None:
            return
        self._write("ENEMY WATERS")
        for line in render_grid(computer.grid, reveal_ships=False):
            self._write(line)
        self._write("YOUR FLEET")
        for line in render_grid(human.grid, reveal_ships=True):
            self._write(line)
        self._write(f"shots={human.shots} hits={human.hits} missed={human.missed}")


class TerminalEnding(_TerminalPeer):
    def __init__(
        self,
        controller: GameController,
        line_input: LineInput,
        scores: ScoreTable,
        write: Writer = print,
    ) -> None:
        super().__init__(controller, line_input, write)
        self._scores = scores

    def handle_end_of_game_input(self) -> None:
        command = self._command()
        human = self._controller.human_player
        if command is None or human is None:
            return
        self._controller.end_current_state()
        if self._scores.record(command, human.score):
            self._controller.add_new_state(GameState.VIEWING_HIGH_SCORES)

    def draw_end_of_game(self) -> None:
        human = self._controller.human_player
        if human is None:
            return
        verdict = "-- YOU LOSE --" if human.is_destroyed else "-- WINNER --"
        self._write(f"{verdict} score={human.score}. Enter your name:")


class TerminalHighScores(_TerminalPeer):
    def __init__(
        self,
        controller: GameController,
        line_input: LineInput,
        scores: ScoreTable,
        write: Writer = print,
    ) -> None:
        super().__init__(controller, line_input, write)
        self._scores = scores

    def handle_high_score_input(self) -> None:
        if self._command() is not None:
            self._controller.end_current_state()

    def draw_high_scores(self) -> None:
        self._write("HIGH SCORES (any key to return)")
        for rank, (name, score) in enumerate(self._scores.entries, start=1):
            self._write(f"{rank:>2}. {name:<12} {score}")


@dataclass(frozen=True, slots=True)
class TerminalFrontend:
    """Wired terminal app pieces."""

    controller: GameController
    input: LineInput
    screen: TerminalScreen
    audio: TerminalAudio
    scores: ScoreTable


def create_terminal_frontend(
    *,
    readline: Callable[[], str] = input,
    write: Writer = print,
    difficulty: AIOption = AIOption.EASY,
    rng_seed: int | None = None,
) -> TerminalFrontend:
    """Build the controller with terminal ports and bind its phase controllers."""
    line_input = LineInput(readline)
    screen = TerminalScreen(write)
    audio = TerminalAudio()
    controller = GameController(
        screen=screen,
        audio=audio,
        resources=TerminalResources(),
        input_port=line_input,
        rng=random.Random(rng_seed),
        difficulty=difficulty,
    )
    scores = ScoreTable()
    controller.bind_phase_controllers(
        menu=TerminalMenus(controller, line_input, write),
        deployment=TerminalDeployment(controller, line_input, write),
        discovery=TerminalDiscovery(controller, line_input, write),
        ending=TerminalEnding(controller, line_input, scores, write),
        high_scores=TerminalHighScores(controller, line_input, scores, write),
    )
    return TerminalFrontend(controller=controller, input=line_input, screen=screen, audio=audio, scores=scores)
