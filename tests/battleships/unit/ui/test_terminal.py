import pytest

from battleships.game.app.state_machine import GameState
from battleships.game.core.grid import SeaGrid
from battleships.game.core.models import FleetPlacement, ShipType
from battleships.game.ui.terminal import (
    LineInput,
    ScoreTable,
    TerminalResources,
    TerminalScreen,
    create_terminal_frontend,
    render_grid,
)


class _Script:
    def __init__(self, lines: list[str]) -> None:
        self._lines = list(lines)

    def __call__(self) -> str:
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)


def _tick(frontend) -> None:
    frontend.controller.handle_input()
    if frontend.controller.current_state is not GameState.QUITTING:
        frontend.controller.draw()


def test_line_input_normalises_and_closes_on_eof() -> None:
    line_input = LineInput(_Script(["  PLAY  "]))
    line_input.process_events()
    assert line_input.take() == "play"
    assert line_input.take() is None
    line_input.process_events()
    assert line_input.closed
    assert line_input.take() is None


def test_render_grid_hides_enemy_ships(valid_fleet: FleetPlacement) -> None:
    grid = SeaGrid()
    grid.deploy(valid_fleet)
    grid.hit_tile(0, 0)
    grid.hit_tile(1, 0)

    own = render_grid(grid, reveal_ships=True)
    enemy = render_grid(grid, reveal_ships=False)
    assert own[0] == "   0 1 2 3 4 5 6 7 8 9"
    assert own[1] == " 0 x S S S S . . . . ."
    assert own[2] == " 1 o . . . . . . . . ."
    assert enemy[1] == " 0 x ~ ~ ~ ~ ~ ~ ~ ~ ~"


def test_terminal_screen_flushes_captions_and_message() -> None:
    lines: list[str] = []
    screen = TerminalScreen(lines.append)
    screen.add_explosion(1, 2)
    screen.add_splash(3, 4)
    screen.message = "You missed"
    screen.draw_animation_sequence()
    screen.draw_animations()
    screen.refresh_screen()
    assert lines == ["*** boom at (1, 2) ***", "~~~ splash at (3, 4) ~~~", "> You missed"]


def test_terminal_resources_reject_unknown_cues() -> None:
    resources = TerminalResources()
    assert resources.game_sound("Sink") == "Sink"
    assert resources.game_music("Background") == "Background"
    with pytest.raises(KeyError):
        resources.game_sound("Fanfare")


def test_score_table_keeps_best_entries() -> None:
    table = ScoreTable(limit=2)
    assert table.record("ann", 40)
    assert table.record("bob", 90)
    assert not table.record("cid", 10)
    assert table.record("dee", 50)
    assert table.entries == [("bob", 90), ("dee", 50)]


def test_closed_input_unwinds_to_quitting() -> None:
    frontend = create_terminal_frontend(readline=_Script([]), write=lambda line: None, rng_seed=3)
    frontend.controller.start_game()
    frontend.controller.add_new_state(GameState.VIEWING_GAME_MENU)
    _tick(frontend)
    assert frontend.controller.states == (GameState.QUITTING,)


def test_deployment_commands_validate_placements() -> None:
    out: list[str] = []
    frontend = create_terminal_frontend(
        readline=_Script(["play", "place destroyer 9 9 h", "place tug 1 1 h", "place destroyer 1", "done"]),
        write=out.append,
        rng_seed=5,
    )
    _tick(frontend)
    assert frontend.controller.current_state is GameState.DEPLOYING
    frontend.controller.human_player.grid.remove_ship(ShipType.DESTROYER)

    for _ in range(3):
        _tick(frontend)
    failures = [line for line in out if line.startswith("Cannot place ship:")]
    assert len(failures) == 3

    _tick(frontend)
    assert "Place every ship before starting." in out
    assert frontend.controller.current_state is GameState.DEPLOYING


def test_discovery_commands_parse_targets() -> None:
    out: list[str] = []
    frontend = create_terminal_frontend(
        readline=_Script(["play", "random", "done", "a b", "12 3", "3 4"]),
        write=out.append,
        rng_seed=8,
    )
    for _ in range(3):
        _tick(frontend)
    assert frontend.controller.current_state is GameState.DISCOVERING
    assert "ENEMY WATERS" in out

    _tick(frontend)
    _tick(frontend)
    assert "Enter a target as '<row> <col>'." in out
    assert "(12, 3) is off the enemy grid." in out
    assert frontend.controller.human_player.shots == 0

    _tick(frontend)
    assert frontend.controller.human_player.shots == 1
    assert any(line.startswith("> ") for line in out)


def test_settings_menu_rejects_unknown_difficulty() -> None:
    out: list[str] = []
    frontend = create_terminal_frontend(
        readline=_Script(["settings", "brutal", "hard"]),
        write=out.append,
        rng_seed=1,
    )
    for _ in range(2):
        _tick(frontend)
    assert frontend.controller.current_state is GameState.ALTERING_SETTINGS
    assert any("Unknown difficulty" in line for line in out)

    _tick(frontend)
    assert frontend.controller.current_state is GameState.VIEWING_MAIN_MENU
    assert frontend.controller.difficulty.value == "HARD"
