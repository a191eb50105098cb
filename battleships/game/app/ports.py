"""Collaborator contracts the controller drives but does not implement."""

from __future__ import annotations

from typing import Protocol


class Sound(Protocol):
    """Opaque sound-effect handle resolved by the resources port."""


class Music(Protocol):
    """Opaque music-track handle resolved by the resources port."""


class ScreenPort(Protocol):
    """Presentation surface: status line, background, animations, frame present."""

    message: str

    def draw_background(self) -> None: ...

    def add_explosion(self, row: int, col: int) -> None: ...

    def add_splash(self, row: int, col: int) -> None: ...

    def draw_animation_sequence(self) -> None:
        """Play queued animations to completion."""

    def update_animations(self) -> None: ...

    def draw_animations(self) -> None: ...

    def refresh_screen(self) -> None:
        """Present the finished frame."""


class AudioPort(Protocol):
    """Audio surface."""

    def play_sound_effect(self, sound: Sound) -> None: ...

    def sound_effect_playing(self, sound: Sound) -> bool: ...

    def play_music(self, music: Music) -> None: ...

    def stop_music(self) -> None: ...

    def music_playing(self) -> bool: ...


class ResourcesPort(Protocol):
    """Resolves named cues and tracks."""

    def game_sound(self, name: str) -> Sound: ...

    def game_music(self, name: str) -> Music: ...


class InputPort(Protocol):
    """Raw input pump."""

    def process_events(self) -> None:
        """Read pending input so phase handlers can consume it."""


class MenuController(Protocol):
    def handle_main_menu_input(self) -> None: ...

    def handle_game_menu_input(self) -> None: ...

    def handle_setup_menu_input(self) -> None: ...

    def draw_main_menu(self) -> None: ...

    def draw_game_menu(self) -> None: ...

    def draw_settings(self) -> None: ...


class DeploymentController(Protocol):
    def handle_deployment_input(self) -> None: ...

    def draw_deployment(self) -> None: ...


class DiscoveryController(Protocol):
    def handle_discovery_input(self) -> None: ...

    def draw_discovery(self) -> None: ...


class EndingGameController(Protocol):
    def handle_end_of_game_input(self) -> None: ...

    def draw_end_of_game(self) -> None: ...


class HighScoreController(Protocol):
    def handle_high_score_input(self) -> None: ...

    def draw_high_scores(self) -> None: ...
