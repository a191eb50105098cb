"""Targeting strategy contract and difficulty-based selection."""

from __future__ import annotations

import random
from enum import StrEnum
from typing import Protocol

from battleships.game.core.grid import TargetView
from battleships.game.core.models import Coord


class AIOption(StrEnum):
    """Computer difficulty setting."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    @classmethod
    def parse(cls, raw: str) -> AIOption:
        """Parse a case-insensitive difficulty name."""
        try:
            return cls(raw.strip().upper())
        except ValueError:
            choices = ", ".join(option.value.lower() for option in cls)
            raise ValueError(f"Unknown difficulty '{raw}'. Expected one of: {choices}.") from None


class TargetingStrategy(Protocol):
    """Chooses the computer's next shot from what it knows of the enemy grid."""

    def choose_shot(self, view: TargetView) -> Coord:
        """Return an UNKNOWN cell of the view to fire at."""


def build_targeting_strategy(option: AIOption, rng: random.Random) -> TargetingStrategy:
    """Medium plays hunt/target; hard and the default setting play pattern search."""
    from battleships.game.ai.hunt_target import HuntTargetStrategy
    from battleships.game.ai.pattern_hard import PatternHardStrategy

    if option is AIOption.MEDIUM:
        return HuntTargetStrategy(rng)
    return PatternHardStrategy(rng)
