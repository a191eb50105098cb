"""Exception policy for calls into presentation collaborators."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeAlias

RecoverableErrors: TypeAlias = tuple[type[BaseException], ...]

# Bounded set tolerated from screen/audio/resources; anything else propagates.
RECOVERABLE_PRESENTATION_ERRORS: RecoverableErrors = (
    RuntimeError,
    OSError,
    ValueError,
    TypeError,
    AttributeError,
    LookupError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *args: object,
    level: int = logging.WARNING,
) -> None:
    """Emit the tolerated exception with its traceback."""
    logger.log(level, message, *args, exc_info=True)


def call_tolerant(
    logger: logging.Logger,
    label: str,
    action: Callable[..., object],
    *args: object,
) -> bool:
    """Run a fire-and-forget collaborator call; return whether it succeeded."""
    try:
        action(*args)
    except RECOVERABLE_PRESENTATION_ERRORS:
        log_recoverable(logger, "presentation_call_failed call=%s", label)
        return False
    return True
