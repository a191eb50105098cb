"""Application configuration and env loading."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from battleships.game.ai.strategy import AIOption

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 1.0 / 60.0
HOME_ENV = "BATTLESHIPS_HOME"


def resolve_env_path(path: str, base_dir: str | None = None) -> Path:
    """Resolve relative env paths against ``base_dir``, then ``BATTLESHIPS_HOME``, then cwd."""
    env_path = Path(path).expanduser()
    if env_path.is_absolute():
        return env_path
    root = base_dir or os.environ.get(HOME_ENV) or "."
    return Path(root).expanduser() / env_path


def load_env_file(
    path: str = ".env",
    *,
    base_dir: str | None = None,
    override_existing: bool = True,
) -> bool:
    """Load KEY=VALUE pairs from an env file into the process environment.

    Returns whether the file was read. Values in the file win over existing
    variables unless ``override_existing`` is False. Lines that are neither
    comments nor assignments are reported and skipped.
    """
    env_path = resolve_env_path(path, base_dir)
    if not env_path.is_file():
        return False
    try:
        text = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.warning("env_file_unreadable path=%s", env_path, exc_info=True)
        return False

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        line = line.removeprefix("export ").lstrip()
        key, sep, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key:
            logger.warning("env_line_invalid path=%s line=%d", env_path, lineno)
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if override_existing or key not in os.environ:
            os.environ[key] = value
    return True


def load_default_env_files(
    *,
    base_dir: str | None = None,
    override_existing: bool = True,
    paths: Sequence[str] | None = None,
) -> list[str]:
    """Load ``.env`` then ``.env.local``; later files overwrite earlier ones."""
    to_load = tuple(paths) if paths is not None else (".env", ".env.local")
    return [
        path
        for path in to_load
        if load_env_file(path, base_dir=base_dir, override_existing=override_existing)
    ]


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Immutable runtime configuration sourced from environment."""

    difficulty: AIOption = AIOption.EASY
    seed: int | None = None
    tick_seconds: float = DEFAULT_TICK_SECONDS
    log_level: str = "INFO"
    log_format: str = "text"
    log_dir: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        env = os.environ if environ is None else environ
        return cls(
            difficulty=_difficulty(env.get("BATTLESHIPS_AI_DIFFICULTY")),
            seed=_optional_int(env, "BATTLESHIPS_SEED"),
            tick_seconds=_float(env, "BATTLESHIPS_TICK_SECONDS", DEFAULT_TICK_SECONDS),
            log_level=(env.get("BATTLESHIPS_LOG_LEVEL") or env.get("LOG_LEVEL") or "INFO").strip().upper(),
            log_format=(env.get("LOG_FORMAT") or "text").strip().lower(),
            log_dir=(env.get("BATTLESHIPS_LOG_DIR") or "").strip() or None,
        )


def _difficulty(raw: str | None) -> AIOption:
    if raw is None or not raw.strip():
        return AIOption.EASY
    try:
        return AIOption.parse(raw)
    except ValueError:
        logger.warning("config_invalid key=BATTLESHIPS_AI_DIFFICULTY value=%r", raw)
        return AIOption.EASY


def _optional_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("config_invalid key=%s value=%r", name, raw)
        return None


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        logger.warning("config_invalid key=%s value=%r", name, raw)
        return default
