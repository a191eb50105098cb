"""Application entry point."""

import logging

from battleships.game.app.loop import AppLoop
from battleships.game.infra.config import AppConfig, load_default_env_files
from battleships.game.infra.logging import setup_logging, shutdown_logging
from battleships.game.ui.terminal import create_terminal_frontend

logger = logging.getLogger(__name__)


def main() -> None:
    """Run Battleships in the terminal."""
    loaded = load_default_env_files()
    config = AppConfig.from_env()
    setup_logging(config)
    logger.info(
        "app_config env_files=%s difficulty=%s seed=%s",
        ",".join(loaded) or "-",
        config.difficulty.value,
        config.seed,
    )
    frontend = create_terminal_frontend(difficulty=config.difficulty, rng_seed=config.seed)
    try:
        AppLoop(frontend.controller, tick_seconds=config.tick_seconds).run()
    finally:
        shutdown_logging()


if __name__ == "__main__":
    main()
