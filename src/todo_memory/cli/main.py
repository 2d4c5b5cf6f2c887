# src/todo_memory/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the persisted task list,
then runs the console REPL until /exit or EOF.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    await state.todos.initialize()
    await run_console_loop(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    file_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.log_dir, file_level=file_level)

    logger.info("Starting %s (storage=%s)...", settings.app_name, settings.storage_backend)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
