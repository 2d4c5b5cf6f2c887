# src/todo_memory/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def handle_line(state: AppState, line: str) -> str:
    """
    One REPL step: slash commands go to the registry, plain text becomes a new todo.
    """
    reply = await command_registry.handle(state, line)
    if reply is not None:
        return reply
    return await command_registry.handle(state, f"/add {line}") or ""


async def run_console_loop(state: AppState, *, prompt: str = "todo> ") -> None:
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "todo"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands, /exit to quit.\n")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, prompt)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        try:
            reply = await handle_line(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        print(reply)

    logger.info("Console connector finished.")
