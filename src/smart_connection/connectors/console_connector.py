# src/smart_connection/connectors/console_connector.py

from __future__ import annotations

import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.events import InteractionKind
from ..core.state import BackgroundRuntime

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(bg: BackgroundRuntime) -> None:
    """
    Interactive simulator: slash commands flip the environment/transport, anything
    else typed counts as a key press (user activity).
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands, /stats to watch intervals, /exit to quit.\n")

    while True:
        try:
            line = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(bg, line)
            if reply is None:
                bg.call(lambda: bg.runtime.environment.interact(InteractionKind.KEY_PRESS))
                reply = "(activity recorded) Use /help to list available commands."
        except FutureTimeoutError:
            logger.warning("Runtime loop did not answer in time for %r", line)
            reply = "Runtime is busy, try again."
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        _print_ts(reply)
