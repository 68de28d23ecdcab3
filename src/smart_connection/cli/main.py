# src/smart_connection/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the Runtime, runs the event loop in a background
thread and the console simulator in the main thread.
"""

from __future__ import annotations

import logging
import signal
import threading

from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from .bootstrap import create_runtime, start_runtime_in_background

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    runtime = create_runtime(settings=settings)
    bg = start_runtime_in_background(runtime)
    if bg is None:
        raise SystemExit(1)

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            # Ctrl+C surfaces as KeyboardInterrupt inside input().
            run_console_loop(bg)
        else:
            signal.signal(signal.SIGINT, _handle_signal)
            if hasattr(signal, "SIGTERM"):
                signal.signal(signal.SIGTERM, _handle_signal)
            logger.info("Console disabled. Polling in background only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        bg.stop()
        bg.join(timeout=10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
