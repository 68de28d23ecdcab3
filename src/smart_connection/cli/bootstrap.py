# src/smart_connection/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes settings once,
- wires the environment bus, loopback transport and orchestrator together,
- registers the demo tasks (smart pollers, or fixed loops when smart polling is off),
- runs all of it on a dedicated event loop thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

from ..config import Settings, get_settings
from ..connectors.loopback_transport import LoopbackTransport
from ..core.environment import EnvironmentBus
from ..core.state import BackgroundRuntime, Runtime, close_loop
from ..orchestrator import ConnectionOrchestrator
from ..polling.fallback import start_fixed_polling
from .demo_tasks import DEMO_TASKS, build_demo_callback, build_demo_feeds

logger = logging.getLogger(__name__)


def create_runtime(*, settings: Settings | None = None, seed: int | None = None) -> Runtime:
    """
    Build the Runtime (nothing is started yet).

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    """
    if settings is None:
        settings = get_settings()

    environment = EnvironmentBus(online=True, hidden=False)
    transport = LoopbackTransport(connected=False)
    feeds = build_demo_feeds(seed)

    orchestrator: ConnectionOrchestrator | None = None
    if settings.enable_smart_polling:
        orchestrator = ConnectionOrchestrator(transport, environment, settings=settings)
        for spec in DEMO_TASKS:
            orchestrator.create_task(
                spec.task_id,
                build_demo_callback(feeds[spec.task_id], transport),
                interval=spec.interval,
                max_interval=spec.max_interval,
                exponential=True,
                only_when_needed=True,
            )

    runtime = Runtime(
        settings=settings,
        environment=environment,
        transport=transport,
        orchestrator=orchestrator,
        task_ids=[spec.task_id for spec in DEMO_TASKS],
        feeds=feeds,
    )
    return runtime


def start_runtime(runtime: Runtime) -> None:
    """Start polling. Must run on the runtime's event loop."""
    if runtime.orchestrator is not None:
        for task_id in runtime.task_ids:
            runtime.orchestrator.start(task_id)
        logger.info("Smart polling initialized for %d tasks", len(runtime.task_ids))
        return

    logger.info("Smart polling disabled; falling back to fixed-interval polling")
    feeds = runtime.feeds
    runtime.fallback_tasks = start_fixed_polling(
        {spec.task_id: (feeds[spec.task_id].fetch, spec.interval) for spec in DEMO_TASKS}
    )


async def shutdown_runtime(runtime: Runtime) -> None:
    pending: list[asyncio.Task[Any]] = []
    if runtime.orchestrator is not None:
        pending = [t for p in runtime.orchestrator.pollers() if (t := p.in_flight_task) is not None]
        runtime.orchestrator.destroy_all()
    pending.extend(runtime.fallback_tasks)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    runtime.fallback_tasks.clear()


async def _run_until_stopped(runtime: Runtime, stop_event: asyncio.Event) -> None:
    start_runtime(runtime)
    try:
        await stop_event.wait()
    finally:
        await shutdown_runtime(runtime)


def start_runtime_in_background(runtime: Runtime) -> BackgroundRuntime | None:
    """
    Run the runtime on a background thread with its own event loop.

    Why a thread:
    - console REPL is blocking (input()).
    - pollers need a running event loop the whole time.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_until_stopped(runtime, stop_event))
        except Exception:
            logger.exception("Runtime loop crashed.")
        finally:
            close_loop(loop)

    t = threading.Thread(target=runner, name="smart-connection-loop", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Runtime thread did not initialize properly.")
        return None

    logger.info("Runtime background thread started.")
    return BackgroundRuntime(thread=t, loop=loop, stop_event=stop_event, runtime=runtime)
