# src/smart_connection/core/state.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from ..config import Settings

if TYPE_CHECKING:
    from ..connectors.loopback_transport import LoopbackTransport
    from ..orchestrator import ConnectionOrchestrator
    from .environment import EnvironmentBus

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Runtime:
    """Everything the console simulator drives, all owned by one event loop."""

    settings: Settings
    environment: EnvironmentBus
    transport: LoopbackTransport
    # None when smart polling is disabled and the fixed fallback loops run instead.
    orchestrator: ConnectionOrchestrator | None
    task_ids: list[str] = field(default_factory=list)
    feeds: dict[str, Any] = field(default_factory=dict)
    fallback_tasks: list[asyncio.Task[None]] = field(default_factory=list)


@dataclass
class BackgroundRuntime:
    """
    Runtime running on its own event loop in a background thread.

    The console REPL is blocking (input()), so it lives on the main thread and
    hands every operation to the loop thread through `call()`. Nothing touches
    the orchestrator from the main thread directly.
    """

    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event
    runtime: Runtime

    def call(self, fn: Callable[[], T], timeout: float = 5.0) -> T:
        async def _run() -> T:
            return fn()

        fut = asyncio.run_coroutine_threadsafe(_run(), self.loop)
        return fut.result(timeout=timeout)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Runtime loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def close_loop(loop: asyncio.AbstractEventLoop) -> None:
    with contextlib.suppress(RuntimeError):
        loop.stop()
    with contextlib.suppress(RuntimeError):
        loop.close()
