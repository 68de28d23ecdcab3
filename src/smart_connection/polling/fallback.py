# src/smart_connection/polling/fallback.py

from __future__ import annotations

"""
Fixed-interval fallback polling.

Used when smart polling is switched off: every interval_seconds call the
callback, log failures, repeat. No gate, no backoff, no interval changes.

To stop the loop, cancel the coroutine/task.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


async def run_fixed_polling(
        callback: Callable[[], Awaitable[object]],
        *,
        interval_seconds: float = 30.0,
        name: str = "poller",
) -> None:
    sleep_s = max(0.5, float(interval_seconds))
    logger.info("Fixed polling %r every %.1fs", name, sleep_s)

    while True:
        try:
            await callback()
        except Exception:
            logger.exception("Fixed poller %r callback failed", name)

        await asyncio.sleep(sleep_s)


def start_fixed_polling(
        tasks: dict[str, tuple[Callable[[], Awaitable[object]], float]],
) -> list[asyncio.Task[None]]:
    """Spawn one fixed loop per task on the running loop: {name: (callback, interval_seconds)}."""
    loop = asyncio.get_running_loop()
    return [
        loop.create_task(
            run_fixed_polling(callback, interval_seconds=interval, name=name),
            name=f"fixed-poller:{name}",
        )
        for name, (callback, interval) in tasks.items()
    ]
