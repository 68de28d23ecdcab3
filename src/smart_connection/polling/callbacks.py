# src/smart_connection/polling/callbacks.py

"""
Helpers that turn ordinary fetch coroutines into poll callbacks.

A poll callback only has to answer "did anything change?". These helpers cover
the two ways the widget answers it:
- ChangeTracker: fingerprint whatever the endpoint returned and compare with last time
- push_first: while push is up, ask the channel to redeliver state instead of pulling
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.ports import PollCallback

logger = logging.getLogger(__name__)


def fingerprint(payload: Any) -> str:
    """Stable digest of a JSON-serializable payload (key order does not matter)."""
    raw = json.dumps(payload, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class ChangeTracker:
    """
    Poll callback that reports whether `fetch()` returned something new.

    The first successful fetch counts as a change. A failing fetch propagates
    (the poller treats it as a failure) and keeps the previous fingerprint.
    """

    def __init__(self, fetch: Callable[[], Awaitable[Any]], *, name: str = "") -> None:
        self._fetch = fetch
        self._name = name or getattr(fetch, "__name__", "fetch")
        self._last: str | None = None
        self.last_payload: Any = None

    @property
    def last_fingerprint(self) -> str | None:
        return self._last

    def reset(self) -> None:
        self._last = None
        self.last_payload = None

    async def __call__(self) -> bool:
        payload = await self._fetch()
        digest = fingerprint(payload)
        changed = digest != self._last
        self._last = digest
        self.last_payload = payload
        if changed:
            logger.debug("ChangeTracker %s: payload changed", self._name)
        return changed


def push_first(
    is_push_ready: Callable[[], bool],
    request_via_push: Callable[[], None],
    pull: PollCallback,
) -> PollCallback:
    """
    Build a callback that prefers the push channel.

    While push is ready the current state is requested over the channel (the
    answer arrives as a push update), and the tick reports "no change" so the
    poller keeps backing off. Otherwise the pull callback does the work.
    """

    async def _callback() -> bool:
        if is_push_ready():
            request_via_push()
            return False
        return await pull()

    return _callback
