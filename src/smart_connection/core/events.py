# src/smart_connection/core/events.py

"""
Event names and listener plumbing shared by the environment and transport sides.

Every registration returns a Subscription handle. Handles are independent:
unsubscribing one never affects another, and unsubscribing twice is harmless.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., None]


class EnvironmentEvent(StrEnum):
    ONLINE = "online"
    OFFLINE = "offline"
    HIDDEN = "hidden"
    VISIBLE = "visible"
    INTERACTION = "interaction"


class TransportEvent(StrEnum):
    CONNECT = "connect"
    DISCONNECT = "disconnect"


class InteractionKind(StrEnum):
    POINTER_DOWN = "pointerdown"
    POINTER_MOVE = "pointermove"
    KEY_PRESS = "keypress"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"
    # Not tracked as activity; exists so hosts can forward everything they see.
    FOCUS = "focus"
    RESIZE = "resize"


class Subscription:
    """Handle returned by `subscribe`/`on`; call `unsubscribe()` to detach."""

    __slots__ = ("_owner", "_event", "_listener", "_active")

    def __init__(self, owner: ListenerSet, event: str, listener: Listener) -> None:
        self._owner = owner
        self._event = event
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def event(self) -> str:
        return self._event

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._owner._remove(self._event, self._listener)


class ListenerSet:
    """
    Synchronous fan-out of named events to listeners.

    A listener that raises is logged and skipped; the remaining listeners still run.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._listeners: dict[str, list[Listener]] = {}

    def add(self, event: str, listener: Listener) -> Subscription:
        self._listeners.setdefault(str(event), []).append(listener)
        return Subscription(self, str(event), listener)

    def _remove(self, event: str, listener: Listener) -> None:
        bucket = self._listeners.get(event)
        if not bucket:
            return
        try:
            bucket.remove(listener)
        except ValueError:
            return
        if not bucket:
            del self._listeners[event]

    def count(self, event: str | None = None) -> int:
        if event is None:
            return sum(len(b) for b in self._listeners.values())
        return len(self._listeners.get(str(event), ()))

    def emit(self, event: str, *args: Any) -> None:
        # Copy: listeners may unsubscribe themselves while we iterate.
        for listener in list(self._listeners.get(str(event), ())):
            try:
                listener(*args)
            except Exception:
                logger.exception("%s listener failed for event %s", self._name, event)
