# src/smart_connection/core/environment.py

from __future__ import annotations

import logging

from .events import EnvironmentEvent, InteractionKind, Listener, ListenerSet, Subscription

logger = logging.getLogger(__name__)


class EnvironmentBus:
    """
    Host-driven Environment implementation.

    The host (a UI shell, the console simulator, tests) reports what it observes:
    - set_online(True/False) -> ONLINE / OFFLINE
    - set_hidden(True/False) -> HIDDEN / VISIBLE
    - interact(kind)         -> INTERACTION(kind)

    Online/visibility events fire only on an actual transition.
    """

    def __init__(self, *, online: bool = True, hidden: bool = False) -> None:
        self._online = bool(online)
        self._hidden = bool(hidden)
        self._listeners = ListenerSet("environment")

    def is_online(self) -> bool:
        return self._online

    def is_hidden(self) -> bool:
        return self._hidden

    def subscribe(self, event: EnvironmentEvent, handler: Listener) -> Subscription:
        return self._listeners.add(EnvironmentEvent(event), handler)

    def listener_count(self, event: EnvironmentEvent | None = None) -> int:
        return self._listeners.count(event)

    def set_online(self, online: bool) -> None:
        online = bool(online)
        if online == self._online:
            return
        self._online = online
        logger.debug("Environment online=%s", online)
        self._listeners.emit(EnvironmentEvent.ONLINE if online else EnvironmentEvent.OFFLINE)

    def set_hidden(self, hidden: bool) -> None:
        hidden = bool(hidden)
        if hidden == self._hidden:
            return
        self._hidden = hidden
        logger.debug("Environment hidden=%s", hidden)
        self._listeners.emit(EnvironmentEvent.HIDDEN if hidden else EnvironmentEvent.VISIBLE)

    def interact(self, kind: InteractionKind | str = InteractionKind.POINTER_MOVE) -> None:
        self._listeners.emit(EnvironmentEvent.INTERACTION, InteractionKind(kind))
