# src/smart_connection/connectors/loopback_transport.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.events import ListenerSet, Subscription, TransportEvent

logger = logging.getLogger(__name__)


class LoopbackTransport:
    """
    In-process TransportHandle.

    Stands in for the widget's socket in the console simulator and in tests:
    the host flips it with connect()/disconnect() and listeners see the same
    CONNECT/DISCONNECT lifecycle a real channel would emit.

    auto_connect=False makes connect() only record the request, like a socket
    whose reconnect attempt has not succeeded yet.
    """

    def __init__(self, *, connected: bool = False, auto_connect: bool = True) -> None:
        self._connected = bool(connected)
        self.auto_connect = auto_connect
        self.connect_calls = 0
        self.pushed: list[tuple[str, object]] = []
        self._listeners = ListenerSet("transport")

    @property
    def connected(self) -> bool:
        return self._connected

    def on(self, event: TransportEvent, handler: Callable[[], None]) -> Subscription:
        return self._listeners.add(TransportEvent(event), handler)

    def listener_count(self, event: TransportEvent | None = None) -> int:
        return self._listeners.count(event)

    def connect(self) -> None:
        self.connect_calls += 1
        if self.auto_connect:
            self.mark_connected()

    def mark_connected(self) -> None:
        if self._connected:
            return
        self._connected = True
        logger.debug("Loopback transport connected")
        self._listeners.emit(TransportEvent.CONNECT)

    def disconnect(self) -> None:
        if not self._connected:
            return
        self._connected = False
        logger.debug("Loopback transport disconnected")
        self._listeners.emit(TransportEvent.DISCONNECT)

    def emit(self, event: str, payload: object = None) -> None:
        """Record an outbound message (e.g. a request for current state)."""
        if not self._connected:
            logger.debug("Loopback transport dropped %s: not connected", event)
            return
        self.pushed.append((event, payload))
