# src/smart_connection/signals/transport.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.events import Subscription, TransportEvent
from ..core.ports import TransportHandle

logger = logging.getLogger(__name__)


class TransportHealthSignal:
    """
    Observes the host's push channel.

    No transport at all counts as unhealthy: pull is then the only source of truth.
    """

    def __init__(
        self,
        transport: TransportHandle | None,
        *,
        on_connected: Callable[[], None],
        on_disconnected: Callable[[], None],
    ) -> None:
        self._transport = transport
        self._on_connected = on_connected
        self._on_disconnected = on_disconnected
        self._subscriptions: list[Subscription] = []
        if transport is not None:
            self._subscriptions = [
                transport.on(TransportEvent.CONNECT, self._handle_connect),
                transport.on(TransportEvent.DISCONNECT, self._handle_disconnect),
            ]

    @property
    def transport(self) -> TransportHandle | None:
        return self._transport

    def is_healthy(self) -> bool:
        return self._transport is not None and bool(self._transport.connected)

    def request_connect(self) -> bool:
        """Ask a disconnected transport to connect. Returns True if a connect was requested."""
        if self._transport is None or self.is_healthy():
            return False
        self._transport.connect()
        return True

    def _handle_connect(self) -> None:
        logger.info("Push transport connected - reducing polling")
        self._on_connected()

    def _handle_disconnect(self) -> None:
        logger.info("Push transport disconnected - increasing polling")
        self._on_disconnected()

    def close(self) -> None:
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()
