# src/smart_connection/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The orchestrator depends on Protocols instead of concrete implementations.
The push channel and the browser-style environment are supplied by the host;
this keeps them swappable and makes testing easier.
"""

from typing import Awaitable, Callable, Protocol

from .events import EnvironmentEvent, Listener, Subscription, TransportEvent

PollCallback = Callable[[], Awaitable[bool]]
# Pull-refresh for one task: resolves True when the underlying data changed, or raises.

ErrorSink = Callable[[str, BaseException], None]
# Diagnostic sink for callback failures: (task_id, error).

Clock = Callable[[], float]


class TransportHandle(Protocol):
    """
    Bidirectional push channel owned by the host.

    The core only reads `connected`, listens for lifecycle events and may ask it
    to `connect()` (idempotent, fire-and-forget). It never closes or replaces it.
    """

    @property
    def connected(self) -> bool: ...

    def on(self, event: TransportEvent, handler: Callable[[], None]) -> Subscription: ...

    def connect(self) -> None: ...


class Environment(Protocol):
    """
    Browser-style environment signals.

    Handlers for INTERACTION receive the InteractionKind; the other events carry no payload.
    """

    def is_online(self) -> bool: ...

    def is_hidden(self) -> bool: ...

    def subscribe(self, event: EnvironmentEvent, handler: Listener) -> Subscription: ...
