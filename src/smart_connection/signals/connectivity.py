# src/smart_connection/signals/connectivity.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.events import EnvironmentEvent, Subscription
from ..core.ports import Environment

logger = logging.getLogger(__name__)

Hook = Callable[[], None]


def _noop() -> None:
    return None


class ConnectivitySignal:
    """
    Network reachability and page visibility.

    Both flags start from what the environment reports at construction and
    afterwards change only through transition events. Reactions are delegated
    to hooks so the orchestrator decides what a transition means:
    - on_restored: network came back (orchestrator nudges the transport)
    - on_hidden / on_visible: page visibility flipped (pause / resume polling)
    Losing the network only flips the flag; pollers keep running and the
    global gate decides whether they do any work.
    """

    def __init__(
        self,
        environment: Environment,
        *,
        on_restored: Hook = _noop,
        on_hidden: Hook = _noop,
        on_visible: Hook = _noop,
    ) -> None:
        self._online = bool(environment.is_online())
        self._hidden = bool(environment.is_hidden())
        self._on_restored = on_restored
        self._on_hidden = on_hidden
        self._on_visible = on_visible
        self._subscriptions: list[Subscription] = [
            environment.subscribe(EnvironmentEvent.ONLINE, self._handle_online),
            environment.subscribe(EnvironmentEvent.OFFLINE, self._handle_offline),
            environment.subscribe(EnvironmentEvent.HIDDEN, self._handle_hidden),
            environment.subscribe(EnvironmentEvent.VISIBLE, self._handle_visible),
        ]

    @property
    def is_online(self) -> bool:
        return self._online

    @property
    def is_hidden(self) -> bool:
        return self._hidden

    def _handle_online(self) -> None:
        self._online = True
        logger.info("Network connection restored")
        self._on_restored()

    def _handle_offline(self) -> None:
        self._online = False
        logger.info("Network connection lost")

    def _handle_hidden(self) -> None:
        self._hidden = True
        self._on_hidden()

    def _handle_visible(self) -> None:
        self._hidden = False
        self._on_visible()

    def close(self) -> None:
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()
