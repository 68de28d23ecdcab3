# src/smart_connection/signals/activity.py

from __future__ import annotations

import logging
import time

from ..core.events import EnvironmentEvent, InteractionKind, Subscription
from ..core.ports import Clock, Environment

logger = logging.getLogger(__name__)

TRACKED_INTERACTIONS: frozenset[InteractionKind] = frozenset(
    {
        InteractionKind.POINTER_DOWN,
        InteractionKind.POINTER_MOVE,
        InteractionKind.KEY_PRESS,
        InteractionKind.SCROLL,
        InteractionKind.TOUCH_START,
    }
)


class ActivitySignal:
    """Last user-interaction instant plus an "is the user active" predicate."""

    def __init__(
        self,
        *,
        activity_timeout: float,
        clock: Clock = time.monotonic,
        environment: Environment | None = None,
    ) -> None:
        self._clock = clock
        self._timeout = float(activity_timeout)
        self._last_activity = clock()
        self._subscription: Subscription | None = None
        if environment is not None:
            self._subscription = environment.subscribe(EnvironmentEvent.INTERACTION, self._on_interaction)

    @property
    def last_activity(self) -> float:
        return self._last_activity

    @property
    def activity_timeout(self) -> float:
        return self._timeout

    def record_activity(self) -> None:
        # max(): a clock that steps back must not move the timestamp backwards.
        self._last_activity = max(self._last_activity, self._clock())

    def is_user_active(self, now: float | None = None, timeout: float | None = None) -> bool:
        if now is None:
            now = self._clock()
        if timeout is None:
            timeout = self._timeout
        return (now - self._last_activity) < timeout

    def _on_interaction(self, kind: InteractionKind) -> None:
        if kind in TRACKED_INTERACTIONS:
            self.record_activity()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
