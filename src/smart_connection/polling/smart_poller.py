# src/smart_connection/polling/smart_poller.py

from __future__ import annotations

"""
SmartPoller: one self-scheduling pull task.

Scheduling model (single asyncio loop):
- while active, the poller owns at most one pending `loop.call_later` handle;
- when it fires, one task runs the callback; nothing is pending while it runs;
- the next firing is armed only after that run settles, `current_interval`
  after the settle time (a slow callback stretches the real gap);
- stop() cancels the pending handle but never the in-flight callback.

Interval rules per firing:
- gate closed (only_when_needed pollers)  -> skip, nothing changes
- changed                                 -> back to base (exponential pollers)
- unchanged                               -> after `no_change_threshold` misses, x backoff_factor
- callback raised                         -> x failure_factor, always
Every result is clamped to [base_interval, max_interval].
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from ..core.ports import ErrorSink, PollCallback
from ..errors import PollerConfigError
from .models import BackoffPolicy, PollerOptions, TickOutcome

logger = logging.getLogger(__name__)

Gate = Callable[[], bool]


def _always_open() -> bool:
    return True


class _TimerSlot:
    """Holds at most one pending timer handle."""

    __slots__ = ("_handle",)

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, delay: float, fire: Callable[[], None]) -> bool:
        if self._handle is not None:
            return False
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, fire)
        return True

    def cancel(self) -> bool:
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def _fire(self, fire: Callable[[], None]) -> None:
        self._handle = None
        fire()


class SmartPoller:
    def __init__(
        self,
        task_id: str,
        callback: PollCallback,
        options: PollerOptions,
        *,
        policy: BackoffPolicy | None = None,
        gate: Gate = _always_open,
        on_error: ErrorSink | None = None,
    ) -> None:
        if not isinstance(task_id, str) or not task_id.strip():
            raise PollerConfigError(f"task id must be a non-empty string, got {task_id!r}")
        if not callable(callback):
            raise PollerConfigError(f"callback for {task_id!r} is not callable")

        self._id = task_id
        self._callback = callback
        self._options = options
        self._policy = policy or BackoffPolicy()
        self._gate = gate
        self._on_error = on_error

        self._current = float(options.interval)
        self._no_change = 0
        self._active = False
        self._suspended = False
        self._detached = False
        self._timer = _TimerSlot()
        self._in_flight: asyncio.Task[Any] | None = None

        self.last_outcome: TickOutcome | None = None

    # ---- read-only state ----

    @property
    def id(self) -> str:
        return self._id

    @property
    def callback(self) -> PollCallback:
        return self._callback

    @property
    def options(self) -> PollerOptions:
        return self._options

    @property
    def base_interval(self) -> float:
        return float(self._options.interval)

    @property
    def max_interval(self) -> float:
        return float(self._options.max_interval)

    @property
    def use_exponential(self) -> bool:
        return self._options.exponential

    @property
    def only_when_needed(self) -> bool:
        return self._options.only_when_needed

    @property
    def current_interval(self) -> float:
        return self._current

    @property
    def consecutive_no_change(self) -> int:
        return self._no_change

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def has_pending(self) -> bool:
        return self._timer.pending

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def in_flight_task(self) -> asyncio.Task[Any] | None:
        return self._in_flight

    @property
    def is_suspended(self) -> bool:
        return self._suspended

    @property
    def is_detached(self) -> bool:
        return self._detached

    # ---- lifecycle ----

    def start(self) -> bool:
        """Activate and arm the first firing. Returns False if already active."""
        if self._detached:
            logger.warning("Smart poller %r was torn down; start ignored", self._id)
            return False
        if self._active:
            return False
        # Arm first: without a running loop this raises with the poller still inactive.
        # A run that started before stop() is still settling: it will arm the next firing.
        if self._in_flight is None:
            self._arm()
        self._active = True
        self._suspended = False
        logger.info("Smart poller %r started (every %.1fs)", self._id, self._current)
        return True

    def stop(self) -> bool:
        """Deactivate and cancel the pending firing. Returns False if already inactive."""
        if not self._active:
            return False
        self._active = False
        self._timer.cancel()
        logger.info("Smart poller %r stopped", self._id)
        return True

    def suspend(self) -> None:
        """Cancel the pending firing but stay logically active (page hidden)."""
        self._suspended = True
        self._timer.cancel()

    def resume(self) -> bool:
        """Re-arm an active poller that has nothing pending. Returns True if armed."""
        if not self._active or self._detached or self._timer.pending or self._in_flight is not None:
            self._suspended = False
            return False
        self._arm()
        self._suspended = False
        return True

    def detach(self) -> None:
        """Final teardown: stop, and drop any result that is still in flight."""
        self.stop()
        self._timer.cancel()
        self._detached = True

    # ---- interval adjustments driven by the orchestrator ----

    def reset_to_base(self) -> None:
        self._current = self.base_interval
        self._no_change = 0

    def widen(self, factor: float) -> None:
        target = max(self._current, self.base_interval * factor)
        self._current = min(target, self.max_interval)

    # ---- execution ----

    async def tick(self) -> TickOutcome:
        """
        Run one firing (gate check + callback + interval update) on demand.

        Refused with SKIPPED while another firing is in flight. If the poller is
        active and nothing is pending once the manual firing settles, the next
        firing is armed.
        """
        if self._in_flight is not None:
            logger.debug("Poll %r already in flight, manual tick skipped", self._id)
            return TickOutcome.SKIPPED
        self._in_flight = asyncio.current_task()
        try:
            return await self._tick()
        finally:
            self._in_flight = None
            if self._should_rearm() and not self._timer.pending:
                self._arm()

    async def _tick(self) -> TickOutcome:
        try:
            # The gate reads host-supplied handles; a failure there counts as a failed firing.
            if self.only_when_needed and not self._gate():
                logger.debug("Skipping poll %r - not needed", self._id)
                self.last_outcome = TickOutcome.SKIPPED
                return TickOutcome.SKIPPED
            changed = bool(await self._callback())
        except Exception as exc:
            if self._detached:
                return TickOutcome.DISCARDED
            logger.exception("Error in poller %r", self._id)
            self._current = min(self._current * self._policy.failure_factor, self.max_interval)
            self._report(exc)
            outcome = TickOutcome.FAILED
        else:
            if self._detached:
                return TickOutcome.DISCARDED
            outcome = self._apply(changed)

        self.last_outcome = outcome
        return outcome

    def _apply(self, changed: bool) -> TickOutcome:
        outcome = TickOutcome.CHANGED if changed else TickOutcome.UNCHANGED
        if not self.use_exponential:
            return outcome

        if changed:
            if self._current != self.base_interval:
                logger.debug("Changes detected in %r, resetting interval", self._id)
            self._current = self.base_interval
            self._no_change = 0
            return outcome

        self._no_change += 1
        if self._no_change > self._policy.no_change_threshold:
            widened = min(self._current * self._policy.backoff_factor, self.max_interval)
            if widened != self._current:
                logger.debug("No changes in %r, interval now %.1fs", self._id, widened)
            self._current = widened
        return outcome

    def _report(self, exc: BaseException) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(self._id, exc)
        except Exception:
            logger.exception("Diagnostic sink failed for poller %r", self._id)

    def _should_rearm(self) -> bool:
        return self._active and not self._suspended and not self._detached

    def _arm(self) -> None:
        self._timer.arm(self._current, self._fire)

    def _fire(self) -> None:
        if not self._active or self._detached:
            return
        if self._in_flight is not None:
            # A manual tick is running; try again one interval later.
            self._arm()
            return
        loop = asyncio.get_running_loop()
        self._in_flight = loop.create_task(self._run_scheduled(), name=f"smart-poller:{self._id}")

    async def _run_scheduled(self) -> None:
        try:
            await self._tick()
        except Exception:
            logger.exception("Scheduled firing of poller %r crashed", self._id)
        finally:
            self._in_flight = None
        if self._should_rearm():
            self._arm()

    def __repr__(self) -> str:
        return (
            f"SmartPoller(id={self._id!r}, active={self._active}, "
            f"interval={self._current:.1f}s, no_change={self._no_change})"
        )
