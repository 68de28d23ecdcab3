# src/smart_connection/orchestrator.py

"""
ConnectionOrchestrator: decides push vs pull for the widget.

Owns the poller registry and wires three signals into it:
- transport health: push up -> slow down `only_when_needed` pollers; push lost -> full cadence
- connectivity: network back -> nudge the transport; page hidden/visible -> pause/resume
- user activity: feeds the global gate (hidden tab + idle user = no polling)

Everything runs on one asyncio loop; the registry is never touched from other threads.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Iterator

from .config import Settings, get_settings
from .core.environment import EnvironmentBus
from .core.ports import Clock, Environment, ErrorSink, PollCallback, TransportHandle
from .errors import OrchestratorClosedError, PollerConfigError, TaskConflictError
from .polling.models import BackoffPolicy, PollerOptions
from .polling.smart_poller import SmartPoller
from .signals.activity import ActivitySignal
from .signals.connectivity import ConnectivitySignal
from .signals.transport import TransportHealthSignal
from .stats import OrchestratorStats, StatsReporter

logger = logging.getLogger(__name__)


class ConnectionOrchestrator:
    def __init__(
        self,
        transport: TransportHandle | None = None,
        environment: Environment | None = None,
        *,
        settings: Settings | None = None,
        clock: Clock = time.monotonic,
        on_error: ErrorSink | None = None,
    ) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._policy = BackoffPolicy(
            backoff_factor=self._settings.backoff_factor,
            no_change_threshold=self._settings.no_change_threshold,
        )
        widen = self._settings.transport_widen_factor
        if not math.isfinite(widen) or widen < 1.0:
            raise PollerConfigError(f"transport_widen_factor must be finite and >= 1, got {widen!r}")
        timeout = self._settings.activity_timeout
        if not math.isfinite(timeout) or timeout <= 0:
            raise PollerConfigError(f"activity_timeout must be a positive finite number, got {timeout!r}")

        self._environment = environment if environment is not None else EnvironmentBus()
        self._on_error = on_error
        self._pollers: dict[str, SmartPoller] = {}
        self._closed = False

        self.activity_signal = ActivitySignal(
            activity_timeout=self._settings.activity_timeout,
            clock=clock,
            environment=self._environment,
        )
        self.connectivity_signal = ConnectivitySignal(
            self._environment,
            on_restored=self._on_network_restored,
            on_hidden=self.pause_all,
            on_visible=self._on_page_visible,
        )
        self.transport_signal = TransportHealthSignal(
            transport,
            on_connected=self.on_transport_connected,
            on_disconnected=self.on_transport_disconnected,
        )
        logger.info("Smart connection orchestrator initialized")

    # ---- read-only views ----

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def is_online(self) -> bool:
        return self.connectivity_signal.is_online

    @property
    def closed(self) -> bool:
        return self._closed

    def is_user_active(self) -> bool:
        return self.activity_signal.is_user_active()

    def is_transport_healthy(self) -> bool:
        return self.transport_signal.is_healthy()

    def get_poller(self, task_id: str) -> SmartPoller | None:
        return self._pollers.get(task_id)

    def pollers(self) -> Iterator[SmartPoller]:
        return iter(list(self._pollers.values()))

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._pollers

    def __len__(self) -> int:
        return len(self._pollers)

    # ---- global gate ----

    def should_poll_globally(self) -> bool:
        # Push down: pull is the only source of truth.
        if not self.transport_signal.is_healthy():
            return True
        if self.connectivity_signal.is_hidden and not self.activity_signal.is_user_active():
            return False
        if not self.connectivity_signal.is_online:
            return False
        return True

    # ---- task API ----

    def create_task(
        self,
        task_id: str,
        callback: PollCallback,
        *,
        interval: float | None = None,
        max_interval: float | None = None,
        exponential: bool = True,
        only_when_needed: bool = True,
    ) -> SmartPoller:
        if self._closed:
            raise OrchestratorClosedError("orchestrator was torn down; create a new one")
        if task_id in self._pollers:
            raise TaskConflictError(task_id)

        options = PollerOptions(
            interval=self._settings.base_poll_interval if interval is None else interval,
            max_interval=self._settings.max_poll_interval if max_interval is None else max_interval,
            exponential=bool(exponential),
            only_when_needed=bool(only_when_needed),
        )
        poller = SmartPoller(
            task_id,
            callback,
            options,
            policy=self._policy,
            gate=self.should_poll_globally,
            on_error=self._on_error,
        )
        self._pollers[task_id] = poller
        logger.info("Smart poller %r created (%.1fs base interval)", task_id, options.interval)
        return poller

    def start(self, task_id: str) -> bool:
        poller = self._pollers.get(task_id)
        if poller is None:
            logger.warning("start: unknown task %r", task_id)
            return False
        return poller.start()

    def stop(self, task_id: str) -> bool:
        poller = self._pollers.get(task_id)
        if poller is None:
            logger.warning("stop: unknown task %r", task_id)
            return False
        return poller.stop()

    def destroy_all(self) -> None:
        """Full teardown: stop and drop every poller, detach every listener."""
        if self._closed:
            return
        logger.info("Cleaning up connection orchestrator (%d pollers)", len(self._pollers))
        for poller in list(self._pollers.values()):
            poller.detach()
        self._pollers.clear()
        self.activity_signal.close()
        self.connectivity_signal.close()
        self.transport_signal.close()
        self._closed = True

    # ---- global adjustments ----

    def pause_all(self) -> None:
        logger.info("Pausing all polling (page hidden)")
        for poller in self._pollers.values():
            poller.suspend()

    def resume_all(self) -> None:
        logger.info("Resuming polling (page visible)")
        for poller in self._pollers.values():
            poller.resume()

    def on_transport_connected(self) -> None:
        factor = self._settings.transport_widen_factor
        for poller in self._pollers.values():
            if poller.only_when_needed:
                poller.widen(factor)

    def on_transport_disconnected(self) -> None:
        for poller in self._pollers.values():
            poller.reset_to_base()

    # ---- signal hooks ----

    def _on_page_visible(self) -> None:
        self.resume_all()
        self.activity_signal.record_activity()

    def _on_network_restored(self) -> None:
        try:
            if self.transport_signal.request_connect():
                logger.info("Asked push transport to reconnect")
        except Exception:
            logger.exception("Push transport connect() failed")

    # ---- diagnostics ----

    def get_stats(self) -> OrchestratorStats:
        return StatsReporter(self).snapshot()
