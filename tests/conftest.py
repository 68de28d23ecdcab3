# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from smart_connection.config import Settings
from smart_connection.connectors.loopback_transport import LoopbackTransport
from smart_connection.core.environment import EnvironmentBus
from smart_connection.orchestrator import ConnectionOrchestrator

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Explicit settings with the widget's defaults.

    We build Settings directly rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return Settings(
        log_dir=tmp_path / "logs",
        enable_smart_polling=True,
        base_poll_interval=30.0,
        max_poll_interval=60.0,
        activity_timeout=300.0,
        backoff_factor=1.5,
        no_change_threshold=3,
        transport_widen_factor=3.0,
        console_enabled=False,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def environment() -> EnvironmentBus:
    return EnvironmentBus(online=True, hidden=False)


@pytest.fixture()
def transport() -> LoopbackTransport:
    return LoopbackTransport(connected=True)


@pytest.fixture()
def orchestrator(transport, environment, settings, clock):
    orch = ConnectionOrchestrator(transport, environment, settings=settings, clock=clock)
    yield orch
    orch.destroy_all()
