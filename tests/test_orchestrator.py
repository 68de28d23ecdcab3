# tests/test_orchestrator.py

from __future__ import annotations

import pytest

from smart_connection.config import Settings
from smart_connection.connectors.loopback_transport import LoopbackTransport
from smart_connection.core.environment import EnvironmentBus
from smart_connection.errors import OrchestratorClosedError, PollerConfigError, TaskConflictError
from smart_connection.orchestrator import ConnectionOrchestrator
from smart_connection.polling.models import TickOutcome

from .fakes import ExplodingTransport, ScriptedCallback


# ---- global gate ----


def test_gate_always_open_without_push(settings, clock) -> None:
    env = EnvironmentBus(online=False, hidden=True)
    orch = ConnectionOrchestrator(None, env, settings=settings, clock=clock)
    clock.advance(10_000)

    assert not orch.is_user_active()
    assert orch.should_poll_globally() is True


def test_gate_open_when_push_disconnected(settings, clock) -> None:
    env = EnvironmentBus(online=False, hidden=True)
    orch = ConnectionOrchestrator(LoopbackTransport(connected=False), env, settings=settings, clock=clock)
    clock.advance(10_000)

    assert orch.should_poll_globally() is True


def test_gate_with_push_up(orchestrator, environment, clock) -> None:
    assert orchestrator.should_poll_globally() is True

    # Hidden but the user was active recently.
    environment.set_hidden(True)
    assert orchestrator.should_poll_globally() is True

    # Hidden and idle.
    clock.advance(301.0)
    assert orchestrator.should_poll_globally() is False

    # Visible again (records activity) but offline.
    environment.set_hidden(False)
    environment.set_online(False)
    assert orchestrator.should_poll_globally() is False

    environment.set_online(True)
    assert orchestrator.should_poll_globally() is True


def test_activity_window_boundary(orchestrator, environment, clock) -> None:
    environment.set_hidden(True)
    clock.advance(299.0)
    assert orchestrator.should_poll_globally() is True
    clock.advance(1.0)
    assert orchestrator.should_poll_globally() is False


# ---- registration ----


def test_create_task_uses_settings_defaults(orchestrator) -> None:
    poller = orchestrator.create_task("agents", ScriptedCallback())

    assert poller.base_interval == 30.0
    assert poller.max_interval == 60.0
    assert poller.current_interval == 30.0
    assert poller.use_exponential is True
    assert poller.only_when_needed is True
    assert not poller.is_active
    assert "agents" in orchestrator
    assert orchestrator.get_poller("agents") is poller


def test_duplicate_task_id_conflicts(orchestrator) -> None:
    first = orchestrator.create_task("agents", ScriptedCallback())
    with pytest.raises(TaskConflictError):
        orchestrator.create_task("agents", ScriptedCallback())
    assert orchestrator.get_poller("agents") is first
    assert len(orchestrator) == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"interval": 0},
        {"interval": -5},
        {"max_interval": 0},
        {"interval": 90.0, "max_interval": 60.0},
    ],
)
def test_malformed_task_config_fails_fast(orchestrator, kwargs) -> None:
    with pytest.raises(PollerConfigError):
        orchestrator.create_task("bad", ScriptedCallback(), **kwargs)
    assert "bad" not in orchestrator


def test_bad_orchestrator_settings_fail_fast(tmp_path) -> None:
    with pytest.raises(PollerConfigError):
        ConnectionOrchestrator(settings=Settings(log_dir=tmp_path, backoff_factor=0.9))
    with pytest.raises(PollerConfigError):
        ConnectionOrchestrator(settings=Settings(log_dir=tmp_path, transport_widen_factor=0.5))
    with pytest.raises(PollerConfigError):
        ConnectionOrchestrator(settings=Settings(log_dir=tmp_path, activity_timeout=0))


@pytest.mark.parametrize(
    "overrides",
    [{"activity_timeout": float("nan")}, {"transport_widen_factor": float("nan")}, {"activity_timeout": float("inf")}],
)
def test_non_finite_orchestrator_settings_fail_fast(tmp_path, overrides) -> None:
    with pytest.raises(PollerConfigError):
        ConnectionOrchestrator(settings=Settings(log_dir=tmp_path, **overrides))


def test_unknown_ids_are_noops(orchestrator) -> None:
    assert orchestrator.start("missing") is False
    assert orchestrator.stop("missing") is False


# ---- transport reactions ----


def test_transport_connect_widens_only_when_needed_pollers(settings, environment, clock) -> None:
    transport = LoopbackTransport(connected=False)
    orch = ConnectionOrchestrator(transport, environment, settings=settings, clock=clock)
    gated = orch.create_task("gated", ScriptedCallback(), interval=10.0, max_interval=60.0)
    wide = orch.create_task("wide", ScriptedCallback(), interval=30.0, max_interval=60.0)
    always = orch.create_task(
        "always", ScriptedCallback(), interval=10.0, max_interval=60.0, only_when_needed=False
    )

    transport.mark_connected()

    assert gated.current_interval == 30.0
    assert wide.current_interval == 60.0
    assert always.current_interval == 10.0
    orch.destroy_all()


@pytest.mark.asyncio
async def test_transport_disconnect_resets_every_poller(orchestrator, transport) -> None:
    b = orchestrator.create_task(
        "B", ScriptedCallback([RuntimeError("x"), RuntimeError("x")]), interval=1.25, max_interval=10.0
    )
    c = orchestrator.create_task(
        "C", ScriptedCallback(default=False), interval=1.0, max_interval=8.0, only_when_needed=False
    )
    await b.tick()
    await b.tick()
    for _ in range(5):
        await c.tick()
    assert b.current_interval == 5.0
    assert c.current_interval > 1.0 and c.consecutive_no_change == 5

    transport.disconnect()

    assert b.current_interval == 1.25
    assert c.current_interval == 1.0
    assert b.consecutive_no_change == 0
    assert c.consecutive_no_change == 0


@pytest.mark.asyncio
async def test_end_to_end_backoff_then_reset(orchestrator) -> None:
    poller = orchestrator.create_task(
        "A", ScriptedCallback([False, False, False, False, True]), interval=1.0, max_interval=8.0
    )
    seq = [poller.current_interval]
    for _ in range(5):
        outcome = await poller.tick()
        assert outcome != TickOutcome.SKIPPED
        seq.append(poller.current_interval)

    assert seq == [1.0, 1.0, 1.0, 1.0, 1.5, 1.0]


# ---- connectivity reactions ----


def test_network_restore_reconnects_transport(settings, clock) -> None:
    env = EnvironmentBus(online=False)
    transport = LoopbackTransport(connected=False, auto_connect=False)
    orch = ConnectionOrchestrator(transport, env, settings=settings, clock=clock)
    assert orch.is_online is False

    env.set_online(True)

    assert orch.is_online is True
    assert transport.connect_calls == 1


def test_network_restore_skips_connected_transport(orchestrator, environment, transport) -> None:
    environment.set_online(False)
    environment.set_online(True)
    assert transport.connect_calls == 0


def test_network_restore_contains_transport_errors(settings, clock) -> None:
    env = EnvironmentBus(online=False)
    transport = ExplodingTransport(connected=False)
    orch = ConnectionOrchestrator(transport, env, settings=settings, clock=clock)

    env.set_online(True)

    assert transport.connect_calls == 1
    assert orch.is_online is True


def test_going_offline_keeps_pollers(orchestrator, environment) -> None:
    poller = orchestrator.create_task("a", ScriptedCallback())
    environment.set_online(False)
    assert orchestrator.is_online is False
    assert "a" in orchestrator
    assert not poller.is_suspended


def test_visible_records_activity(orchestrator, environment, clock) -> None:
    environment.set_hidden(True)
    clock.advance(500.0)
    assert not orchestrator.is_user_active()

    environment.set_hidden(False)

    assert orchestrator.is_user_active()
    assert orchestrator.activity_signal.last_activity == clock.now


# ---- teardown ----


def test_destroy_all_detaches_everything(settings, clock) -> None:
    env = EnvironmentBus()
    transport = LoopbackTransport(connected=True)
    orch = ConnectionOrchestrator(transport, env, settings=settings, clock=clock)
    poller = orch.create_task("a", ScriptedCallback())
    assert env.listener_count() > 0
    assert transport.listener_count() == 2

    orch.destroy_all()

    assert len(orch) == 0
    assert poller.is_detached and not poller.is_active
    assert env.listener_count() == 0
    assert transport.listener_count() == 0
    with pytest.raises(OrchestratorClosedError):
        orch.create_task("b", ScriptedCallback())
    orch.destroy_all()  # second call is a no-op
