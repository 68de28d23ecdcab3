# tests/test_stats.py

from __future__ import annotations

import dataclasses

import pytest

from smart_connection.stats import StatsReporter

from .fakes import ScriptedCallback


@pytest.mark.asyncio
async def test_snapshot_reports_orchestrator_and_pollers(orchestrator) -> None:
    a = orchestrator.create_task("a", ScriptedCallback(default=False), interval=0.5, max_interval=5.0)
    orchestrator.create_task("b", ScriptedCallback(), interval=1.0, max_interval=2.0)
    for _ in range(2):
        await a.tick()
    orchestrator.start("a")

    stats = orchestrator.get_stats()

    assert stats.total_pollers == 2
    assert stats.active_pollers == 1
    assert stats.transport_connected is True
    assert stats.user_active is True
    assert stats.online is True
    assert stats.pollers["a"].active is True
    assert stats.pollers["a"].current_interval == 0.5
    assert stats.pollers["a"].consecutive_no_change == 2
    assert stats.pollers["b"].active is False
    orchestrator.stop("a")


def test_snapshot_is_immutable(orchestrator) -> None:
    orchestrator.create_task("a", ScriptedCallback())
    stats = StatsReporter(orchestrator).snapshot()

    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.total_pollers = 5  # type: ignore[misc]
    with pytest.raises(TypeError):
        stats.pollers["x"] = stats.pollers["a"]  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.pollers["a"].current_interval = 1.0  # type: ignore[misc]


def test_snapshot_does_not_touch_activity(orchestrator, clock) -> None:
    before = orchestrator.activity_signal.last_activity
    clock.advance(1000.0)

    stats = orchestrator.get_stats()

    assert stats.user_active is False
    assert orchestrator.activity_signal.last_activity == before


def test_to_dict_shape(orchestrator) -> None:
    orchestrator.create_task("a", ScriptedCallback(), interval=2.0, max_interval=4.0)

    data = orchestrator.get_stats().to_dict()

    assert data["total_pollers"] == 1
    assert data["pollers"] == {
        "a": {"active": False, "current_interval": 2.0, "consecutive_no_change": 0}
    }
