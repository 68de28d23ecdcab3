# tests/test_fallback.py

from __future__ import annotations

import asyncio

import pytest

from smart_connection.polling.fallback import run_fixed_polling, start_fixed_polling

from .fakes import ScriptedCallback


@pytest.mark.asyncio
async def test_fixed_polling_survives_callback_failure() -> None:
    cb = ScriptedCallback([RuntimeError("boom")], default=True)

    runner = asyncio.create_task(run_fixed_polling(cb, interval_seconds=0.01, name="agents"))

    await asyncio.sleep(0.05)
    assert cb.calls == 1
    assert not runner.done()

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner


@pytest.mark.asyncio
async def test_start_fixed_polling_spawns_one_task_each() -> None:
    a = ScriptedCallback()
    b = ScriptedCallback()

    tasks = start_fixed_polling({"a": (a, 30.0), "b": (b, 45.0)})
    await asyncio.sleep(0.01)

    assert a.calls == 1 and b.calls == 1
    assert {t.get_name() for t in tasks} == {"fixed-poller:a", "fixed-poller:b"}

    for t in tasks:
        t.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
