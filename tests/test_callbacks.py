# tests/test_callbacks.py

from __future__ import annotations

import pytest

from smart_connection.polling.callbacks import ChangeTracker, fingerprint, push_first


def test_fingerprint_ignores_key_order() -> None:
    assert fingerprint({"a": 1, "b": [1, 2]}) == fingerprint({"b": [1, 2], "a": 1})
    assert fingerprint({"a": 1}) != fingerprint({"a": 2})


@pytest.mark.asyncio
async def test_change_tracker_reports_changes() -> None:
    payloads = [{"agents": ["a1"]}, {"agents": ["a1"]}, {"agents": ["a1", "a2"]}]

    async def fetch():
        return payloads.pop(0)

    tracker = ChangeTracker(fetch, name="agents")

    assert await tracker() is True  # first fetch counts as a change
    assert await tracker() is False
    assert await tracker() is True
    assert tracker.last_payload == {"agents": ["a1", "a2"]}


@pytest.mark.asyncio
async def test_change_tracker_failure_keeps_fingerprint() -> None:
    results: list[object] = [{"mode": "hitl"}, ConnectionError("502"), {"mode": "hitl"}]

    async def fetch():
        item = results.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    tracker = ChangeTracker(fetch)
    assert await tracker() is True
    digest = tracker.last_fingerprint

    with pytest.raises(ConnectionError):
        await tracker()
    assert tracker.last_fingerprint == digest

    assert await tracker() is False


@pytest.mark.asyncio
async def test_push_first_prefers_push_channel() -> None:
    push_up = True
    requests: list[str] = []
    pulls = 0

    async def pull() -> bool:
        nonlocal pulls
        pulls += 1
        return True

    callback = push_first(lambda: push_up, lambda: requests.append("state"), pull)

    assert await callback() is False
    assert requests == ["state"]
    assert pulls == 0

    push_up = False
    assert await callback() is True
    assert pulls == 1
