# src/smart_connection/cli/demo_tasks.py

"""
Simulated widget feeds for the console simulator.

Two feeds mirror what the settings page polls:
- connected-agents: who is online (changes now and then)
- system-mode: HITL / autopilot / OFF (changes rarely)

They stand in for HTTP endpoints; the polling side sees only "changed or not".
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any

from ..connectors.loopback_transport import LoopbackTransport
from ..core.ports import PollCallback
from ..polling.callbacks import ChangeTracker, push_first

AGENT_NAMES = ("agent-1", "agent-2", "agent-3", "agent-4")
SYSTEM_MODES = ("hitl", "autopilot", "off")


@dataclass(slots=True, frozen=True)
class DemoTaskSpec:
    task_id: str
    interval: float
    max_interval: float


DEMO_TASKS = (
    DemoTaskSpec("connected-agents", interval=30.0, max_interval=60.0),
    DemoTaskSpec("system-mode", interval=45.0, max_interval=120.0),
)


class SimulatedFeed:
    """Fake endpoint: returns the same payload until a random mutation kicks in."""

    def __init__(self, name: str, *, change_probability: float, seed: int | None = None) -> None:
        self.name = name
        self.change_probability = change_probability
        self.fail_next = False
        self.calls = 0
        self._rng = random.Random(seed)
        self._state: Any = self._initial()

    def _initial(self) -> Any:
        if self.name == "system-mode":
            return {"mode": SYSTEM_MODES[0]}
        return {"agents": [AGENT_NAMES[0]]}

    def _mutate(self) -> None:
        if self.name == "system-mode":
            self._state = {"mode": self._rng.choice(SYSTEM_MODES)}
        else:
            k = self._rng.randint(0, len(AGENT_NAMES))
            self._state = {"agents": sorted(self._rng.sample(AGENT_NAMES, k))}

    async def fetch(self) -> Any:
        self.calls += 1
        await asyncio.sleep(0)
        if self.fail_next:
            self.fail_next = False
            raise ConnectionError(f"{self.name}: simulated HTTP failure")
        if self._rng.random() < self.change_probability:
            self._mutate()
        return self._state


def build_demo_feeds(seed: int | None = None) -> dict[str, SimulatedFeed]:
    return {
        "connected-agents": SimulatedFeed("connected-agents", change_probability=0.3, seed=seed),
        "system-mode": SimulatedFeed("system-mode", change_probability=0.05, seed=seed),
    }


def build_demo_callback(feed: SimulatedFeed, transport: LoopbackTransport) -> PollCallback:
    """Ask over push while the socket is up; otherwise pull and compare."""
    tracker = ChangeTracker(feed.fetch, name=feed.name)
    return push_first(
        lambda: transport.connected,
        lambda: transport.emit("request-current-state", feed.name),
        tracker,
    )
