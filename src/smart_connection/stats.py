# src/smart_connection/stats.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .orchestrator import ConnectionOrchestrator


@dataclass(slots=True, frozen=True)
class PollerStats:
    active: bool
    current_interval: float
    consecutive_no_change: int


@dataclass(slots=True, frozen=True)
class OrchestratorStats:
    total_pollers: int
    active_pollers: int
    transport_connected: bool
    user_active: bool
    online: bool
    pollers: Mapping[str, PollerStats]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_pollers": self.total_pollers,
            "active_pollers": self.active_pollers,
            "transport_connected": self.transport_connected,
            "user_active": self.user_active,
            "online": self.online,
            "pollers": {
                task_id: {
                    "active": p.active,
                    "current_interval": p.current_interval,
                    "consecutive_no_change": p.consecutive_no_change,
                }
                for task_id, p in self.pollers.items()
            },
        }


class StatsReporter:
    """Read-only view over an orchestrator; building a snapshot changes nothing."""

    def __init__(self, orchestrator: ConnectionOrchestrator) -> None:
        self._orchestrator = orchestrator

    def snapshot(self) -> OrchestratorStats:
        orch = self._orchestrator
        pollers = {
            p.id: PollerStats(
                active=p.is_active,
                current_interval=p.current_interval,
                consecutive_no_change=p.consecutive_no_change,
            )
            for p in orch.pollers()
        }
        return OrchestratorStats(
            total_pollers=len(pollers),
            active_pollers=sum(1 for p in pollers.values() if p.active),
            transport_connected=orch.is_transport_healthy(),
            user_active=orch.is_user_active(),
            online=orch.is_online,
            pollers=MappingProxyType(pollers),
        )
