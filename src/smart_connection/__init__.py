# src/smart_connection/__init__.py

"""Push/pull connection arbiter for the live chat widget."""

from __future__ import annotations

from .errors import (
    OrchestratorClosedError,
    PollerConfigError,
    SmartConnectionError,
    TaskConflictError,
)
from .orchestrator import ConnectionOrchestrator
from .polling.smart_poller import SmartPoller
from .stats import OrchestratorStats, PollerStats, StatsReporter

__all__ = [
    "ConnectionOrchestrator",
    "OrchestratorClosedError",
    "OrchestratorStats",
    "PollerConfigError",
    "PollerStats",
    "SmartConnectionError",
    "SmartPoller",
    "StatsReporter",
    "TaskConflictError",
]
