# src/smart_connection/errors.py

from __future__ import annotations


class SmartConnectionError(Exception):
    """Base class for errors raised by smart_connection."""


class PollerConfigError(SmartConnectionError, ValueError):
    """Invalid poller/orchestrator configuration (bad intervals, factors, ids)."""


class TaskConflictError(SmartConnectionError):
    """A task with the same id is already registered."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task already registered: {task_id!r}")
        self.task_id = task_id


class OrchestratorClosedError(SmartConnectionError, RuntimeError):
    """The orchestrator was torn down and no longer accepts tasks."""
