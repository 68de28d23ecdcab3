# src/smart_connection/polling/models.py

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum

from ..errors import PollerConfigError


class TickOutcome(StrEnum):
    """What one scheduled firing of a poller did."""

    SKIPPED = "skipped"  # global gate closed; callback not invoked
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    FAILED = "failed"
    DISCARDED = "discarded"  # poller was torn down while the callback ran


@dataclass(slots=True, frozen=True)
class PollerOptions:
    """
    Immutable per-task configuration.

    Intervals are seconds. Construction validates everything: bad values raise
    PollerConfigError instead of being clamped into range.
    """

    interval: float
    max_interval: float
    exponential: bool = True
    only_when_needed: bool = True

    def __post_init__(self) -> None:
        for name in ("interval", "max_interval"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise PollerConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise PollerConfigError(f"{name} must be a positive finite number, got {value!r}")
        if self.interval > self.max_interval:
            raise PollerConfigError(
                f"interval ({self.interval}) must not exceed max_interval ({self.max_interval})"
            )


@dataclass(slots=True, frozen=True)
class BackoffPolicy:
    """Orchestrator-wide knobs shared by every poller."""

    backoff_factor: float = 1.5
    no_change_threshold: int = 3
    failure_factor: float = 2.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.backoff_factor) or self.backoff_factor < 1.0:
            raise PollerConfigError(f"backoff_factor must be >= 1, got {self.backoff_factor!r}")
        if self.no_change_threshold < 0:
            raise PollerConfigError(
                f"no_change_threshold must be >= 0, got {self.no_change_threshold!r}"
            )
        if not math.isfinite(self.failure_factor) or self.failure_factor < 1.0:
            raise PollerConfigError(f"failure_factor must be >= 1, got {self.failure_factor!r}")
