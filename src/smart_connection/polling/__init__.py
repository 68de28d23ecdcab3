# src/smart_connection/polling/__init__.py

from __future__ import annotations

from .callbacks import ChangeTracker, fingerprint, push_first
from .fallback import run_fixed_polling, start_fixed_polling
from .models import BackoffPolicy, PollerOptions, TickOutcome
from .smart_poller import SmartPoller

__all__ = [
    "BackoffPolicy",
    "ChangeTracker",
    "PollerOptions",
    "SmartPoller",
    "TickOutcome",
    "fingerprint",
    "push_first",
    "run_fixed_polling",
    "start_fixed_polling",
]
