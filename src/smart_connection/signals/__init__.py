# src/smart_connection/signals/__init__.py

from __future__ import annotations

from .activity import TRACKED_INTERACTIONS, ActivitySignal
from .connectivity import ConnectivitySignal
from .transport import TransportHealthSignal

__all__ = ["TRACKED_INTERACTIONS", "ActivitySignal", "ConnectivitySignal", "TransportHealthSignal"]
