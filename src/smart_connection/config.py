# src/smart_connection/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Defaults match the widget's tuned cadence (30s base, 60s cap, 5 min activity window).
- Bad values fall back to defaults here; poller-level validation happens at task creation.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SMARTCONN"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str = "smart-connection"
    log_level: str = "INFO"
    log_dir: Path = Path(".local/smart_connection")

    # ---- Polling ----
    enable_smart_polling: bool = True
    base_poll_interval: float = 30.0
    max_poll_interval: float = 60.0
    activity_timeout: float = 300.0
    backoff_factor: float = 1.5
    no_change_threshold: int = 3
    transport_widen_factor: float = 3.0

    # ---- Connectors ----
    console_enabled: bool = True

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "smart-connection"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            log_dir=_env_path(_k("LOG_DIR"), Path(".local/smart_connection")),
            enable_smart_polling=_env_bool(_k("ENABLE_SMART_POLLING"), True),
            base_poll_interval=_env_float(_k("BASE_POLL_INTERVAL"), 30.0),
            max_poll_interval=_env_float(_k("MAX_POLL_INTERVAL"), 60.0),
            activity_timeout=_env_float(_k("ACTIVITY_TIMEOUT"), 300.0),
            backoff_factor=_env_float(_k("BACKOFF_FACTOR"), 1.5),
            no_change_threshold=_env_int(_k("NO_CHANGE_THRESHOLD"), 3),
            transport_widen_factor=_env_float(_k("TRANSPORT_WIDEN_FACTOR"), 3.0),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
