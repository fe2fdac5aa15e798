# src/pomotrack/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read from disk at import time except the optional .env.
- Paths default to a gitignored local data directory.

Not to be confused with UserSettings (timer durations), which live in the
database and are edited through the API.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "POMO"


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
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    timer_state_path: Path

    # ---- HTTP API ----
    api_enabled: bool
    api_host: str
    api_port: int

    # ---- Console / timer ----
    console_enabled: bool
    timer_poll_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "pomotrack").strip() or "pomotrack"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/pomotrack"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "pomodoro.sqlite3")
        timer_state_path = _env_path(_k("TIMER_STATE_PATH"), data_dir / "timer_state.json")

        api_enabled = _env_bool(_k("API_ENABLED"), True)
        api_host = _env(_k("API_HOST"), "127.0.0.1")
        api_port = _env_int(_k("API_PORT"), 8000)

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), False)
        timer_poll_seconds = _env_float(_k("TIMER_POLL_SECONDS"), 1.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            timer_state_path=timer_state_path,
            api_enabled=api_enabled,
            api_host=api_host,
            api_port=api_port,
            console_enabled=console_enabled,
            timer_poll_seconds=timer_poll_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
