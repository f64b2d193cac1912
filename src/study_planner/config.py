# src/study_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets, no I/O at import time beyond reading .env.
- Invalid values fall back to defaults instead of crashing the UI at startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLANNER"

STORAGE_BACKENDS = ("sqlite", "json", "memory")
DEFAULT_STORAGE_BACKEND = "sqlite"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv() -> None:
    """Load a local .env without overriding variables that are already set."""
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer in %s=%r; using %s", name, raw, default)
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

    # ---- Storage ----
    storage_backend: str
    data_dir: Path
    db_path: Path
    json_path: Path

    # ---- Reminders ----
    reminder_window_minutes: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "study-planner").strip() or "study-planner"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        storage_backend = _env(_k("STORAGE_BACKEND"), DEFAULT_STORAGE_BACKEND).strip().lower()
        if storage_backend not in STORAGE_BACKENDS:
            logger.warning(
                "Unknown %s=%r; using %s", _k("STORAGE_BACKEND"), storage_backend, DEFAULT_STORAGE_BACKEND
            )
            storage_backend = DEFAULT_STORAGE_BACKEND

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/study_planner"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "planner.sqlite3")
        json_path = _env_path(_k("JSON_PATH"), data_dir / "planner.json")

        reminder_window_minutes = max(0, _env_int(_k("REMINDER_WINDOW_MINUTES"), 5))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage_backend=storage_backend,
            data_dir=data_dir,
            db_path=db_path,
            json_path=json_path,
            reminder_window_minutes=reminder_window_minutes,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Settings built on first use (after .env is loaded) and cached."""
    global _SETTINGS
    if _SETTINGS is None:
        _load_dotenv()
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_settings() -> None:
    """Forget cached settings (tests, or after changing the environment)."""
    global _SETTINGS
    _SETTINGS = None
