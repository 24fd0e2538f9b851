# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read from disk except an optional .env in the working directory.
- Every value has a default, so a bare checkout runs as-is.
"""

from __future__ import annotations

import functools
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"

STORAGE_BACKENDS = ("memory", "json", "sqlite")
DEFAULT_STORAGE_BACKEND = "json"

logger = logging.getLogger(__name__)

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
    log_to_file: bool

    # ---- Storage ----
    storage_backend: str
    data_dir: Path
    db_path: Path

    # ---- Task rules ----
    due_soon_days: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskflow").strip() or "taskflow"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        storage_backend = _env(_k("STORAGE_BACKEND"), DEFAULT_STORAGE_BACKEND).strip().lower()
        if storage_backend not in STORAGE_BACKENDS:
            logger.warning(
                "Unknown %s=%r; falling back to %r",
                _k("STORAGE_BACKEND"),
                storage_backend,
                DEFAULT_STORAGE_BACKEND,
            )
            storage_backend = DEFAULT_STORAGE_BACKEND

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskflow.sqlite3")

        due_soon_days = max(0, _env_int(_k("DUE_SOON_DAYS"), 3))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            storage_backend=storage_backend,
            data_dir=data_dir,
            db_path=db_path,
            due_soon_days=due_soon_days,
        )


@functools.cache
def get_settings() -> Settings:
    return Settings.from_env()
