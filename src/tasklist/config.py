# src/tasklist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Bad or missing values fall back to defaults, never fail at import time.

Environment variables:
- TASKLIST_APP_NAME              App display name (default: tasklist).
- TASKLIST_LOG_LEVEL             Console logging level (default: INFO).
- TASKLIST_DATA_DIR              Local data directory, also holds the log file
                                 (default: .local/tasklist).
- TASKLIST_TASKS_FILE            Task file path (default: <data_dir>/tasks.txt).
- TASKLIST_MAX_TASKS             Maximum number of tasks (default: 100).
- TASKLIST_MAX_DESCRIPTION_LEN   Maximum description length in characters
                                 (default: 100); longer input is truncated.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_codec import DEFAULT_MAX_DESCRIPTION_LEN, DEFAULT_MAX_TASKS

ENV_PREFIX = "TASKLIST"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


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
    tasks_file: Path

    # ---- Limits ----
    max_tasks: int
    max_description_len: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasklist").strip() or "tasklist"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasklist"))
        tasks_file = _env_path(_k("TASKS_FILE"), data_dir / "tasks.txt")

        max_tasks = _env_int(_k("MAX_TASKS"), DEFAULT_MAX_TASKS, minimum=1)
        max_description_len = _env_int(
            _k("MAX_DESCRIPTION_LEN"),
            DEFAULT_MAX_DESCRIPTION_LEN,
            minimum=1,
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_file=tasks_file,
            max_tasks=max_tasks,
            max_description_len=max_description_len,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
