# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklist.core.state import AppState
from tasklist.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="INFO",
        data_dir=data_dir,
        tasks_file=data_dir / "tasks.txt",
        max_tasks=5,
        max_description_len=20,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    """Real file-backed store: its write-through behavior is part of what we test."""
    return TaskStore.open(
        settings.tasks_file,
        max_tasks=settings.max_tasks,
        max_description_len=settings.max_description_len,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store)
