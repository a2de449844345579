# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on a persistence Protocol instead of the concrete task file,
and the command layer depends on a repo Protocol instead of the concrete store.
This keeps storage swappable and makes testing easier.
"""

from pathlib import Path
from typing import Protocol

from ..tasks.task_models import LoadResult, Task, TaskListSnapshot


class TaskPersistence(Protocol):
    """Where a task list is loaded from and written back to."""

    @property
    def path(self) -> Path: ...

    def load(self) -> LoadResult: ...

    def save(self, snapshot: TaskListSnapshot) -> None: ...


class TaskRepo(Protocol):
    # Read API
    def list_tasks(self) -> list[Task]: ...
    def get(self, task_id: int) -> Task: ...
    def count_tasks(self) -> int: ...

    # Mutations (write-through)
    def add(self, description: str) -> Task: ...
    def mark_complete(self, task_id: int) -> Task: ...
    def remove(self, task_id: int) -> Task: ...

    @property
    def path(self) -> Path: ...

    # Limits
    @property
    def max_tasks(self) -> int: ...

    @property
    def max_description_len(self) -> int: ...

    @property
    def is_full(self) -> bool: ...
