# tasks/task_errors.py

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .task_models import Task


class TaskListError(Exception):
    """Base class for every failure the task core reports to its callers."""


class NotFoundError(TaskListError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with ID {task_id} not found.")
        self.task_id = task_id


class CapacityExceededError(TaskListError):
    def __init__(self, max_tasks: int) -> None:
        super().__init__(f"Task list is full (Max {max_tasks}).")
        self.max_tasks = max_tasks


class PersistenceError(TaskListError):
    """
    The task file could not be written.

    Raised after the in-memory mutation has already been applied: `task` is the
    task that was added/updated/removed and is NOT on disk yet.
    """

    def __init__(self, path: str | Path, reason: str, task: Task | None = None) -> None:
        super().__init__(f"Could not write {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
        self.task = task


class MalformedRecordError(TaskListError):
    def __init__(self, line_no: int, line: str, reason: str) -> None:
        super().__init__(f"line {line_no}: {reason}: {line!r}")
        self.line_no = line_no
        self.line = line
        self.reason = reason
