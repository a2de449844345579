# tasks/task_store.py

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from ..core.ports import TaskPersistence
from .task_codec import DEFAULT_MAX_DESCRIPTION_LEN, DEFAULT_MAX_TASKS, TaskFile
from .task_errors import CapacityExceededError, NotFoundError, PersistenceError
from .task_models import LoadResult, Task, TaskListSnapshot

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task list with write-through persistence.

    - tasks keep insertion order; removal closes the gap
    - ids come from next_id and are never reused (next_id is persisted)
    - every mutation rewrites the whole task file before returning

    Save failures:
    - the mutation is NOT rolled back; it stays applied in memory
    - PersistenceError is raised with `task` set to the affected task, so the
      caller can report that the change exists only in memory
    """

    def __init__(
        self,
        persistence: TaskPersistence,
        *,
        max_tasks: int = DEFAULT_MAX_TASKS,
        max_description_len: int = DEFAULT_MAX_DESCRIPTION_LEN,
    ) -> None:
        if max_tasks < 1:
            raise ValueError("max_tasks must be >= 1")
        if max_description_len < 1:
            raise ValueError("max_description_len must be >= 1")

        self._persistence = persistence
        self._max_tasks = max_tasks
        self._max_description_len = max_description_len

        result = persistence.load()
        self._tasks: list[Task] = list(result.snapshot.tasks[:max_tasks])
        self._next_id: int = result.snapshot.next_id
        self.last_load: LoadResult = result

        logger.info(
            "TaskStore ready file=%s total=%s next_id=%s",
            persistence.path,
            len(self._tasks),
            self._next_id,
        )

    @classmethod
    def open(
        cls,
        path: str | Path = "tasks.txt",
        *,
        max_tasks: int = DEFAULT_MAX_TASKS,
        max_description_len: int = DEFAULT_MAX_DESCRIPTION_LEN,
    ) -> TaskStore:
        task_file = TaskFile(path, max_tasks=max_tasks, max_description_len=max_description_len)
        return cls(task_file, max_tasks=max_tasks, max_description_len=max_description_len)

    # ---- low-level helpers ----

    def _index_of(self, task_id: int) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(task_id)

    def _clean_description(self, description: str) -> str:
        # A record is one line: no CR/LF may reach the file.
        clean = description.replace("\r", " ").replace("\n", " ")
        if len(clean) > self._max_description_len:
            logger.debug("Description truncated from %d to %d chars.", len(clean), self._max_description_len)
            clean = clean[: self._max_description_len]
        return clean

    def _save(self, task: Task) -> None:
        try:
            self._persistence.save(self.snapshot())
        except PersistenceError as exc:
            exc.task = task
            logger.warning("Task #%s changed in memory but was not saved: %s", task.id, exc.reason)
            raise

    # ---- properties ----

    @property
    def path(self) -> Path:
        return self._persistence.path

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def max_tasks(self) -> int:
        return self._max_tasks

    @property
    def max_description_len(self) -> int:
        return self._max_description_len

    @property
    def is_full(self) -> bool:
        return len(self._tasks) >= self._max_tasks

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def list_tasks(self) -> list[Task]:
        return list(self._tasks)

    def snapshot(self) -> TaskListSnapshot:
        return TaskListSnapshot(tasks=tuple(self._tasks), next_id=self._next_id)

    def get(self, task_id: int) -> Task:
        return self._tasks[self._index_of(task_id)]

    def add(self, description: str) -> Task:
        if self.is_full:
            raise CapacityExceededError(self._max_tasks)

        task = Task(id=self._next_id, description=self._clean_description(description))
        self._next_id += 1
        self._tasks.append(task)
        logger.debug("Task added id=%s", task.id)

        self._save(task)
        return task

    def mark_complete(self, task_id: int) -> Task:
        index = self._index_of(task_id)
        task = self._tasks[index]
        if not task.completed:
            task = replace(task, completed=True)
            self._tasks[index] = task
        logger.debug("Task completed id=%s", task.id)

        self._save(task)
        return task

    def remove(self, task_id: int) -> Task:
        index = self._index_of(task_id)
        task = self._tasks.pop(index)
        logger.debug("Task removed id=%s", task.id)

        self._save(task)
        return task
