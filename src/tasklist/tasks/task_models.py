# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class TaskStatus(StrEnum):
    """Display status derived from the persisted completion flag."""

    INCOMPLETE = "INCOMPLETE"
    COMPLETED = "COMPLETED"

    @classmethod
    def from_flag(cls, completed: bool) -> TaskStatus:
        return cls.COMPLETED if completed else cls.INCOMPLETE


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    description: str
    completed: bool = False

    @property
    def status(self) -> TaskStatus:
        return TaskStatus.from_flag(self.completed)


@dataclass(frozen=True, slots=True)
class TaskListSnapshot:
    """
    Full persisted state of a task list: tasks in insertion order + id allocator.

    Value-comparable, so two snapshots are equal when they hold the same tasks
    in the same order with the same next_id.
    """

    tasks: tuple[Task, ...] = ()
    next_id: int = 1


@dataclass(slots=True)
class LoadResult:
    snapshot: TaskListSnapshot = field(default_factory=TaskListSnapshot)
    loaded: int = 0
    corrupt: int = 0
    found: bool = False
