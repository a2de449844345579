# src/tasklist/cli/render.py

"""Plain-text rendering of the task table and the main menu."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..tasks.task_models import Task, TaskStatus

MENU_WIDTH = 34
STATUS_WIDTH = max(len(s.value) for s in TaskStatus)


def render_task_table(tasks: Sequence[Task]) -> str:
    lines = ["--- Task List ---"]
    if not tasks:
        lines.append("No tasks currently in the list.")
        lines.append("-----------------")
        return "\n".join(lines)

    id_width = max(2, max(len(str(t.id)) for t in tasks))
    desc_width = max(len("Description"), max(len(t.description) for t in tasks))

    lines.append(f" {'ID':>{id_width}} | {'Status':<{STATUS_WIDTH}} | Description")
    lines.append(f"{'-' * (id_width + 2)}|{'-' * (STATUS_WIDTH + 2)}|{'-' * (desc_width + 1)}")
    for t in tasks:
        lines.append(f" {t.id:>{id_width}} | {t.status.value:<{STATUS_WIDTH}} | {t.description}")
    lines.append("-----------------")
    return "\n".join(lines)


def render_menu(title: str, entries: Iterable[tuple[str, str]]) -> str:
    """entries: (key, label) pairs in display order."""
    lines = [
        "=" * MENU_WIDTH,
        title.center(MENU_WIDTH).rstrip(),
        "=" * MENU_WIDTH,
    ]
    lines.extend(f"{key}. {label}" for key, label in entries)
    lines.append("-" * MENU_WIDTH)
    return "\n".join(lines)
