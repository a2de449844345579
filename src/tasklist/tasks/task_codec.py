# tasks/task_codec.py

"""
Line-oriented task file codec.

File layout (UTF-8 text):

    <task_count>
    <next_id>
    <id>|<completed:0|1>|<description>
    ... (task_count record lines)

Decoding is tolerant:
- missing/unreadable file -> empty list, next_id = 1
- malformed header values -> count 0 / next_id 1 (independently)
- first missing or corrupt record -> stop, keep the records parsed so far
- lines are decoded one at a time, so a record that is not valid UTF-8 is
  just a corrupt record

Encoding always rewrites the whole file.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

from .task_errors import MalformedRecordError, PersistenceError
from .task_models import LoadResult, Task, TaskListSnapshot

logger = logging.getLogger(__name__)

RECORD_SEP = "|"
HEADER_LINES = 2

DEFAULT_MAX_TASKS = 100
DEFAULT_MAX_DESCRIPTION_LEN = 100


def _split_lines(data: str | bytes) -> list[str] | list[bytes]:
    if isinstance(data, bytes):
        raw_lines = [ln.rstrip(b"\r") for ln in data.split(b"\n")]
        if raw_lines and raw_lines[-1] == b"":
            raw_lines.pop()
        return raw_lines
    lines = [ln.rstrip("\r") for ln in data.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _line_text(raw: str | bytes, line_no: int) -> str:
    """Decode one raw line; a line that is not UTF-8 is a malformed record."""
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise MalformedRecordError(line_no, raw.decode("utf-8", "replace"), "not valid UTF-8") from None


def _parse_header_int(lines: list[str] | list[bytes], index: int, *, name: str, default: int) -> int:
    if index >= len(lines):
        logger.warning("Task file has no %s line; assuming %d.", name, default)
        return default
    try:
        raw = _line_text(lines[index], index + 1).strip()
    except MalformedRecordError:
        logger.warning("Undecodable %s line in task file; assuming %d.", name, default)
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Malformed %s line %r in task file; assuming %d.", name, raw, default)
        return default


def _parse_field_int(raw: str) -> int | None:
    raw = raw.strip()
    if not raw or not raw.isascii() or not raw.isdigit():
        return None
    return int(raw)


def format_record(task: Task) -> str:
    flag = "1" if task.completed else "0"
    return f"{task.id}{RECORD_SEP}{flag}{RECORD_SEP}{task.description}"


def parse_record(line: str, *, line_no: int = 0, max_description_len: int | None = None) -> Task:
    """
    Parse one `id|completed|description` record.

    Only the first two separators split fields; any further `|` belongs to the
    description. Raises MalformedRecordError on a wrong field count, a
    non-positive id or a flag other than 0/1.
    """
    parts = line.split(RECORD_SEP, 2)
    if len(parts) != 3:
        raise MalformedRecordError(line_no, line, "expected id|completed|description")

    raw_id, raw_flag, description = parts

    task_id = _parse_field_int(raw_id)
    if task_id is None or task_id < 1:
        raise MalformedRecordError(line_no, line, "id must be a positive integer")

    flag = _parse_field_int(raw_flag)
    if flag not in (0, 1):
        raise MalformedRecordError(line_no, line, "completed flag must be 0 or 1")

    if max_description_len is not None and len(description) > max_description_len:
        description = description[:max_description_len]

    return Task(id=task_id, description=description, completed=flag == 1)


def encode_text(snapshot: TaskListSnapshot) -> str:
    lines = [str(len(snapshot.tasks)), str(snapshot.next_id)]
    lines.extend(format_record(t) for t in snapshot.tasks)
    return "\n".join(lines) + "\n"


def decode_text(
    text: str | bytes,
    *,
    max_tasks: int = DEFAULT_MAX_TASKS,
    max_description_len: int | None = DEFAULT_MAX_DESCRIPTION_LEN,
) -> LoadResult:
    lines = _split_lines(text)

    declared = _parse_header_int(lines, 0, name="task count", default=0)
    next_id = _parse_header_int(lines, 1, name="next id", default=1)

    if declared < 0:
        logger.warning("Negative task count %d in task file; assuming 0.", declared)
        declared = 0
    if next_id < 1:
        logger.warning("Non-positive next id %d in task file; assuming 1.", next_id)
        next_id = 1
    if declared > max_tasks:
        logger.warning(
            "Task file declares %d tasks but the limit is %d; loading at most %d.",
            declared,
            max_tasks,
            max_tasks,
        )
        declared = max_tasks

    tasks: list[Task] = []
    seen: set[int] = set()
    corrupt = 0

    for i in range(declared):
        index = HEADER_LINES + i
        line_no = index + 1

        if index >= len(lines):
            logger.warning(
                "Task file ended early: expected %d tasks, found %d. Keeping %d.",
                declared,
                i,
                i,
            )
            corrupt += 1
            break

        try:
            line = _line_text(lines[index], line_no)
            task = parse_record(line, line_no=line_no, max_description_len=max_description_len)
            if task.id in seen:
                raise MalformedRecordError(line_no, line, f"duplicate id {task.id}")
        except MalformedRecordError as exc:
            logger.warning("Corrupt data in task file, skipping task %d and the rest (%s).", i + 1, exc)
            corrupt += 1
            break

        seen.add(task.id)
        tasks.append(task)

    if tasks:
        highest = max(seen)
        if next_id <= highest:
            logger.warning("Task file next id %d is not above id %d; using %d.", next_id, highest, highest + 1)
            next_id = highest + 1

    return LoadResult(
        snapshot=TaskListSnapshot(tasks=tuple(tasks), next_id=next_id),
        loaded=len(tasks),
        corrupt=corrupt,
        found=True,
    )


class TaskFile:
    """
    The task file on disk.

    load() never fails: an absent or unreadable file yields an empty list.
    save() replaces the file atomically and raises PersistenceError on failure.
    """

    def __init__(
        self,
        path: str | Path = "tasks.txt",
        *,
        max_tasks: int = DEFAULT_MAX_TASKS,
        max_description_len: int | None = DEFAULT_MAX_DESCRIPTION_LEN,
    ) -> None:
        self._path = Path(path)
        self._max_tasks = max_tasks
        self._max_description_len = max_description_len

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> LoadResult:
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            logger.info("Task file %s not found. Starting with an empty list.", self._path)
            return LoadResult()
        except OSError as exc:
            logger.warning("Could not read task file %s (%s). Starting with an empty list.", self._path, exc)
            return LoadResult(found=True)

        # Decoded line by line: a bad byte only invalidates its own record.
        result = decode_text(
            data,
            max_tasks=self._max_tasks,
            max_description_len=self._max_description_len,
        )
        logger.info("Loaded %d tasks from %s.", result.loaded, self._path)
        return result

    def save(self, snapshot: TaskListSnapshot) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(encode_text(snapshot), "utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            logger.debug("Could not open %s for writing: %s", self._path, exc)
            raise PersistenceError(self._path, str(exc)) from exc

        logger.debug("Saved %d tasks to %s (next_id=%d).", len(snapshot.tasks), self._path, snapshot.next_id)
