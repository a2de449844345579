# src/tasklist/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..core.state import AppState
from ..tasks.task_errors import CapacityExceededError, NotFoundError, PersistenceError
from ..tasks.task_models import Task
from .render import render_menu, render_task_table

CommandEmitter = Callable[[str], None]
CommandAsker = Callable[[str], str]

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """User input that cannot be turned into a command argument."""


@dataclass(slots=True)
class CommandResult:
    text: str
    tasks: list[Task] = field(default_factory=list)
    error: Exception | None = None
    should_exit: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


CommandHandler = Callable[[AppState, str | None], CommandResult]
CommandCheck = Callable[[AppState], CommandResult | None]


@dataclass(frozen=True, slots=True)
class Command:
    key: str
    name: str
    label: str
    handler: CommandHandler
    # Asked for when the argument is not given inline. May use {max_description_len}.
    prompt: str | None = None
    # Show the task list before prompting; skip the prompt when it is empty.
    preview_tasks: bool = False
    # Runs before any prompt; a returned result ends the command.
    precheck: CommandCheck | None = None


class CommandRegistry:
    """Menu command registry used by connectors (1 / view, 2 / add, ...)."""

    def __init__(self) -> None:
        self._commands: list[Command] = []
        self._lookup: dict[str, Command] = {}

    def register(
        self,
        key: str,
        name: str,
        handler: CommandHandler,
        label: str,
        *,
        prompt: str | None = None,
        preview_tasks: bool = False,
        precheck: CommandCheck | None = None,
        aliases: list[str] | None = None,
    ) -> Command:
        command = Command(
            key=key,
            name=name.lower(),
            label=label,
            handler=handler,
            prompt=prompt,
            preview_tasks=preview_tasks,
            precheck=precheck,
        )
        self._commands.append(command)
        for token in [key, name, *(aliases or [])]:
            self._lookup[token.lower()] = command
        return command

    @property
    def commands(self) -> list[Command]:
        return list(self._commands)

    def resolve(self, line: str) -> tuple[Command | None, str | None]:
        """Split "add Buy milk" / "3 2" into (command, inline argument)."""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return None, None
        arg = parts[1] if len(parts) > 1 else None
        return self._lookup.get(parts[0].lower()), arg

    def handle(
        self,
        state: AppState,
        line: str,
        *,
        ask: CommandAsker | None = None,
        emit: CommandEmitter | None = None,
    ) -> CommandResult | None:
        """
        Handle a menu choice like "2" or "add Buy milk".
        Returns a result, or None for blank input.

        Missing arguments are requested through `ask`; EOFError/KeyboardInterrupt
        raised by `ask` propagate to the caller.
        """
        if not line.strip():
            return None

        command, arg = self.resolve(line)
        if command is None:
            choice = line.strip().split()[0]
            return CommandResult(
                text=f"Invalid choice {choice!r}. {self.choice_hint()}",
                error=InvalidInputError(choice),
            )

        if command.precheck is not None:
            refused = command.precheck(state)
            if refused is not None:
                return refused

        if command.prompt is not None and arg is None:
            if ask is None:
                return CommandResult(
                    text=f"Usage: {command.name} <argument>",
                    error=InvalidInputError(command.name),
                )

            if command.preview_tasks:
                tasks = state.task_store.list_tasks()
                if emit is not None:
                    emit(render_task_table(tasks))
                if not tasks:
                    return CommandResult(text="")

            arg = ask(command.prompt.format(max_description_len=state.task_store.max_description_len))

        return command.handler(state, arg)

    def choice_hint(self) -> str:
        keys = [c.key for c in self._commands]
        if not keys:
            return "No commands available."
        return f"Please enter a number between {keys[0]} and {keys[-1]}."

    def build_menu(self, title: str) -> str:
        return render_menu(title, [(c.key, c.label) for c in self._commands])


registry = CommandRegistry()


def _parse_task_id(arg: str | None) -> int:
    raw = (arg or "").strip()
    try:
        return int(raw)
    except ValueError:
        raise InvalidInputError("Invalid input. Please enter a number.") from None


def _unsaved(exc: PersistenceError, done: str) -> CommandResult:
    tasks = [exc.task] if exc.task is not None else []
    return CommandResult(
        text=f"Warning: {done} in memory only, it could not be saved. {exc}",
        tasks=tasks,
        error=exc,
    )


def check_room(state: AppState) -> CommandResult | None:
    store = state.task_store
    if store.is_full:
        exc = CapacityExceededError(store.max_tasks)
        return CommandResult(text=f"Error: {exc}", error=exc)
    return None


def cmd_view(state: AppState, arg: str | None) -> CommandResult:
    tasks = state.task_store.list_tasks()
    return CommandResult(text=render_task_table(tasks), tasks=tasks)


def cmd_add(state: AppState, arg: str | None) -> CommandResult:
    try:
        task = state.task_store.add(arg or "")
    except CapacityExceededError as exc:
        return CommandResult(text=f"Error: {exc}", error=exc)
    except PersistenceError as exc:
        tid = exc.task.id if exc.task is not None else "?"
        return _unsaved(exc, f"Task #{tid} was added")
    return CommandResult(text=f"Success: Task #{task.id} added.", tasks=[task])


def cmd_complete(state: AppState, arg: str | None) -> CommandResult:
    try:
        task_id = _parse_task_id(arg)
        task = state.task_store.mark_complete(task_id)
    except InvalidInputError as exc:
        return CommandResult(text=str(exc), error=exc)
    except NotFoundError as exc:
        return CommandResult(text=f"Error: {exc}", error=exc)
    except PersistenceError as exc:
        tid = exc.task.id if exc.task is not None else "?"
        return _unsaved(exc, f"Task #{tid} was marked as COMPLETED")
    return CommandResult(
        text=f"Success: Task #{task.id} ('{task.description}') marked as COMPLETED.",
        tasks=[task],
    )


def cmd_remove(state: AppState, arg: str | None) -> CommandResult:
    try:
        task_id = _parse_task_id(arg)
        task = state.task_store.remove(task_id)
    except InvalidInputError as exc:
        return CommandResult(text=str(exc), error=exc)
    except NotFoundError as exc:
        return CommandResult(text=f"Error: {exc}", error=exc)
    except PersistenceError as exc:
        tid = exc.task.id if exc.task is not None else "?"
        return _unsaved(exc, f"Task #{tid} was removed")
    return CommandResult(
        text=f"Success: Removed Task #{task.id} ('{task.description}').",
        tasks=[task],
    )


def cmd_exit(state: AppState, arg: str | None) -> CommandResult:
    # Every mutation already wrote the file; exiting does no I/O.
    return CommandResult(
        text=f"Exiting Task Manager. Tasks are saved in {state.task_store.path}.",
        should_exit=True,
    )


registry.register("1", "view", cmd_view, label="View Tasks", aliases=["list", "ls"])
registry.register(
    "2",
    "add",
    cmd_add,
    label="Add New Task",
    prompt="Enter task description (max {max_description_len} chars):\n> ",
    precheck=check_room,
)
registry.register(
    "3",
    "complete",
    cmd_complete,
    label="Mark Task as Completed",
    prompt="Enter the ID of the task to mark as COMPLETED: ",
    preview_tasks=True,
    aliases=["done"],
)
registry.register(
    "4",
    "remove",
    cmd_remove,
    label="Remove Task",
    prompt="Enter the ID of the task to REMOVE: ",
    preview_tasks=True,
    aliases=["rm", "delete"],
)
registry.register("5", "exit", cmd_exit, label="Exit", aliases=["quit", "q"])
