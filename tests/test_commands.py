# tests/test_commands.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from tasklist.cli.commands import CommandRegistry, CommandResult, InvalidInputError, registry
from tasklist.core.state import AppState
from tasklist.tasks.task_errors import CapacityExceededError, NotFoundError, PersistenceError
from tasklist.tasks.task_models import Task
from tasklist.tasks.task_store import TaskStore

from .fakes import MemoryTaskFile


def _asker(*answers: str):
    queue = list(answers)
    prompts: list[str] = []

    def ask(prompt: str) -> str:
        prompts.append(prompt)
        return queue.pop(0)

    return ask, prompts


def test_command_registry_routes_by_key_name_and_alias(state) -> None:
    reg = CommandRegistry()
    called: list[str | None] = []

    def handler(state, arg):
        called.append(arg)
        return CommandResult(text="ok")

    reg.register("1", "first", handler, "First", aliases=["f"])

    assert reg.handle(state, "1").text == "ok"
    assert reg.handle(state, "FIRST x").text == "ok"
    assert reg.handle(state, "f  some text ").text == "ok"
    assert called == [None, "x", "some text"]


def test_command_registry_unknown_and_blank(state) -> None:
    reg = CommandRegistry()
    reg.register("1", "one", lambda s, a: CommandResult(text="1"), "One")
    reg.register("2", "two", lambda s, a: CommandResult(text="2"), "Two")

    assert reg.handle(state, "   ") is None

    result = reg.handle(state, "9")
    assert result is not None
    assert "Invalid choice" in result.text
    assert "between 1 and 2" in result.text
    assert isinstance(result.error, InvalidInputError)


def test_menu_lists_the_five_commands() -> None:
    menu = registry.build_menu("Task Manager")

    for line in (
        "1. View Tasks",
        "2. Add New Task",
        "3. Mark Task as Completed",
        "4. Remove Task",
        "5. Exit",
    ):
        assert line in menu
    assert [c.name for c in registry.commands] == ["view", "add", "complete", "remove", "exit"]


def test_view_empty_and_filled(state) -> None:
    empty = registry.handle(state, "1")
    assert empty is not None
    assert "No tasks currently in the list." in empty.text
    assert empty.tasks == []

    state.task_store.add("Buy milk")
    state.task_store.add("Walk dog")
    state.task_store.mark_complete(1)

    result = registry.handle(state, "view")
    assert result is not None
    assert [t.id for t in result.tasks] == [1, 2]
    assert "COMPLETED" in result.text
    assert "INCOMPLETE" in result.text
    assert "Walk dog" in result.text


def test_add_inline_and_prompted(state) -> None:
    result = registry.handle(state, "add Buy milk")
    assert result is not None
    assert result.ok
    assert result.text == "Success: Task #1 added."
    assert result.tasks == [Task(1, "Buy milk")]

    ask, prompts = _asker("Walk dog")
    result = registry.handle(state, "2", ask=ask)
    assert result is not None
    assert result.tasks == [Task(2, "Walk dog")]
    assert "max 20 chars" in prompts[0]


def test_add_without_asker_reports_usage(state) -> None:
    result = registry.handle(state, "2")

    assert result is not None
    assert result.text.startswith("Usage: add")
    assert state.task_store.count_tasks() == 0


def test_add_when_full_reports_capacity(state) -> None:
    for i in range(state.task_store.max_tasks):
        state.task_store.add(f"t{i}")

    result = registry.handle(state, "add one more")

    assert result is not None
    assert isinstance(result.error, CapacityExceededError)
    assert result.text == "Error: Task list is full (Max 5)."
    assert state.task_store.count_tasks() == 5


def test_add_when_full_does_not_prompt(settings) -> None:
    store = TaskStore(MemoryTaskFile(), max_tasks=1)
    store.add("only one")
    state = AppState(settings=settings, task_store=store)

    def ask(prompt: str) -> str:
        pytest.fail("should not ask for a description when the list is full")

    result = registry.handle(state, "2", ask=ask)

    assert result is not None
    assert isinstance(result.error, CapacityExceededError)
    assert result.text == "Error: Task list is full (Max 1)."
    assert store.count_tasks() == 1


def test_complete_and_remove_by_inline_id(state) -> None:
    state.task_store.add("Buy milk")
    state.task_store.add("Walk dog")

    done = registry.handle(state, "3 1")
    assert done is not None
    assert done.text == "Success: Task #1 ('Buy milk') marked as COMPLETED."

    removed = registry.handle(state, "remove 1")
    assert removed is not None
    assert removed.text == "Success: Removed Task #1 ('Buy milk')."
    assert [t.id for t in state.task_store.list_tasks()] == [2]

    again = registry.handle(state, "remove 1")
    assert again is not None
    assert isinstance(again.error, NotFoundError)
    assert again.text == "Error: Task with ID 1 not found."


def test_prompted_id_shows_the_list_first(state) -> None:
    state.task_store.add("Buy milk")
    emitted: list[str] = []
    ask, prompts = _asker("1")

    result = registry.handle(state, "3", ask=ask, emit=emitted.append)

    assert result is not None
    assert result.ok
    assert "Buy milk" in emitted[0]
    assert "COMPLETED" in prompts[0]


def test_prompted_id_is_skipped_when_list_is_empty(state) -> None:
    emitted: list[str] = []

    def ask(prompt: str) -> str:
        pytest.fail("should not prompt for an id when there are no tasks")

    result = registry.handle(state, "4", ask=ask, emit=emitted.append)

    assert result is not None
    assert result.text == ""
    assert "No tasks currently in the list." in emitted[0]


@pytest.mark.parametrize("line", ["3 abc", "4 1.5", "complete  "])
def test_non_numeric_id_is_invalid_input(state, line: str) -> None:
    state.task_store.add("a")
    ask, _ = _asker("not a number")

    result = registry.handle(state, line, ask=ask, emit=lambda _: None)

    assert result is not None
    assert isinstance(result.error, InvalidInputError)
    assert result.text == "Invalid input. Please enter a number."
    assert state.task_store.get(1).completed is False


def test_save_failure_is_reported_but_change_stays(settings) -> None:
    store = TaskStore(MemoryTaskFile(fail_saves=True))
    state = AppState(settings=settings, task_store=store)

    result = registry.handle(state, "add unsaved")

    assert result is not None
    assert isinstance(result.error, PersistenceError)
    assert "Task #1 was added in memory only" in result.text
    assert result.tasks == [Task(1, "unsaved")]
    assert store.count_tasks() == 1


def test_exit_requests_shutdown_without_io(state, settings) -> None:
    result = registry.handle(state, "5")

    assert result is not None
    assert result.should_exit is True
    assert str(settings.tasks_file) in result.text
    assert not settings.tasks_file.exists()


def test_commands_only_use_the_repo_protocol() -> None:
    class StaticRepo:
        path = SimpleNamespace()

        def list_tasks(self):
            return [Task(7, "from fake")]

    state = AppState(settings=SimpleNamespace(), task_store=StaticRepo())  # type: ignore[arg-type]

    result = registry.handle(state, "view")

    assert result is not None
    assert "from fake" in result.text
