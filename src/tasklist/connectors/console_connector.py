# src/tasklist/connectors/console_connector.py

from __future__ import annotations

import logging

from ..cli.commands import CommandResult
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _menu_title(state: AppState) -> str:
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "tasklist"))
    return f"{app_name} - Task Manager"


def _ask(prompt: str) -> str:
    return input(prompt)


def _emit(text: str) -> None:
    print(text, flush=True)


def run_console_loop(state: AppState) -> None:
    """
    Menu loop: show menu, read one choice, run it to completion, repeat.

    Ends on the exit command, EOF or Ctrl+C (at the menu or at any prompt).
    """
    logger.info("Console connector started (file=%s).", state.task_store.path)
    title = _menu_title(state)

    while True:
        print()
        print(command_registry.build_menu(title))

        try:
            choice = input("Enter your choice: ")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        result: CommandResult | None
        try:
            result = command_registry.handle(state, choice, ask=_ask, emit=_emit)
        except EOFError:
            logger.info("Console EOF received at prompt, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt at prompt, exiting.")
            print()
            break
        except Exception:
            logger.exception("Command handler crashed.")
            print("Internal error while handling a command.")
            continue

        if result is None:
            continue

        if result.text:
            print(result.text)

        if result.should_exit:
            logger.info("Console exit command received.")
            break

    logger.info("Console connector finished.")
