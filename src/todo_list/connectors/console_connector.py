# src/todo_list/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_list
from ..core.notify import Notice, NoticeKind
from ..core.state import AppState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]

YES_ANSWERS = ("y", "yes")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def print_notice(notice: Notice) -> None:
    tag = "OK" if notice.kind == NoticeKind.SUCCESS else "ERROR"
    _print_ts(f"[{tag}] {notice.message}")


class ConsoleConfirm:
    """
    Yes/No prompt for destructive actions. Anything but an explicit yes
    (including EOF / Ctrl+C) is a No.
    """

    def __init__(self, input_fn: InputFn = input) -> None:
        self._input = input_fn

    async def __call__(self, title: str, message: str) -> bool:
        try:
            answer = await asyncio.to_thread(self._input, f"[{title}] {message} (y/N): ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in YES_ANSWERS


async def run_console_loop(state: AppState, *, input_fn: InputFn = input) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /help for commands, /login to sign in. Use /exit to quit.\n")

    state.notices.set_sink(print_notice)

    def emit(text: str) -> None:
        _print_ts(text)

    # Signed in already (offline demo or restored session): show the list right away.
    if state.auth.current_user():
        await state.tasks.refresh()
        print(render_list(state), flush=True)

    while True:
        try:
            user_input = (await asyncio.to_thread(input_fn, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a quick add.
            user_input = f"/add {user_input}"

        try:
            reply = await command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            print(reply, flush=True)

    state.notices.set_sink(None)
    logger.info("Console connector finished.")
