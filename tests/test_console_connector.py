# tests/test_console_connector.py

from __future__ import annotations

import pytest

from todo_list.connectors.console_connector import ConsoleConfirm, run_console_loop


def scripted_input(lines: list[str]):
    it = iter(lines)

    def _input(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return _input


@pytest.mark.asyncio
async def test_console_bare_text_is_quick_add(state, capsys) -> None:
    await state.auth.sign_in("demo@local", "pw")

    await run_console_loop(state, input_fn=scripted_input(["Buy milk #shopping", "", "/exit", "/add never"]))

    out = capsys.readouterr().out
    assert "Buy milk" in out
    assert "[OK] Task added successfully!" in out
    assert [t.name for t in state.store.current()] == ["Buy milk"]


@pytest.mark.asyncio
async def test_console_ends_on_eof(state, capsys) -> None:
    await run_console_loop(state, input_fn=scripted_input(["/status"]))
    assert "(signed out)" in capsys.readouterr().out


@pytest.mark.asyncio
@pytest.mark.parametrize(("answer", "expected"), [("y", True), (" YES ", True), ("n", False), ("", False)])
async def test_console_confirm_answers(answer, expected) -> None:
    confirm = ConsoleConfirm(input_fn=lambda prompt: answer)
    assert await confirm("Confirmation", "Are you sure you have done the task?") is expected


@pytest.mark.asyncio
async def test_console_confirm_eof_is_no() -> None:
    confirm = ConsoleConfirm(input_fn=scripted_input([]))
    assert await confirm("Confirmation", "Delete?") is False
