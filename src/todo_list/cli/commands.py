# src/todo_list/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace

from ..core.errors import TodoError
from ..core.state import AppState
from ..tasks.task_models import (
    Category,
    Priority,
    SortMode,
    Task,
    TaskFields,
    format_due_date,
    parse_user_date,
    priority_label,
)

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console host (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args, emit)
        except TodoError as e:
            # Input parsing errors raised before the view-model is reached.
            return e.user_message

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing / rendering helpers ----

def parse_task_input(args: list[str], base: TaskFields | None = None) -> TaskFields:
    """
    "<name> [| details] [#category] [!priority] [@YYYY-MM-DD|@none]"

    Tokens not given keep the values of `base` (used by /edit).
    """
    fields = base or TaskFields(name="")
    words: list[str] = []
    for token in args:
        if token.startswith("#") and len(token) > 1:
            fields = replace(fields, category=Category.parse(token[1:]))
        elif token.startswith("!") and len(token) > 1:
            fields = replace(fields, priority=int(Priority.parse(token[1:])))
        elif token.startswith("@") and len(token) > 1:
            fields = replace(fields, due_date=parse_user_date(token[1:]))
        else:
            words.append(token)

    text = " ".join(words)
    if text.strip():
        name, sep, details = text.partition("|")
        # "| details" alone only changes the details.
        if name.strip():
            fields = replace(fields, name=name.strip())
        if sep:
            fields = replace(fields, details=details.strip())
    return fields


def render_task(row: int, task: Task, *, selected: bool = False) -> str:
    mark = "[x]" if task.is_completed else "[ ]"
    meta = [task.category.value, priority_label(task.priority)]
    if task.due_date is not None:
        meta.append(f"due {(format_due_date(task.due_date) or '')[:10]}")
    line = f"{'>' if selected else ' '} {row}. {mark} {task.name}  ({', '.join(meta)})"
    if selected and task.details:
        line += f"\n      {task.details}"
    return line


def render_list(state: AppState) -> str:
    vm = state.tasks
    rows = vm.visible_tasks()
    state.last_rows = rows

    header = [
        f"Filter: {vm.filter_category.value if vm.filter_category else 'All'}",
        f"Sort: {vm.sort_mode.label}",
    ]
    if vm.search_query.strip():
        header.append(f"Search: {vm.search_query!r}")
    lines = ["Tasks: (" + " | ".join(header) + ")"]
    if not rows:
        lines.append("  (no tasks)")
    for i, t in enumerate(rows, start=1):
        lines.append(render_task(i, t, selected=(t.key == vm.selected_key)))
    return "\n".join(lines)


def _row_key(state: AppState, args: list[str]) -> str | None:
    if not args:
        return None
    try:
        row = int(args[0])
    except ValueError:
        return None
    return state.tasks.row_key(row, state.last_rows or None)


def _outcome(state: AppState, fallback: str = "") -> str:
    err = state.tasks.last_error
    return err.user_message if err is not None else fallback


# ---- commands ----

async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    vm = state.tasks
    user = state.auth.current_user() or "(signed out)"
    backend = getattr(state.settings, "backend", "memory")
    return (
        "Status:\n"
        f"  User: {user}\n"
        f"  Backend: {backend}\n"
        f"  Tasks loaded: {len(state.store.current())}\n"
        f"  Filter: {vm.filter_category.value if vm.filter_category else 'All'}\n"
        f"  Search: {vm.search_query!r}\n"
        f"  Sort: {vm.sort_mode.label}"
    )


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /login <email> <password>"
    uid = await state.account.sign_in(args[0], args[1])
    if uid is None:
        return ""
    await state.tasks.refresh()
    return render_list(state)


async def cmd_signup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /signup <email> <password>"
    uid = await state.account.sign_up(args[0], args[1])
    return "" if uid is None else "Verify your email, then /login."


async def cmd_logout(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    await state.account.sign_out()
    state.last_rows = []
    return "Logged out."


async def cmd_profile(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    profile = await state.account.load_profile()
    if profile is None:
        return ""
    return (
        "Profile:\n"
        f"  Email: {profile.email or 'N/A'}\n"
        f"  Email Verification: {'Verified' if profile.email_verified else 'Not Verified'}\n"
        f"  Phone Verification: {'Verified' if profile.phone_verified else 'Not Verified'}"
    )


async def cmd_passwd(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /passwd <new password> <confirm password>"
    await state.account.change_password(args[0], args[1])
    return ""


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return render_list(state)


async def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not await state.tasks.refresh():
        return _outcome(state)
    return render_list(state)


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add Buy milk | two bottles #shopping !high @2025-06-01
    """
    if not args:
        return "Usage: /add <name> [| details] [#category] [!low|medium|high] [@YYYY-MM-DD]"
    task = await state.tasks.create(parse_task_input(args))
    if task is None:
        return ""
    return render_list(state)


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /edit <row> [new name] [| details] [#category] [!priority] [@date|@none]
    """
    key = _row_key(state, args)
    if key is None:
        return "Usage: /edit <row> [name] [| details] [#category] [!priority] [@YYYY-MM-DD]"

    vm = state.tasks
    current = vm.begin_edit(key)
    if current is None:
        return "Task no longer exists."
    try:
        fields = parse_task_input(args[1:], base=current)
    except TodoError:
        vm.cancel_edit()
        raise

    task = await vm.update(key, fields)
    if task is None:
        vm.cancel_edit()
        return ""
    return render_list(state)


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    key = _row_key(state, args)
    if key is None:
        return "Usage: /done <row>"
    task = await state.tasks.toggle_completion(key)
    if task is None:
        return ""
    return render_list(state)


async def cmd_del(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    key = _row_key(state, args)
    if key is None:
        return "Usage: /del <row>"
    if not await state.tasks.delete(key):
        return _outcome(state, "Nothing deleted.")
    return render_list(state)


async def cmd_select(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    key = _row_key(state, args)
    if key is None:
        return "Usage: /select <row>"
    state.tasks.select(key)
    return render_list(state)


async def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /filter           -> show all
    /filter all       -> show all
    /filter work      -> only Work (again to clear)
    """
    vm = state.tasks
    if not args or args[0].lower() == "all":
        vm.set_filter(None)
    else:
        vm.set_filter(Category.parse(args[0]))
    return render_list(state)


async def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.tasks.set_search(" ".join(args))
    return render_list(state)


async def cmd_sort(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.tasks.set_sort(SortMode.parse(args[0] if args else "none"))
    return render_list(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show user, backend and list settings.")
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register("signup", cmd_signup, help_text="Create account: /signup <email> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("profile", cmd_profile, help_text="Show profile and verification status.")
registry.register("passwd", cmd_passwd, help_text="Change password: /passwd <new> <confirm>.")
registry.register("list", cmd_list, help_text="Show tasks (filtered, searched, sorted).", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the backend.")
registry.register(
    "add", cmd_add, help_text="Add task: /add <name> [| details] [#category] [!priority] [@date]."
)
registry.register("edit", cmd_edit, help_text="Edit task: /edit <row> [fields as in /add].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <row>.")
registry.register("del", cmd_del, help_text="Delete task (asks first): /del <row>.", aliases=["rm"])
registry.register("select", cmd_select, help_text="Toggle selection / show details: /select <row>.")
registry.register("filter", cmd_filter, help_text="Filter by category: /filter <category|all>.")
registry.register("search", cmd_search, help_text="Search name/details: /search <text> (empty clears).")
registry.register("sort", cmd_sort, help_text="Sort by priority: /sort none | asc | desc.")
