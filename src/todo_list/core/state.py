# src/todo_list/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..account.service import AccountService
from ..tasks.task_api import TaskListViewModel
from ..tasks.task_store import TaskStore
from .notify import NotificationCenter
from .ports import AccountAuth, ProfileBackend, TaskBackend


@dataclass
class AppState:
    # Settings object (config.Settings or a test namespace).
    settings: Any

    auth: AccountAuth
    backend: TaskBackend
    profiles: ProfileBackend
    notices: NotificationCenter
    store: TaskStore
    tasks: TaskListViewModel
    account: AccountService

    # Rows of the last rendered list; console row numbers refer to these.
    last_rows: list[Any] = field(default_factory=list)
