# src/todo_list/tasks/task_store.py

from __future__ import annotations

import logging
from typing import Any

from ..core.errors import BackendError, FetchFailed, NotAuthenticated
from ..core.ports import TaskBackend
from .task_models import Task

logger = logging.getLogger(__name__)


def tasks_path(user_id: str) -> str:
    return f"Users/{user_id}/Tasks"


def task_path(user_id: str, key: str) -> str:
    return f"{tasks_path(user_id)}/{key}"


class TaskStore:
    """
    Last fetched snapshot of the signed-in user's tasks.

    The snapshot is only ever replaced wholesale (after a successful load) or
    dropped (sign-out). There is no local patching: mutations write to the
    backend and then call load() again.

    Records written by older clients may lack category/priority; those are
    repaired here during load so consumers never see missing fields.

    Task order is the order the backend returned them in; nothing re-sorts it.
    """

    def __init__(self, backend: TaskBackend) -> None:
        self._backend = backend
        self._tasks: tuple[Task, ...] = ()
        self._user_id: str | None = None

    @property
    def user_id(self) -> str | None:
        """Owner of the held snapshot (None before the first load)."""
        return self._user_id

    def current(self) -> tuple[Task, ...]:
        return self._tasks

    def get(self, key: str) -> Task | None:
        for t in self._tasks:
            if t.key == key:
                return t
        return None

    def clear(self) -> None:
        self._tasks = ()
        self._user_id = None

    @staticmethod
    def _normalize(raw: Any) -> list[Task]:
        if raw is None:
            return []

        items: list[tuple[str, Any]]
        if isinstance(raw, dict):
            items = [(str(k), v) for k, v in raw.items()]
        elif isinstance(raw, list):
            # The realtime DB returns an array when every key is a small integer.
            items = [(str(i), v) for i, v in enumerate(raw) if v is not None]
        else:
            logger.warning("Unexpected tasks snapshot type %s; treating as empty", type(raw).__name__)
            return []

        tasks: list[Task] = []
        for key, value in items:
            if not isinstance(value, dict):
                logger.warning("Skipping malformed task record key=%s", key)
                continue
            tasks.append(Task.from_record(key, value))
        return tasks

    async def load(self, user_id: str | None) -> tuple[Task, ...]:
        if not user_id:
            raise NotAuthenticated()

        try:
            raw = await self._backend.get(tasks_path(user_id))
        except BackendError as e:
            logger.warning("Task fetch failed user=%s: %s", user_id, e)
            raise FetchFailed() from e

        if raw is None:
            logger.info("No tasks available for user=%s", user_id)

        self._tasks = tuple(self._normalize(raw))
        self._user_id = user_id
        logger.info("TaskStore loaded user=%s total=%d", user_id, len(self._tasks))
        return self._tasks
