# src/todo_list/tasks/task_api.py

from __future__ import annotations

"""
Task list view-model.

Holds the UI-local list state (filter, search, sort, selection, editing) and
implements the mutation operations. Every mutation writes the full record to
the backend first and then reloads the whole collection into the TaskStore;
nothing is patched locally.

Known gap: there is no request de-duplication. Two submits issued before the
first one resolves can create two records (create) or lose one of the edits
(update). Nothing here coalesces them.
"""

import logging
import time
from collections.abc import Callable, Sequence

from ..core.errors import (
    BackendError,
    NotAuthenticated,
    TodoError,
    ValidationError,
    ValidationReason,
    WriteFailed,
)
from ..core.ports import AuthProvider, ConfirmPrompt, Notifier, TaskBackend
from .pipeline import get_filtered_tasks
from .task_models import Category, SortMode, Task, TaskFields
from .task_store import TaskStore, task_path

logger = logging.getLogger(__name__)

DELETE_CONFIRM_TITLE = "Confirmation"
DELETE_CONFIRM_MESSAGE = "Are you sure you have done the task?"


class KeyFactory:
    """
    Creation keys: epoch milliseconds, strictly increasing per process.

    Two creates within the same millisecond get consecutive keys instead of
    overwriting each other.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        now_ms = int(self._clock() * 1000)
        self._last = max(now_ms, self._last + 1)
        return str(self._last)


class TaskListViewModel:
    def __init__(
        self,
        *,
        auth: AuthProvider,
        store: TaskStore,
        backend: TaskBackend,
        notifier: Notifier,
        confirm: ConfirmPrompt,
        key_factory: Callable[[], str] | None = None,
    ) -> None:
        self._auth = auth
        self._store = store
        self._backend = backend
        self._notifier = notifier
        self._confirm = confirm
        self._new_key = key_factory or KeyFactory()

        # UI-local state. Selection/editing are task keys, never row positions.
        self.filter_category: Category | None = None
        self.search_query: str = ""
        self.sort_mode: SortMode = SortMode.NONE
        self.selected_key: str | None = None
        self.editing_key: str | None = None

        self.last_error: TodoError | None = None

    @property
    def store(self) -> TaskStore:
        return self._store

    # ---- read path ----

    def get_filtered_tasks(
        self,
        filter_category: Category | None = None,
        search_query: str = "",
        sort_mode: SortMode = SortMode.NONE,
    ) -> list[Task]:
        return get_filtered_tasks(self._store.current(), filter_category, search_query, sort_mode)

    def visible_tasks(self) -> list[Task]:
        return self.get_filtered_tasks(self.filter_category, self.search_query, self.sort_mode)

    def row_key(self, row: int, rows: Sequence[Task] | None = None) -> str | None:
        """1-based row number of the visible list -> task key (None if out of range)."""
        rows = self.visible_tasks() if rows is None else rows
        if 1 <= row <= len(rows):
            return rows[row - 1].key
        return None

    # ---- UI-local state ----

    def set_filter(self, category: Category | None) -> None:
        # Picking the active category again clears the filter.
        if category is not None and category == self.filter_category:
            category = None
        self.filter_category = category

    def set_search(self, query: str) -> None:
        self.search_query = query or ""

    def set_sort(self, mode: SortMode) -> None:
        self.sort_mode = mode

    def select(self, key: str | None) -> None:
        self.selected_key = None if key == self.selected_key else key

    def begin_edit(self, key: str) -> TaskFields | None:
        task = self._store.get(key)
        if task is None:
            return None
        self.editing_key = key
        return TaskFields.from_task(task)

    def cancel_edit(self) -> None:
        self.editing_key = None

    def handle_auth_change(self, user_id: str | None) -> None:
        if user_id is None:
            logger.info("Signed out; dropping task snapshot")
            self._store.clear()
            self.selected_key = None
            self.editing_key = None

    # ---- helpers ----

    def _require_user(self) -> str:
        uid = self._auth.current_user()
        if not uid:
            raise NotAuthenticated()
        return uid

    def _fail(self, err: TodoError) -> None:
        self.last_error = err
        self._notifier.show_error(err.user_message)

    async def _write(self, uid: str, key: str, value: dict | None) -> None:
        try:
            await self._backend.set(task_path(uid, key), value)
        except BackendError as e:
            logger.warning("Task write failed key=%s: %s", key, e)
            raise WriteFailed() from e

    # ---- load ----

    async def refresh(self) -> bool:
        self.last_error = None
        try:
            await self._store.load(self._require_user())
        except TodoError as e:
            self._fail(e)
            return False
        return True

    # ---- mutations ----

    async def create(self, fields: TaskFields) -> Task | None:
        self.last_error = None
        try:
            uid = self._require_user()
            validated = fields.validated()
            task = validated.build(self._new_key())
            await self._write(uid, task.key, task.to_record())
        except TodoError as e:
            self._fail(e)
            return None

        logger.info("Task created key=%s", task.key)
        self._notifier.show_success("Task added successfully!")
        await self.refresh()
        return task

    async def update(self, key: str, fields: TaskFields) -> Task | None:
        """Replace the whole record stored under `key`; completion state is kept."""
        self.last_error = None
        try:
            uid = self._require_user()
            validated = fields.validated()
            existing = self._store.get(key)
            if existing is None:
                raise ValidationError(ValidationReason.TASK_NOT_FOUND)
            task = validated.build(key, is_completed=existing.is_completed)
            await self._write(uid, key, task.to_record())
        except TodoError as e:
            self._fail(e)
            return None

        logger.info("Task updated key=%s", key)
        if self.editing_key == key:
            self.editing_key = None
        self._notifier.show_success("Task updated successfully!")
        await self.refresh()
        return task

    async def toggle_completion(self, task: Task | str) -> Task | None:
        self.last_error = None
        try:
            uid = self._require_user()
            if isinstance(task, str):
                found = self._store.get(task)
                if found is None:
                    raise ValidationError(ValidationReason.TASK_NOT_FOUND)
                task = found
            toggled = task.toggled()
            await self._write(uid, toggled.key, toggled.to_record())
        except TodoError as e:
            self._fail(e)
            return None

        logger.info("Task key=%s completed=%s", toggled.key, toggled.is_completed)
        await self.refresh()
        return toggled

    async def delete(self, key: str) -> bool:
        """
        Hard-delete a task after explicit confirmation.

        Unknown keys are a no-op: nothing is asked, written or raised.
        """
        self.last_error = None
        try:
            uid = self._require_user()
        except TodoError as e:
            self._fail(e)
            return False

        if self._store.get(key) is None:
            logger.debug("Delete ignored: key=%s not in snapshot", key)
            return False

        if await self._confirm(DELETE_CONFIRM_TITLE, DELETE_CONFIRM_MESSAGE) is not True:
            logger.debug("Delete cancelled key=%s", key)
            return False

        try:
            await self._write(uid, key, None)
        except TodoError as e:
            self._fail(e)
            return False

        logger.info("Task deleted key=%s", key)
        if self.selected_key == key:
            self.selected_key = None
        if self.editing_key == key:
            self.editing_key = None
        await self.refresh()
        return True
