# src/todo_list/backends/memory.py

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

from ..core.ports import AuthListener

logger = logging.getLogger(__name__)


def _split(path: str) -> list[str]:
    return [p for p in (path or "").split("/") if p]


class InMemoryTaskBackend:
    """
    Offline stand-in for the realtime database, used for the demo mode and tests.

    Same contract as the Firebase adapter:
    - get(path) returns a deep copy of the subtree, or None if absent
    - set(path, None) deletes and prunes parents left empty
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._root: dict[str, Any] = copy.deepcopy(data) if data else {}

    async def get(self, path: str) -> Any | None:
        node: Any = self._root
        for part in _split(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return copy.deepcopy(node)

    async def set(self, path: str, value: Any | None) -> None:
        parts = _split(path)
        if not parts:
            raise ValueError("path is required")

        if value is None:
            self._delete(parts)
            return

        node = self._root
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = copy.deepcopy(value)
        logger.debug("set %s", path)

    def _delete(self, parts: list[str]) -> None:
        trail: list[tuple[dict[str, Any], str]] = []
        node: Any = self._root
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return
            trail.append((node, part))
            node = node[part]

        parent, last = trail.pop()
        del parent[last]
        # Realtime DB semantics: a node with no children does not exist.
        while trail and not parent:
            parent, last = trail.pop()
            del parent[last]
        logger.debug("delete %s", "/".join(parts))


class InMemoryProfileBackend:
    """Document store keyed by (collection, doc_id)."""

    def __init__(self) -> None:
        self._docs: dict[tuple[str, str], dict[str, Any]] = {}

    async def get_doc(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self._docs.get((collection, doc_id))
        return dict(doc) if doc is not None else None

    async def set_doc(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        key = (collection, doc_id)
        if merge and key in self._docs:
            self._docs[key].update(data)
        else:
            self._docs[key] = dict(data)


class LocalAuthProvider:
    """
    Auth provider for the offline demo: any non-empty email signs in,
    the user id is derived from the email (or fixed via `user_id`).
    """

    def __init__(self, user_id: str | None = None) -> None:
        self._fixed_user_id = user_id
        self._user_id: str | None = None
        self._email: str | None = None
        self._listeners: list[AuthListener] = []

    def current_user(self) -> str | None:
        return self._user_id

    @property
    def email(self) -> str | None:
        return self._email

    @property
    def email_verified(self) -> bool:
        return self._user_id is not None

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _emit(self) -> None:
        for cb in list(self._listeners):
            try:
                cb(self._user_id)
            except Exception:
                logger.exception("Auth listener failed")

    async def sign_up(self, email: str, password: str) -> str:
        return self._uid_for(email)

    async def sign_in(self, email: str, password: str) -> str:
        self._user_id = self._uid_for(email)
        self._email = email
        self._emit()
        return self._user_id

    async def sign_out(self) -> None:
        self._user_id = None
        self._email = None
        self._emit()

    async def change_password(self, new_password: str) -> None:
        return

    def _uid_for(self, email: str) -> str:
        if self._fixed_user_id:
            return self._fixed_user_id
        return "local-" + "".join(ch if ch.isalnum() else "_" for ch in email.lower())
