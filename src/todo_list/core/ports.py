# src/todo_list/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the Firebase adapters swappable with the in-memory ones and makes
testing easier.
"""

from collections.abc import Callable
from typing import Any, Awaitable, Protocol

AuthListener = Callable[[str | None], None]
# Called with the new user id, or None on sign-out.


class AuthProvider(Protocol):
    def current_user(self) -> str | None: ...

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Subscribe; returns an unsubscribe callable."""
        ...


class AccountAuth(AuthProvider, Protocol):
    """Email/password flows used by the account service."""

    @property
    def email(self) -> str | None: ...

    @property
    def email_verified(self) -> bool: ...

    def sign_up(self, email: str, password: str) -> Awaitable[str]: ...
    def sign_in(self, email: str, password: str) -> Awaitable[str]: ...
    def sign_out(self) -> Awaitable[None]: ...
    def change_password(self, new_password: str) -> Awaitable[None]: ...


class TaskBackend(Protocol):
    """
    Keyed realtime store addressed by '/'-separated paths,
    e.g. Users/{uid}/Tasks/{taskKey}.

    No server-side querying: reads always return the whole subtree.
    """

    def get(self, path: str) -> Awaitable[Any | None]: ...

    def set(self, path: str, value: Any | None) -> Awaitable[None]:
        """Write `value` at `path`; None deletes the record."""
        ...


class ProfileBackend(Protocol):
    """Document store keyed by user id (separate from task persistence)."""

    def get_doc(self, collection: str, doc_id: str) -> Awaitable[dict[str, Any] | None]: ...

    def set_doc(
            self,
            collection: str,
            doc_id: str,
            data: dict[str, Any],
            *,
            merge: bool = False,
    ) -> Awaitable[None]: ...


class Notifier(Protocol):
    def show_success(self, message: str) -> None: ...
    def show_error(self, message: str) -> None: ...


class ConfirmPrompt(Protocol):
    """Two-step confirmation: only an explicit True lets a destructive call through."""

    def __call__(self, title: str, message: str) -> Awaitable[bool]: ...
