# src/todo_list/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires either the Firebase adapters or the offline in-memory ones into AppState.
"""

from __future__ import annotations

import contextlib
import logging

from ..account.service import AccountService
from ..backends.memory import InMemoryProfileBackend, InMemoryTaskBackend, LocalAuthProvider
from ..config import BACKEND_FIREBASE, get_settings
from ..core.notify import NotificationCenter
from ..core.ports import AccountAuth, ConfirmPrompt, ProfileBackend, TaskBackend
from ..core.state import AppState
from ..tasks.task_api import TaskListViewModel
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


async def _deny(title: str, message: str) -> bool:
    return False


def _build_firebase(settings) -> tuple[AccountAuth, TaskBackend, ProfileBackend]:
    from ..backends.firebase_auth import FirebaseAuthProvider
    from ..backends.firebase_rtdb import FirebaseRealtimeBackend
    from ..backends.firestore import FirestoreProfileBackend

    auth = FirebaseAuthProvider(
        str(settings.firebase_api_key),
        timeout_seconds=settings.http_timeout_seconds,
    )
    backend = FirebaseRealtimeBackend(
        settings.firebase_database_url,
        token_provider=lambda: auth.id_token,
        timeout_seconds=settings.http_timeout_seconds,
    )
    profiles = FirestoreProfileBackend(
        settings.firebase_project_id,
        token_provider=lambda: auth.id_token,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return auth, backend, profiles


def create_initial_state(*, settings=None, confirm: ConfirmPrompt | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    Without a confirm prompt every delete is declined.
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    auth: AccountAuth
    backend: TaskBackend
    profiles: ProfileBackend
    if settings.backend == BACKEND_FIREBASE and settings.firebase_configured:
        auth, backend, profiles = _build_firebase(settings)
        logger.info("Using Firebase backend (%s)", settings.firebase_database_url)
    else:
        if settings.backend == BACKEND_FIREBASE:
            logger.warning("Firebase backend requested but not fully configured; using offline mode")
        # Offline demo: nothing leaves the process.
        auth = LocalAuthProvider(user_id=settings.demo_user_id)
        backend = InMemoryTaskBackend()
        profiles = InMemoryProfileBackend()
        logger.info("Using offline in-memory backend")

    notices = NotificationCenter(duration_seconds=settings.notice_seconds)
    store = TaskStore(backend)
    view_model = TaskListViewModel(
        auth=auth,
        store=store,
        backend=backend,
        notifier=notices,
        confirm=confirm or _deny,
    )
    account = AccountService(auth=auth, profiles=profiles, notifier=notices)

    # Sign-out drops the snapshot and any selection.
    auth.on_auth_state_change(view_model.handle_auth_change)

    return AppState(
        settings=settings,
        auth=auth,
        backend=backend,
        profiles=profiles,
        notices=notices,
        store=store,
        tasks=view_model,
        account=account,
    )


async def close_state(state: AppState) -> None:
    """Best-effort: close HTTP clients owned by the adapters."""
    for component in (state.backend, state.profiles, state.auth):
        aclose = getattr(component, "aclose", None)
        if aclose is None:
            continue
        with contextlib.suppress(Exception):
            await aclose()
