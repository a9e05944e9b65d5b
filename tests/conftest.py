# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_list.backends.memory import InMemoryProfileBackend, LocalAuthProvider
from todo_list.cli.bootstrap import create_initial_state
from todo_list.core.state import AppState
from todo_list.tasks.task_api import KeyFactory, TaskListViewModel
from todo_list.tasks.task_store import TaskStore

from .fakes import FakeAuth, FakeNotifier, RecordingBackend, ScriptedConfirm


@pytest.fixture()
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture()
def auth() -> FakeAuth:
    return FakeAuth("u1")


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm(True)


@pytest.fixture()
def store(backend: RecordingBackend) -> TaskStore:
    return TaskStore(backend)


@pytest.fixture()
def vm(auth, store, backend, notifier, confirm) -> TaskListViewModel:
    """
    View-model wired with deterministic fakes.

    Keys come from a frozen clock, so they are "1000000", "1000001", ...
    """
    return TaskListViewModel(
        auth=auth,
        store=store,
        backend=backend,
        notifier=notifier,
        confirm=confirm,
        key_factory=KeyFactory(clock=lambda: 1000.0),
    )


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        backend="memory",
        firebase_api_key=None,
        firebase_database_url="",
        firebase_project_id="",
        firebase_configured=False,
        http_timeout_seconds=1.0,
        console_enabled=False,
        notice_seconds=3.0,
        demo_user_id="demo",
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """Offline AppState (in-memory backends) with deletes always confirmed."""
    return create_initial_state(settings=settings, confirm=ScriptedConfirm(True))


@pytest.fixture()
def profiles() -> InMemoryProfileBackend:
    return InMemoryProfileBackend()


@pytest.fixture()
def local_auth() -> LocalAuthProvider:
    return LocalAuthProvider()
