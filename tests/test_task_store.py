# tests/test_task_store.py

from __future__ import annotations

import pytest

from todo_list.core.errors import FetchFailed, NotAuthenticated
from todo_list.tasks.task_models import Category
from todo_list.tasks.task_store import TaskStore, task_path, tasks_path

from .fakes import RecordingBackend


def seeded_backend() -> RecordingBackend:
    return RecordingBackend(
        {
            "Users": {
                "u1": {
                    "Tasks": {
                        "1700000000002": {"name": "Second", "priority": 2, "category": "Work"},
                        "1700000000001": {"name": "First"},
                        "bogus": "not a record",
                    }
                },
                "u2": {"Tasks": {"9": {"name": "Someone else"}}},
            }
        }
    )


def test_paths() -> None:
    assert tasks_path("abc") == "Users/abc/Tasks"
    assert task_path("abc", "123") == "Users/abc/Tasks/123"


@pytest.mark.asyncio
async def test_load_normalizes_and_keeps_backend_order() -> None:
    store = TaskStore(seeded_backend())
    tasks = await store.load("u1")

    assert [t.key for t in tasks] == ["1700000000002", "1700000000001"]
    first = tasks[1]
    assert first.category == Category.PERSONAL
    assert first.priority == 0
    assert store.current() == tasks
    assert store.user_id == "u1"


@pytest.mark.asyncio
async def test_list_snapshot_keeps_index_order() -> None:
    records = [{"name": f"t{i}"} for i in range(12)]
    records[3] = None
    backend = RecordingBackend({"Users": {"u1": {"Tasks": records}}})
    store = TaskStore(backend)

    tasks = await store.load("u1")

    assert [t.key for t in tasks] == [str(i) for i in range(12) if i != 3]
    assert [t.name for t in tasks][:4] == ["t0", "t1", "t2", "t4"]


@pytest.mark.asyncio
async def test_mixed_length_keys_are_not_resorted() -> None:
    backend = RecordingBackend(
        {"Users": {"u1": {"Tasks": {"9": {"name": "a"}, "10": {"name": "b"}, "100": {"name": "c"}}}}}
    )
    store = TaskStore(backend)

    tasks = await store.load("u1")

    assert [t.key for t in tasks] == ["9", "10", "100"]


@pytest.mark.asyncio
async def test_load_is_scoped_to_user() -> None:
    store = TaskStore(seeded_backend())
    tasks = await store.load("u2")
    assert [t.name for t in tasks] == ["Someone else"]


@pytest.mark.asyncio
async def test_load_absent_collection_is_empty_not_error() -> None:
    store = TaskStore(RecordingBackend())
    assert await store.load("nobody") == ()
    assert store.current() == ()


@pytest.mark.asyncio
async def test_load_requires_user() -> None:
    backend = RecordingBackend()
    store = TaskStore(backend)
    with pytest.raises(NotAuthenticated):
        await store.load(None)
    assert backend.calls == []


@pytest.mark.asyncio
async def test_fetch_failure_keeps_last_good_snapshot() -> None:
    backend = seeded_backend()
    store = TaskStore(backend)
    good = await store.load("u1")

    backend.fail_get = True
    with pytest.raises(FetchFailed):
        await store.load("u1")
    assert store.current() == good


@pytest.mark.asyncio
async def test_array_snapshot_from_integer_keys() -> None:
    # The realtime DB turns {"0": .., "1": ..} into a JSON array (with holes as null).
    backend = RecordingBackend({"Users": {"u1": {"Tasks": [{"name": "zero"}, None, {"name": "two"}]}}})
    store = TaskStore(backend)
    tasks = await store.load("u1")
    assert [(t.key, t.name) for t in tasks] == [("0", "zero"), ("2", "two")]


def test_get_and_clear() -> None:
    store = TaskStore(RecordingBackend())
    assert store.get("x") is None
    store.clear()
    assert store.current() == ()
    assert store.user_id is None
