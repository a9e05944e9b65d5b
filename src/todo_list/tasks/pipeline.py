# src/todo_list/tasks/pipeline.py

"""
Read path of the task list: Filter -> Search -> Sort.

Each stage is a pure function over a sequence of tasks and returns a new list;
the input is never reordered in place. The stage order is fixed.
"""

from __future__ import annotations

from collections.abc import Sequence

from .task_models import Category, SortMode, Task


def filter_by_category(tasks: Sequence[Task], category: Category | None) -> list[Task]:
    if category is None:
        return list(tasks)
    return [t for t in tasks if t.category == category]


def search_by_text(tasks: Sequence[Task], query: str | None) -> list[Task]:
    """Case-insensitive substring match against name, or details when present."""
    if not query or not query.strip():
        return list(tasks)
    needle = query.lower()
    return [
        t
        for t in tasks
        if needle in t.name.lower() or (t.details and needle in t.details.lower())
    ]


def sort_by_priority(tasks: Sequence[Task], mode: SortMode) -> list[Task]:
    # sorted() is stable; reverse=True keeps ties in input order as well.
    if mode == SortMode.PRIORITY_ASC:
        return sorted(tasks, key=lambda t: t.priority)
    if mode == SortMode.PRIORITY_DESC:
        return sorted(tasks, key=lambda t: t.priority, reverse=True)
    return list(tasks)


def get_filtered_tasks(
    tasks: Sequence[Task],
    filter_category: Category | None = None,
    search_query: str = "",
    sort_mode: SortMode = SortMode.NONE,
) -> list[Task]:
    filtered = filter_by_category(tasks, filter_category)
    filtered = search_by_text(filtered, search_query)
    return sort_by_priority(filtered, sort_mode)
