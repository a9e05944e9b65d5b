# tests/test_task_models.py

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from todo_list.core.errors import ValidationError, ValidationReason
from todo_list.tasks.task_models import (
    Category,
    Priority,
    SortMode,
    Task,
    TaskFields,
    format_due_date,
    parse_user_date,
    priority_label,
)


def test_from_record_fills_defaults_for_old_records() -> None:
    t = Task.from_record("17", {"name": "Old task", "details": "x"})
    assert t.key == "17"
    assert t.category == Category.PERSONAL
    assert t.priority == 0
    assert t.due_date is None
    assert t.is_completed is False


@pytest.mark.parametrize("raw", [None, "2", "high", True, [1]])
def test_non_numeric_priority_defaults_to_low(raw) -> None:
    t = Task.from_record("k", {"name": "n", "priority": raw, "category": "Work"})
    assert t.priority == 0
    assert t.category == Category.WORK


def test_unknown_category_defaults_to_first() -> None:
    t = Task.from_record("k", {"name": "n", "category": "Garden"})
    assert t.category == Category.PERSONAL


def test_record_uses_wire_field_names() -> None:
    due = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
    t = Task(
        key="1",
        name="Dentist",
        details="",
        category=Category.HEALTH,
        priority=int(Priority.HIGH),
        due_date=due,
        is_completed=True,
    )
    assert t.to_record() == {
        "name": "Dentist",
        "details": "",
        "category": "Health",
        "priority": 2,
        "dueDate": "2025-03-01T09:30:00.000Z",
        "isCompleted": True,
    }


def test_due_date_from_js_iso_string() -> None:
    t = Task.from_record("k", {"name": "n", "dueDate": "2024-12-31T23:00:00.000Z"})
    assert t.due_date == datetime(2024, 12, 31, 23, 0, tzinfo=UTC)


def test_garbage_due_date_is_not_set() -> None:
    t = Task.from_record("k", {"name": "n", "dueDate": "next tuesday"})
    assert t.due_date is None


def test_naive_due_date_is_treated_as_utc() -> None:
    assert format_due_date(datetime(2025, 1, 2)) == "2025-01-02T00:00:00.000Z"


def test_fields_validation_trims_and_defaults() -> None:
    f = TaskFields(name="  Buy milk  ").validated()
    assert f.name == "Buy milk"
    assert f.category == Category.PERSONAL
    assert f.priority == 0


@pytest.mark.parametrize("name", ["", "   ", "\n\t"])
def test_fields_validation_rejects_empty_name(name) -> None:
    with pytest.raises(ValidationError) as ei:
        TaskFields(name=name).validated()
    assert ei.value.reason == ValidationReason.EMPTY_NAME
    assert ei.value.user_message == "Task name cannot be empty"


def test_build_creates_incomplete_task() -> None:
    t = TaskFields(name="x", category=Category.WORK, priority=1).build("42")
    assert (t.key, t.category, t.priority, t.is_completed) == ("42", Category.WORK, 1, False)


def test_parsers_accept_console_spellings() -> None:
    assert Category.parse("shopping") == Category.SHOPPING
    assert Priority.parse("HIGH") == Priority.HIGH
    assert Priority.parse("1") == Priority.MEDIUM
    assert SortMode.parse("desc") == SortMode.PRIORITY_DESC
    assert SortMode.parse("") == SortMode.NONE
    assert parse_user_date("none") is None
    assert parse_user_date("2025-06-01") == datetime(2025, 6, 1, tzinfo=UTC)


def test_parsers_reject_unknown_values() -> None:
    with pytest.raises(ValidationError):
        Category.parse("garden")
    with pytest.raises(ValidationError):
        Priority.parse("urgent")
    with pytest.raises(ValidationError):
        SortMode.parse("name")
    with pytest.raises(ValidationError) as ei:
        parse_user_date("31/12/2025")
    assert ei.value.reason == ValidationReason.INVALID_DATE


def test_labels() -> None:
    assert priority_label(0) == "Low"
    assert priority_label(7) == "P7"
    assert SortMode.PRIORITY_ASC.label == "Priority: Low to High"
