# src/todo_list/tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import IntEnum, StrEnum
from typing import Any

from ..core.errors import ValidationError, ValidationReason

logger = logging.getLogger(__name__)


class Category(StrEnum):
    PERSONAL = "Personal"
    WORK = "Work"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def from_db(cls, raw: Any) -> Category:
        """Stored value -> Category. Older records without a category get the first one."""
        if not raw:
            return DEFAULT_CATEGORY
        try:
            return cls(str(raw))
        except ValueError:
            return DEFAULT_CATEGORY

    @classmethod
    def parse(cls, text: str) -> Category:
        """User input -> Category (case-insensitive)."""
        needle = (text or "").strip().lower()
        for c in cls:
            if c.value.lower() == needle:
                return c
        raise ValidationError(ValidationReason.UNKNOWN_CATEGORY)


DEFAULT_CATEGORY = Category.PERSONAL


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @staticmethod
    def from_db(raw: Any) -> int:
        """
        Stored value -> numeric priority.

        Non-numeric or missing values become 0 (Low). Out-of-range numbers
        written by other clients are kept; sorting only needs the number.
        """
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return int(Priority.LOW)
        return int(raw)

    @classmethod
    def parse(cls, text: str) -> Priority:
        """User input -> Priority: a label ('high') or an index ('2')."""
        needle = (text or "").strip().lower()
        for p in cls:
            if needle in (p.name.lower(), str(p.value)):
                return p
        raise ValidationError(ValidationReason.UNKNOWN_PRIORITY)


def priority_label(value: int) -> str:
    try:
        return Priority(value).label
    except ValueError:
        return f"P{value}"


class SortMode(StrEnum):
    NONE = "none"
    PRIORITY_ASC = "priority_asc"
    PRIORITY_DESC = "priority_desc"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    @classmethod
    def parse(cls, text: str) -> SortMode:
        needle = (text or "").strip().lower()
        aliases = {
            "": cls.NONE,
            "none": cls.NONE,
            "default": cls.NONE,
            "asc": cls.PRIORITY_ASC,
            "priority_asc": cls.PRIORITY_ASC,
            "desc": cls.PRIORITY_DESC,
            "priority_desc": cls.PRIORITY_DESC,
        }
        if needle not in aliases:
            raise ValidationError(ValidationReason.UNKNOWN_SORT)
        return aliases[needle]


_SORT_LABELS: dict[SortMode, str] = {
    SortMode.NONE: "Default Order",
    SortMode.PRIORITY_ASC: "Priority: Low to High",
    SortMode.PRIORITY_DESC: "Priority: High to Low",
}


# ---- due dates ----

def format_due_date(value: datetime | None) -> str | None:
    """datetime -> ISO-8601 UTC string with millisecond precision ('...Z')."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_due_date(raw: Any) -> datetime | None:
    """Stored ISO-8601 string -> aware datetime; anything unparseable -> None."""
    if not raw or not isinstance(raw, str):
        return None
    try:
        value = datetime.fromisoformat(raw.strip())
    except ValueError:
        logger.debug("Unparseable dueDate %r treated as not set", raw)
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def parse_user_date(text: str) -> datetime | None:
    """
    Console input -> due date.

    'none' / '-' / '' clear the date; otherwise YYYY-MM-DD (or full ISO).
    """
    s = (text or "").strip()
    if s.lower() in ("", "-", "none"):
        return None
    try:
        value = datetime.fromisoformat(s)
    except ValueError as e:
        raise ValidationError(ValidationReason.INVALID_DATE) from e
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


# ---- records ----

@dataclass(slots=True, frozen=True)
class Task:
    key: str
    name: str
    details: str
    category: Category
    priority: int
    due_date: datetime | None
    is_completed: bool = False

    def to_record(self) -> dict[str, Any]:
        """Wire shape stored under Users/{uid}/Tasks/{key} (the key is the path)."""
        return {
            "name": self.name,
            "details": self.details,
            "category": self.category.value,
            "priority": int(self.priority),
            "dueDate": format_due_date(self.due_date),
            "isCompleted": bool(self.is_completed),
        }

    @classmethod
    def from_record(cls, key: str, raw: dict[str, Any]) -> Task:
        """Normalize a stored record, filling defaults older records lack."""
        if "category" not in raw or "priority" not in raw:
            logger.debug("Task %s: defaulting missing category/priority", key)
        return cls(
            key=str(key),
            name=str(raw.get("name") or ""),
            details=str(raw.get("details") or ""),
            category=Category.from_db(raw.get("category")),
            priority=Priority.from_db(raw.get("priority")),
            due_date=parse_due_date(raw.get("dueDate")),
            is_completed=bool(raw.get("isCompleted", False)),
        )

    def toggled(self) -> Task:
        return replace(self, is_completed=not self.is_completed)


@dataclass(slots=True, frozen=True)
class TaskFields:
    """User-editable part of a task, as submitted by the form."""

    name: str
    details: str = ""
    category: Category | None = None
    priority: int | None = None
    due_date: datetime | None = None

    def validated(self) -> TaskFields:
        name = (self.name or "").strip()
        if not name:
            raise ValidationError(ValidationReason.EMPTY_NAME)
        return TaskFields(
            name=name,
            details=self.details or "",
            category=self.category or DEFAULT_CATEGORY,
            priority=int(Priority.LOW) if self.priority is None else int(self.priority),
            due_date=self.due_date,
        )

    @classmethod
    def from_task(cls, task: Task) -> TaskFields:
        return cls(
            name=task.name,
            details=task.details,
            category=task.category,
            priority=task.priority,
            due_date=task.due_date,
        )

    def build(self, key: str, *, is_completed: bool = False) -> Task:
        f = self.validated()
        return Task(
            key=key,
            name=f.name,
            details=f.details,
            category=f.category or DEFAULT_CATEGORY,
            priority=int(f.priority or 0),
            due_date=f.due_date,
            is_completed=is_completed,
        )
