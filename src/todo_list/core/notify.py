# src/todo_list/core/notify.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NoticeKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class Notice:
    kind: NoticeKind
    message: str
    created_at: float


NoticeSink = Callable[[Notice], None]


class NotificationCenter:
    """
    Success/error channel shown to the user.

    A notice stays visible for `duration_seconds` (3s by default) or until
    dismissed. The optional sink gets every notice immediately; the console
    host uses it to print.
    """

    def __init__(
        self,
        *,
        duration_seconds: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
        sink: NoticeSink | None = None,
    ) -> None:
        self._duration = float(duration_seconds)
        self._clock = clock
        self._sink = sink
        self._notices: list[Notice] = []

    def set_sink(self, sink: NoticeSink | None) -> None:
        self._sink = sink

    def _push(self, kind: NoticeKind, message: str) -> Notice:
        notice = Notice(kind=kind, message=message, created_at=self._clock())
        self._notices.append(notice)
        if self._sink is not None:
            self._sink(notice)
        return notice

    def show_success(self, message: str) -> None:
        logger.info("Notice: %s", message)
        self._push(NoticeKind.SUCCESS, message)

    def show_error(self, message: str) -> None:
        logger.warning("Error notice: %s", message)
        self._push(NoticeKind.ERROR, message)

    def active(self) -> list[Notice]:
        now = self._clock()
        self._notices = [n for n in self._notices if now - n.created_at < self._duration]
        return list(self._notices)

    def dismiss(self) -> None:
        self._notices.clear()
