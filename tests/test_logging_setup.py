# tests/test_logging_setup.py

from __future__ import annotations

import logging

from todo_list.logging_setup import _ConsoleNoiseFilter, redact, setup_logging


def make_record(name: str, level: int, msg: str = "m", args=None) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, args, None)


def test_console_filter_levels() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(make_record("todo_list.tasks.task_api", logging.DEBUG))
    assert not f.filter(make_record("todo_list.backends.firebase_rtdb", logging.INFO))
    assert f.filter(make_record("todo_list.backends.firestore", logging.WARNING))
    assert not f.filter(make_record("httpx", logging.WARNING))
    assert not f.filter(make_record("py.warnings", logging.WARNING))
    assert f.filter(make_record("httpcore", logging.ERROR))


def test_redact_masks_keys_and_tokens() -> None:
    text = "POST https://x/v1/accounts:signUp?key=AIzaSecret&x=1 Authorization: Bearer eyJabc.def"
    out = redact(text)
    assert "AIzaSecret" not in out and "eyJabc" not in out
    assert "key=***&x=1" in out
    assert "Bearer ***" in out
    assert redact("GET Users/u1/Tasks.json?auth=tok") == "GET Users/u1/Tasks.json?auth=***"


def test_setup_logging_writes_masked_file(tmp_path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.CRITICAL)
        logging.getLogger("todo_list.backends.firebase_rtdb").debug("GET %s", "a.json?auth=tok123")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / "logs" / "todo.log"
        content = log_file.read_text(encoding="utf-8")
        assert "GET a.json?auth=***" in content
        assert "tok123" not in content
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
