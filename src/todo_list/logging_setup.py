# src/todo_list/logging_setup.py

from __future__ import annotations

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Adapters that log one line per HTTP call at DEBUG.
QUIET_PREFIXES = (
    "todo_list.backends.firebase",
    "todo_list.backends.firestore",
)

_SECRET_PATTERNS = (
    # ?key=<api key>, ?auth=<id token>, "idToken": ... in request dumps
    re.compile(r"((?:key|auth|idToken)=)[^&\s\"']+"),
    re.compile(r"(Bearer\s+)\S+"),
)


def redact(text: str) -> str:
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(r"\1***", text)
    return text


class _SecretFilter(logging.Filter):
    """Mask API keys and ID tokens before a record reaches any handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares stderr with the REPL prompt, so only show:
    - todo_list logs (Firebase adapters only at WARNING+)
    - everything else, captured warnings included, at ERROR+
    """

    def __init__(self, third_party_level: int = logging.ERROR) -> None:
        super().__init__()
        self.third_party_level = third_party_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("todo_list."):
            return record.levelno >= self.third_party_level
        if name.startswith(QUIET_PREFIXES):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Console on stderr (filtered) plus a rotating todo.log with everything.
    Secrets are masked in both. Returns the log file path.

    Call once at startup; calling again replaces the handlers.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "todo.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    secrets = _SecretFilter()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(secrets)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    file_handler.addFilter(secrets)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
