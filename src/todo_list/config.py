# src/todo_list/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (offline demo works out of the box).
- Firebase adapters are used only when the project is fully configured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TODO"

BACKEND_MEMORY = "memory"
BACKEND_FIREBASE = "firebase"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Backend selection ----
    backend: str

    # ---- Firebase project ----
    firebase_api_key: Optional[str]
    firebase_database_url: str
    firebase_project_id: str
    http_timeout_seconds: float

    # ---- Console host ----
    console_enabled: bool
    notice_seconds: float

    # ---- Offline demo ----
    demo_user_id: str

    @property
    def firebase_configured(self) -> bool:
        return bool(self.firebase_api_key and self.firebase_database_url and self.firebase_project_id)

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-list") or "todo-list"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))

        firebase_api_key = _first_env(_k("FIREBASE_API_KEY"), "FIREBASE_API_KEY", default=None)
        firebase_database_url = (
            _first_env(_k("FIREBASE_DATABASE_URL"), "FIREBASE_DATABASE_URL", default="") or ""
        ).strip().rstrip("/")
        firebase_project_id = (
            _first_env(_k("FIREBASE_PROJECT_ID"), "FIREBASE_PROJECT_ID", default="") or ""
        ).strip()

        # Default to Firebase only when every piece is present.
        default_backend = (
            BACKEND_FIREBASE
            if firebase_api_key and firebase_database_url and firebase_project_id
            else BACKEND_MEMORY
        )
        backend = _env(_k("BACKEND"), default_backend).strip().lower()
        if backend not in (BACKEND_MEMORY, BACKEND_FIREBASE):
            backend = default_backend

        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 15.0)

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        notice_seconds = _env_float(_k("NOTICE_SECONDS"), 3.0)

        demo_user_id = _env(_k("DEMO_USER_ID"), "demo-user").strip() or "demo-user"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            backend=backend,
            firebase_api_key=firebase_api_key,
            firebase_database_url=firebase_database_url,
            firebase_project_id=firebase_project_id,
            http_timeout_seconds=http_timeout_seconds,
            console_enabled=console_enabled,
            notice_seconds=notice_seconds,
            demo_user_id=demo_user_id,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
