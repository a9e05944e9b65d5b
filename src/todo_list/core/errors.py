# src/todo_list/core/errors.py

from __future__ import annotations

"""
Error kinds surfaced by the core.

Every TodoError is recoverable: the operation aborts, local state stays at the
last good snapshot and `user_message` is shown to the user.
"""

from enum import StrEnum


class TodoError(Exception):
    """Base class for errors that end up in the notification channel."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, user_message: str | None = None) -> None:
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class NotAuthenticated(TodoError):
    default_message = "You must be logged in to do that."


class ValidationReason(StrEnum):
    EMPTY_NAME = "EmptyName"
    UNKNOWN_CATEGORY = "UnknownCategory"
    UNKNOWN_PRIORITY = "UnknownPriority"
    UNKNOWN_SORT = "UnknownSort"
    INVALID_DATE = "InvalidDate"
    TASK_NOT_FOUND = "TaskNotFound"
    MISSING_FIELDS = "MissingFields"
    INVALID_EMAIL = "InvalidEmail"
    WEAK_PASSWORD = "WeakPassword"
    PASSWORD_MISMATCH = "PasswordMismatch"


_VALIDATION_MESSAGES: dict[ValidationReason, str] = {
    ValidationReason.EMPTY_NAME: "Task name cannot be empty",
    ValidationReason.UNKNOWN_CATEGORY: "Unknown category.",
    ValidationReason.UNKNOWN_PRIORITY: "Unknown priority.",
    ValidationReason.UNKNOWN_SORT: "Unknown sort option.",
    ValidationReason.INVALID_DATE: "Invalid date. Use YYYY-MM-DD.",
    ValidationReason.TASK_NOT_FOUND: "Task no longer exists.",
    ValidationReason.MISSING_FIELDS: "Please fill in all fields",
    ValidationReason.INVALID_EMAIL: "Please enter a valid email address.",
    ValidationReason.WEAK_PASSWORD: "Password must be at least 6 characters.",
    ValidationReason.PASSWORD_MISMATCH: "Passwords do not match.",
}


class ValidationError(TodoError):
    """Client-side input check failed; nothing was sent to the backend."""

    def __init__(self, reason: ValidationReason, user_message: str | None = None) -> None:
        self.reason = reason
        super().__init__(user_message or _VALIDATION_MESSAGES.get(reason))


class FetchFailed(TodoError):
    default_message = "Failed to load tasks. Please try again."


class WriteFailed(TodoError):
    default_message = "Failed to save task. Please try again."


_AUTH_MESSAGES: dict[str, str] = {
    "EMAIL_EXISTS": "This email address is already in use. Please log in or use a different email.",
    "EMAIL_NOT_FOUND": "Invalid email or password.",
    "INVALID_PASSWORD": "Invalid email or password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "USER_DISABLED": "This account has been disabled.",
    "EMAIL_NOT_VERIFIED": "Please verify your email before logging in.",
    "WEAK_PASSWORD": "Password must be at least 6 characters.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many requests. Please try again later.",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "Please re-authenticate to update your password.",
    "REQUIRES_RECENT_LOGIN": "Please re-authenticate to update your password.",
}


def friendly_auth_message(code: str) -> str:
    # Identity Toolkit codes may carry a suffix: "WEAK_PASSWORD : Password should be ..."
    base = (code or "").split(":", 1)[0].strip().upper()
    return _AUTH_MESSAGES.get(base, "Authentication failed. Please try again.")


class AuthFailed(TodoError):
    """Auth provider rejected the request (sign-in, sign-up, password change)."""

    def __init__(self, code: str, user_message: str | None = None) -> None:
        self.code = code
        super().__init__(user_message or friendly_auth_message(code))


class BackendError(Exception):
    """
    Transport/HTTP failure inside a backend adapter.

    Not a TodoError: the core translates it into FetchFailed/WriteFailed
    depending on which operation was in flight.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
