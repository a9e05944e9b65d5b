# src/todo_list/account/service.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.errors import (
    BackendError,
    NotAuthenticated,
    TodoError,
    ValidationError,
    ValidationReason,
)
from ..core.ports import AccountAuth, Notifier, ProfileBackend

logger = logging.getLogger(__name__)

PROFILE_COLLECTION = "users"
MIN_PASSWORD_LENGTH = 6


@dataclass(slots=True, frozen=True)
class Profile:
    user_id: str
    email: str | None
    email_verified: bool
    phone_verified: bool


def validate_credentials(email: str, password: str) -> tuple[str, str]:
    email = (email or "").strip()
    if not email or not password:
        raise ValidationError(ValidationReason.MISSING_FIELDS)
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError(ValidationReason.INVALID_EMAIL)
    return email, password


def validate_new_password(new_password: str, confirm_password: str) -> str:
    if not new_password or not confirm_password:
        raise ValidationError(ValidationReason.MISSING_FIELDS, "Please fill in both fields.")
    if new_password != confirm_password:
        raise ValidationError(ValidationReason.PASSWORD_MISMATCH)
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(ValidationReason.WEAK_PASSWORD)
    return new_password


class AccountService:
    """
    Sign-up / sign-in / profile flows.

    The profile document (users/{uid}) lives in the document store, separate
    from task persistence. Only the email is mirrored there; passwords stay
    with the auth provider.
    """

    def __init__(self, *, auth: AccountAuth, profiles: ProfileBackend, notifier: Notifier) -> None:
        self._auth = auth
        self._profiles = profiles
        self._notifier = notifier
        self.last_error: TodoError | None = None

    def _fail(self, err: TodoError) -> None:
        self.last_error = err
        self._notifier.show_error(err.user_message)

    async def sign_up(self, email: str, password: str) -> str | None:
        self.last_error = None
        try:
            email, password = validate_credentials(email, password)
            uid = await self._auth.sign_up(email, password)
            await self._profiles.set_doc(PROFILE_COLLECTION, uid, {"email": email})
        except BackendError as e:
            logger.warning("Profile write after sign-up failed: %s", e)
            self._fail(TodoError("Account created, but saving the profile failed."))
            return None
        except TodoError as e:
            self._fail(e)
            return None

        self._notifier.show_success(
            "Account created successfully! Please check your email to verify your account."
        )
        return uid

    async def sign_in(self, email: str, password: str) -> str | None:
        self.last_error = None
        try:
            email, password = validate_credentials(email, password)
            uid = await self._auth.sign_in(email, password)
        except TodoError as e:
            self._fail(e)
            return None

        # Accounts created before profiles existed get their document on first login.
        try:
            if await self._profiles.get_doc(PROFILE_COLLECTION, uid) is None:
                await self._profiles.set_doc(PROFILE_COLLECTION, uid, {"email": email})
                logger.info("Created missing profile uid=%s", uid)
        except BackendError as e:
            logger.warning("Profile check failed uid=%s: %s", uid, e)

        self._notifier.show_success("Logged in successfully!")
        return uid

    async def sign_out(self) -> None:
        await self._auth.sign_out()

    async def change_password(self, new_password: str, confirm_password: str) -> bool:
        self.last_error = None
        try:
            if not self._auth.current_user():
                raise NotAuthenticated("No user is currently logged in.")
            new_password = validate_new_password(new_password, confirm_password)
            await self._auth.change_password(new_password)
        except TodoError as e:
            self._fail(e)
            return False

        self._notifier.show_success("Password updated successfully!")
        return True

    async def load_profile(self) -> Profile | None:
        self.last_error = None
        uid = self._auth.current_user()
        if not uid:
            self._fail(NotAuthenticated("No user is currently logged in."))
            return None

        try:
            doc = await self._profiles.get_doc(PROFILE_COLLECTION, uid) or {}
        except BackendError as e:
            logger.warning("Profile fetch failed uid=%s: %s", uid, e)
            self._fail(TodoError("Failed to load profile. Please try again."))
            return None

        return Profile(
            user_id=uid,
            email=doc.get("email") or self._auth.email,
            email_verified=bool(self._auth.email_verified),
            phone_verified=bool(doc.get("phoneNumberVerified")),
        )
