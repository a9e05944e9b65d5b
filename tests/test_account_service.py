# tests/test_account_service.py

from __future__ import annotations

import pytest

from todo_list.account.service import AccountService, validate_credentials, validate_new_password
from todo_list.core.errors import AuthFailed, ValidationError, ValidationReason

from .fakes import FakeNotifier


class RejectingAuth:
    """Auth that fails every flow with a fixed provider code."""

    email = None
    email_verified = False

    def __init__(self, code: str) -> None:
        self.code = code

    def current_user(self):
        return "u1"

    def on_auth_state_change(self, callback):
        return lambda: None

    async def sign_up(self, email, password):
        raise AuthFailed(self.code)

    async def sign_in(self, email, password):
        raise AuthFailed(self.code)

    async def sign_out(self):
        return None

    async def change_password(self, new_password):
        raise AuthFailed(self.code)


@pytest.mark.parametrize(
    ("email", "password", "reason"),
    [
        ("", "pw", ValidationReason.MISSING_FIELDS),
        ("a@b.c", "", ValidationReason.MISSING_FIELDS),
        ("not-an-email", "pw", ValidationReason.INVALID_EMAIL),
        ("@b.c", "pw", ValidationReason.INVALID_EMAIL),
    ],
)
def test_validate_credentials(email, password, reason) -> None:
    with pytest.raises(ValidationError) as ei:
        validate_credentials(email, password)
    assert ei.value.reason == reason


@pytest.mark.parametrize(
    ("new", "confirm", "reason"),
    [
        ("", "", ValidationReason.MISSING_FIELDS),
        ("abcdef", "abcdeg", ValidationReason.PASSWORD_MISMATCH),
        ("abc", "abc", ValidationReason.WEAK_PASSWORD),
    ],
)
def test_validate_new_password(new, confirm, reason) -> None:
    with pytest.raises(ValidationError) as ei:
        validate_new_password(new, confirm)
    assert ei.value.reason == reason


def test_validate_new_password_ok() -> None:
    assert validate_new_password("abcdef", "abcdef") == "abcdef"


@pytest.mark.asyncio
async def test_sign_in_creates_missing_profile_without_password(local_auth, profiles) -> None:
    notifier = FakeNotifier()
    svc = AccountService(auth=local_auth, profiles=profiles, notifier=notifier)

    uid = await svc.sign_in(" me@example.com ", "secret")
    assert uid == local_auth.current_user()
    assert await profiles.get_doc("users", uid) == {"email": "me@example.com"}
    assert notifier.successes == ["Logged in successfully!"]

    profile = await svc.load_profile()
    assert profile.email == "me@example.com"
    assert profile.phone_verified is False


@pytest.mark.asyncio
async def test_sign_in_keeps_existing_profile(local_auth, profiles) -> None:
    uid = "local-me_example_com"
    await profiles.set_doc("users", uid, {"email": "me@example.com", "phoneNumberVerified": True})
    svc = AccountService(auth=local_auth, profiles=profiles, notifier=FakeNotifier())

    await svc.sign_in("me@example.com", "secret")
    profile = await svc.load_profile()
    assert profile.phone_verified is True


@pytest.mark.asyncio
async def test_sign_up_writes_profile(local_auth, profiles) -> None:
    notifier = FakeNotifier()
    svc = AccountService(auth=local_auth, profiles=profiles, notifier=notifier)
    uid = await svc.sign_up("new@example.com", "secret")
    assert await profiles.get_doc("users", uid) == {"email": "new@example.com"}
    assert local_auth.current_user() is None
    assert "verify" in notifier.successes[0]


@pytest.mark.asyncio
async def test_provider_rejection_is_surfaced(profiles) -> None:
    notifier = FakeNotifier()
    svc = AccountService(auth=RejectingAuth("EMAIL_EXISTS"), profiles=profiles, notifier=notifier)

    assert await svc.sign_up("a@b.c", "secret") is None
    assert isinstance(svc.last_error, AuthFailed)
    assert notifier.errors == [
        "This email address is already in use. Please log in or use a different email."
    ]
    assert await profiles.get_doc("users", "u1") is None


@pytest.mark.asyncio
async def test_change_password_paths(local_auth, profiles) -> None:
    notifier = FakeNotifier()
    svc = AccountService(auth=local_auth, profiles=profiles, notifier=notifier)

    assert await svc.change_password("abcdef", "abcdef") is False
    assert notifier.errors == ["No user is currently logged in."]

    await local_auth.sign_in("me@example.com", "pw")
    assert await svc.change_password("abc", "abc") is False
    assert await svc.change_password("abcdef", "abcdef") is True
    assert notifier.successes[-1] == "Password updated successfully!"


@pytest.mark.asyncio
async def test_recent_login_required_message(profiles) -> None:
    notifier = FakeNotifier()
    svc = AccountService(auth=RejectingAuth("CREDENTIAL_TOO_OLD_LOGIN_AGAIN"), profiles=profiles, notifier=notifier)
    assert await svc.change_password("abcdef", "abcdef") is False
    assert notifier.errors == ["Please re-authenticate to update your password."]


@pytest.mark.asyncio
async def test_load_profile_requires_user(local_auth, profiles) -> None:
    notifier = FakeNotifier()
    svc = AccountService(auth=local_auth, profiles=profiles, notifier=notifier)
    assert await svc.load_profile() is None
    assert notifier.errors
