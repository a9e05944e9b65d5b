# src/todo_list/backends/firebase_auth.py

from __future__ import annotations

"""
Email/password auth via the Firebase Identity Toolkit REST API.

Only the calls the app needs: sign up (+ verification mail), sign in,
sign out, password change. Token refresh is not handled; an expired ID token
surfaces as a backend error and the user signs in again.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from ..core.errors import AuthFailed
from ..core.ports import AuthListener

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"


class FirebaseAuthProvider:
    def __init__(
        self,
        api_key: str,
        *,
        timeout_seconds: float = 15.0,
        client: httpx.AsyncClient | None = None,
        base_url: str = IDENTITY_TOOLKIT_URL,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._base = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._owns_client = client is None

        self._user_id: str | None = None
        self._email: str | None = None
        self._email_verified = False
        self._id_token: str | None = None
        # Token of a just-created, not yet signed-in account (profile write only).
        self._signup_token: str | None = None
        self._listeners: list[AuthListener] = []

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ---- AuthProvider port ----

    def current_user(self) -> str | None:
        return self._user_id

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    # ---- session info ----

    @property
    def id_token(self) -> str | None:
        return self._id_token or self._signup_token

    @property
    def email(self) -> str | None:
        return self._email

    @property
    def email_verified(self) -> bool:
        return self._email_verified

    # ---- REST plumbing ----

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base}/accounts:{method}"
        try:
            resp = await self._client.post(url, params={"key": self._api_key}, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Auth %s transport error: %s", method, e)
            raise AuthFailed("NETWORK_ERROR", "Network error. Please try again.") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if resp.status_code >= 400:
            code = ""
            err = body.get("error") if isinstance(body, dict) else None
            if isinstance(err, dict):
                code = str(err.get("message") or "")
            logger.info("Auth %s rejected: HTTP %s %s", method, resp.status_code, code)
            raise AuthFailed(code or f"HTTP_{resp.status_code}")

        return body if isinstance(body, dict) else {}

    def _emit(self) -> None:
        for cb in list(self._listeners):
            try:
                cb(self._user_id)
            except Exception:
                logger.exception("Auth listener failed")

    # ---- flows ----

    async def sign_up(self, email: str, password: str) -> str:
        """
        Create the account and send the verification mail. Does not sign in:
        current_user() stays None, but `id_token` carries the new account's
        token so the profile document can be written as that user.
        """
        data = await self._call(
            "signUp", {"email": email, "password": password, "returnSecureToken": True}
        )
        uid = str(data.get("localId") or "")
        self._signup_token = data.get("idToken")
        await self._call("sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": self._signup_token})
        logger.info("Account created uid=%s (verification mail sent)", uid)
        return uid

    async def sign_in(self, email: str, password: str) -> str:
        data = await self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        token = data.get("idToken")
        info = await self._call("lookup", {"idToken": token})
        users = info.get("users") or [{}]
        if not users[0].get("emailVerified"):
            raise AuthFailed("EMAIL_NOT_VERIFIED")

        self._user_id = str(data.get("localId") or "")
        self._email = str(data.get("email") or email)
        self._email_verified = True
        self._id_token = token
        self._signup_token = None
        logger.info("Signed in uid=%s", self._user_id)
        self._emit()
        return self._user_id

    async def sign_out(self) -> None:
        self._user_id = None
        self._email = None
        self._email_verified = False
        self._id_token = None
        self._signup_token = None
        logger.info("Signed out")
        self._emit()

    async def change_password(self, new_password: str) -> None:
        if not self._id_token:
            raise AuthFailed("NOT_SIGNED_IN", "No user is currently logged in.")
        data = await self._call(
            "update",
            {"idToken": self._id_token, "password": new_password, "returnSecureToken": True},
        )
        # The old token is revoked by a password change.
        self._id_token = data.get("idToken") or self._id_token
        logger.info("Password changed uid=%s", self._user_id)
