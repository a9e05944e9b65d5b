# src/todo_list/backends/firebase_rtdb.py

from __future__ import annotations

"""
Firebase Realtime Database over its REST API.

    GET    {database_url}/{path}.json          -> JSON value or null
    PUT    {database_url}/{path}.json  <json>  -> replace value
    DELETE {database_url}/{path}.json          -> remove value

Requests carry `?auth=<id token>` when a token provider is given, so the
database security rules see the signed-in user.
"""

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import BackendError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class FirebaseRealtimeBackend:
    def __init__(
        self,
        database_url: str,
        *,
        token_provider: TokenProvider | None = None,
        timeout_seconds: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not database_url or not database_url.strip():
            raise ValueError("database_url is required")
        self._base = database_url.strip().rstrip("/")
        self._token_provider = token_provider
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        parts = [quote(p, safe="") for p in (path or "").split("/") if p]
        return f"{self._base}/{'/'.join(parts)}.json"

    def _params(self) -> dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        return {"auth": token} if token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            resp = await self._client.request(method, url, params=self._params(), **kwargs)
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {path} failed: {e}") from e

        if resp.status_code >= 400:
            detail = ""
            try:
                body = resp.json()
                if isinstance(body, dict):
                    detail = str(body.get("error") or "")
            except ValueError:
                detail = resp.text[:200]
            raise BackendError(
                f"{method} {path} -> HTTP {resp.status_code} {detail}".strip(),
                status_code=resp.status_code,
            )
        return resp

    async def get(self, path: str) -> Any | None:
        resp = await self._request("GET", path)
        try:
            return resp.json()
        except ValueError as e:
            raise BackendError(f"GET {path} returned invalid JSON") from e

    async def set(self, path: str, value: Any | None) -> None:
        if value is None:
            await self._request("DELETE", path)
            return
        await self._request("PUT", path, json=value)
