# src/todo_list/backends/firestore.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import BackendError

logger = logging.getLogger(__name__)

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"


def encode_value(value: Any) -> dict[str, Any]:
    """Python value -> Firestore typed value (flat profile fields only)."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    raise TypeError(f"Unsupported profile field type: {type(value).__name__}")


def decode_value(typed: dict[str, Any]) -> Any:
    if "stringValue" in typed:
        return typed["stringValue"]
    if "booleanValue" in typed:
        return bool(typed["booleanValue"])
    if "integerValue" in typed:
        return int(typed["integerValue"])
    if "doubleValue" in typed:
        return float(typed["doubleValue"])
    if "nullValue" in typed:
        return None
    # Maps/arrays/timestamps are not part of the profile document.
    logger.debug("Ignoring unsupported Firestore value %s", list(typed))
    return None


def encode_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {k: encode_value(v) for k, v in data.items()}


def decode_fields(fields: dict[str, Any] | None) -> dict[str, Any]:
    return {k: decode_value(v) for k, v in (fields or {}).items() if isinstance(v, dict)}


class FirestoreProfileBackend:
    """
    Profile documents (users/{uid}) via the Firestore REST API.

    Only flat scalar fields are supported; that is all the profile needs.
    """

    def __init__(
        self,
        project_id: str,
        *,
        token_provider: Callable[[], str | None] | None = None,
        timeout_seconds: float = 15.0,
        client: httpx.AsyncClient | None = None,
        base_url: str = FIRESTORE_BASE_URL,
    ) -> None:
        if not project_id:
            raise ValueError("project_id is required")
        self._docs_url = f"{base_url.rstrip('/')}/projects/{project_id}/databases/(default)/documents"
        self._token_provider = token_provider
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, collection: str, doc_id: str) -> str:
        return f"{self._docs_url}/{quote(collection, safe='')}/{quote(doc_id, safe='')}"

    def _headers(self) -> dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def get_doc(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        try:
            resp = await self._client.get(self._url(collection, doc_id), headers=self._headers())
        except httpx.HTTPError as e:
            raise BackendError(f"get_doc {collection}/{doc_id} failed: {e}") from e

        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise BackendError(
                f"get_doc {collection}/{doc_id} -> HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            body = resp.json()
        except ValueError as e:
            raise BackendError(f"get_doc {collection}/{doc_id} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise BackendError(f"get_doc {collection}/{doc_id} returned unexpected body")
        return decode_fields(body.get("fields"))

    async def set_doc(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        # PATCH without a mask replaces the document; with a mask only the listed fields change.
        params: list[tuple[str, str]] = []
        if merge:
            params = [("updateMask.fieldPaths", k) for k in data]

        try:
            resp = await self._client.patch(
                self._url(collection, doc_id),
                params=params,
                json={"fields": encode_fields(data)},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise BackendError(f"set_doc {collection}/{doc_id} failed: {e}") from e

        if resp.status_code >= 400:
            raise BackendError(
                f"set_doc {collection}/{doc_id} -> HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        logger.debug("set_doc %s/%s merge=%s fields=%s", collection, doc_id, merge, sorted(data))
