from __future__ import annotations

import logging
from typing import Any

import httpx

from flight_mode.config.settings import Settings, get_settings
from flight_mode.errors import RemoteStoreError
from flight_mode.remote.codec import decode_fields, encode_fields

logger = logging.getLogger(__name__)


class FirestoreClient:
    """Async client for the Firestore REST v1 document API.

    No request timeout is applied unless one is configured; the transport's
    own limits apply.
    """

    def __init__(
        self,
        project_id: str,
        *,
        base_url: str = "https://firestore.googleapis.com/v1",
        database: str = "(default)",
        api_key: str = "",
        auth_token: str = "",
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not project_id:
            raise ValueError("project_id is required for the remote document store")
        self._documents_url = (
            f"{base_url.rstrip('/')}/projects/{project_id}/databases/{database}/documents"
        )
        self._api_key = api_key
        headers: dict[str, str] = {}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds), headers=headers
        )
        if client is not None and headers:
            self._client.headers.update(headers)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> FirestoreClient:
        settings = settings or get_settings()
        return cls(
            settings.remote_project_id,
            base_url=settings.remote_base_url,
            database=settings.remote_database,
            api_key=settings.remote_api_key,
            auth_token=settings.remote_auth_token,
            timeout_seconds=settings.remote_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> FirestoreClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _params(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        params: dict[str, Any] = dict(extra or {})
        if self._api_key:
            params["key"] = self._api_key
        return params

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteStoreError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteStoreError(
                f"Remote store rejected {exc.request.method} {exc.request.url}: "
                f"{response.status_code} {response.text[:200]}",
                status_code=response.status_code,
            ) from exc

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        url = f"{self._documents_url}/{collection}/{doc_id}"
        response = await self._request("GET", url, params=self._params())
        if response.status_code == 404:
            return None
        self._raise_for_status(response)
        payload = response.json()
        return decode_fields(payload.get("fields") or {})

    async def create_document(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        url = f"{self._documents_url}/{collection}"
        response = await self._request(
            "POST",
            url,
            params=self._params({"documentId": doc_id}),
            json={"fields": encode_fields(data)},
        )
        self._raise_for_status(response)
        logger.debug("Created remote document %s/%s", collection, doc_id)

    async def merge_document(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        url = f"{self._documents_url}/{collection}/{doc_id}"
        response = await self._request(
            "PATCH",
            url,
            params=self._params({"updateMask.fieldPaths": list(data)}),
            json={"fields": encode_fields(data)},
        )
        self._raise_for_status(response)
        logger.debug("Merged %d field(s) into remote document %s/%s", len(data), collection, doc_id)
