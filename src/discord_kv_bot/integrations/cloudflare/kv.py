from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ...core.kv_store import KeyValueStoreError
from ...core.logging_utils import log_event

CLOUDFLARE_API_BASE_URL = "https://api.cloudflare.com/client/v4"

logger = logging.getLogger(__name__)


def _error_summary(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        errors = payload.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item.get("message"))
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
    return response.reason_phrase or f"status {response.status_code}"


class CloudflareKVStore:
    """Workers KV namespace accessed through the Cloudflare REST API."""

    def __init__(
        self,
        *,
        account_id: str,
        namespace_id: str,
        api_token: str,
        timeout_seconds: float = 10.0,
        base_url: str = CLOUDFLARE_API_BASE_URL,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Authorization": f"Bearer {api_token}"},
        )
        self._values_path = (
            f"/accounts/{account_id}/storage/kv/namespaces/{namespace_id}/values"
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "CloudflareKVStore":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    def _value_path(self, key: str) -> str:
        return f"{self._values_path}/{quote(key, safe='')}"

    async def _request(
        self, method: str, key: str, *, content: Optional[bytes] = None
    ) -> httpx.Response:
        headers = (
            {"Content-Type": "text/plain; charset=utf-8"} if content is not None else None
        )
        try:
            return await self._client.request(
                method, self._value_path(key), content=content, headers=headers
            )
        except httpx.HTTPError as exc:
            log_event(
                logger,
                logging.WARNING,
                "kv.cloudflare.request.failed",
                method=method,
                exc=exc,
            )
            raise KeyValueStoreError(
                f"Cloudflare KV network error for {method}: {exc}"
            ) from exc

    async def get(self, key: str) -> Optional[str]:
        response = await self._request("GET", key)
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise KeyValueStoreError(
                f"Cloudflare KV read failed: status={response.status_code} "
                f"error={_error_summary(response)!r}"
            )
        return response.content.decode("utf-8")

    async def put(self, key: str, value: str) -> None:
        response = await self._request("PUT", key, content=value.encode("utf-8"))
        if not response.is_success:
            raise KeyValueStoreError(
                f"Cloudflare KV write failed: status={response.status_code} "
                f"error={_error_summary(response)!r}"
            )
