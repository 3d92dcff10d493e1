from __future__ import annotations

from typing import Any, Optional

import httpx

from .constants import DISCORD_API_BASE_URL
from .errors import DiscordAPIError


def read_json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def error_message_from_response(response: httpx.Response, *keys: str) -> str:
    """Pick the first non-empty ``keys`` entry of a JSON error body.

    Falls back to the HTTP reason phrase when the body is not a JSON object or
    carries none of the keys.
    """
    body = read_json_or_none(response)
    if isinstance(body, dict):
        for key in keys:
            value = body.get(key)
            if value:
                return str(value)
    return response.reason_phrase or f"HTTP {response.status_code}"


class DiscordRestClient:
    def __init__(
        self,
        *,
        access_token: str,
        token_type: str = "Bearer",
        timeout_seconds: float = 10.0,
        base_url: str = DISCORD_API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds, transport=transport
        )
        self._authorization_header = f"{token_type} {access_token}"

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DiscordRestClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | list[dict[str, Any]] | None = None,
        failure_prefix: str,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                json=payload,
                headers={"Authorization": self._authorization_header},
            )
        except httpx.HTTPError as exc:
            raise DiscordAPIError(f"{failure_prefix}: {exc}") from exc

        if not response.is_success:
            message = error_message_from_response(response, "message")
            raise DiscordAPIError(
                f"{failure_prefix}: {message}", status_code=response.status_code
            )

        if not response.content:
            return {}
        return read_json_or_none(response)

    async def bulk_overwrite_application_commands(
        self,
        *,
        application_id: str,
        guild_id: str,
        commands: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        path = f"/applications/{application_id}/guilds/{guild_id}/commands"
        payload = await self._request(
            "PUT", path, payload=commands, failure_prefix="Failed to register commands"
        )
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]
