from __future__ import annotations

import logging
from typing import Optional

import httpx

from ...core.logging_utils import log_event
from .constants import DISCORD_COMMANDS_UPDATE_SCOPE, DISCORD_OAUTH_TOKEN_URL
from .errors import DiscordAPIError
from .rest import error_message_from_response, read_json_or_none

logger = logging.getLogger(__name__)

_FAILURE_PREFIX = "Failed to obtain access token"


async def fetch_client_credentials_token(
    *,
    application_id: str,
    client_secret: str,
    scope: str = DISCORD_COMMANDS_UPDATE_SCOPE,
    token_url: str = DISCORD_OAUTH_TOKEN_URL,
    timeout_seconds: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Exchange the application's client credentials for a bearer token."""
    async with httpx.AsyncClient(
        timeout=timeout_seconds, transport=transport
    ) as client:
        try:
            response = await client.post(
                token_url,
                auth=(application_id, client_secret),
                data={"grant_type": "client_credentials", "scope": scope},
            )
        except httpx.HTTPError as exc:
            raise DiscordAPIError(f"{_FAILURE_PREFIX}: {exc}") from exc

    if not response.is_success:
        message = error_message_from_response(response, "error_description", "error")
        log_event(
            logger,
            logging.ERROR,
            "discord.oauth.token.failed",
            status_code=response.status_code,
            error=message,
        )
        raise DiscordAPIError(
            f"{_FAILURE_PREFIX}: {message}", status_code=response.status_code
        )

    body = read_json_or_none(response)
    token = body.get("access_token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token:
        raise DiscordAPIError(f"{_FAILURE_PREFIX}: response missing access_token")
    return token
