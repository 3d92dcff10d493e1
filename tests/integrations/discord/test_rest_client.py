from __future__ import annotations

import base64
import json
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from discord_kv_bot.integrations.discord.errors import DiscordAPIError
from discord_kv_bot.integrations.discord.oauth import fetch_client_credentials_token
from discord_kv_bot.integrations.discord.rest import DiscordRestClient

BASE_URL = "https://discord.test/api/v10"
TOKEN_URL = f"{BASE_URL}/oauth2/token"


def _rest_client(handler) -> DiscordRestClient:
    return DiscordRestClient(
        access_token="bearer-abc",
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.anyio
async def test_bulk_overwrite_puts_full_list_with_bearer_token() -> None:
    observed: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        observed["method"] = request.method
        observed["path"] = request.url.path
        observed["authorization"] = request.headers.get("Authorization")
        observed["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"id": "cmd-1", "name": "set"}])

    commands = [{"name": "set"}, {"name": "get"}]
    async with _rest_client(handler) as client:
        updated = await client.bulk_overwrite_application_commands(
            application_id="app-1", guild_id="guild-2", commands=commands
        )

    assert updated == [{"id": "cmd-1", "name": "set"}]
    assert observed == {
        "method": "PUT",
        "path": "/api/v10/applications/app-1/guilds/guild-2/commands",
        "authorization": "Bearer bearer-abc",
        "body": commands,
    }


@pytest.mark.anyio
async def test_bulk_overwrite_error_uses_body_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Missing Access", "code": 50001})

    async with _rest_client(handler) as client:
        with pytest.raises(DiscordAPIError) as excinfo:
            await client.bulk_overwrite_application_commands(
                application_id="app-1", guild_id="guild-2", commands=[]
            )

    assert str(excinfo.value) == "Failed to register commands: Missing Access"
    assert excinfo.value.status_code == 403


@pytest.mark.anyio
async def test_bulk_overwrite_error_tolerates_non_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    async with _rest_client(handler) as client:
        with pytest.raises(DiscordAPIError) as excinfo:
            await client.bulk_overwrite_application_commands(
                application_id="app-1", guild_id="guild-2", commands=[]
            )

    assert str(excinfo.value) == "Failed to register commands: Bad Gateway"


@pytest.mark.anyio
async def test_bulk_overwrite_does_not_retry() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(500, json={})

    async with _rest_client(handler) as client:
        with pytest.raises(DiscordAPIError):
            await client.bulk_overwrite_application_commands(
                application_id="app-1", guild_id="guild-2", commands=[]
            )

    assert len(attempts) == 1


@pytest.mark.anyio
async def test_fetch_token_posts_client_credentials_with_basic_auth() -> None:
    observed: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        observed["url"] = str(request.url)
        observed["authorization"] = request.headers.get("Authorization")
        observed["content_type"] = request.headers.get("Content-Type")
        observed["form"] = parse_qs(request.content.decode("utf-8"))
        return httpx.Response(
            200, json={"access_token": "tok-1", "token_type": "Bearer"}
        )

    token = await fetch_client_credentials_token(
        application_id="app-1",
        client_secret="s3cret",
        token_url=TOKEN_URL,
        transport=httpx.MockTransport(handler),
    )

    expected_basic = base64.b64encode(b"app-1:s3cret").decode("ascii")
    assert token == "tok-1"
    assert observed["url"] == TOKEN_URL
    assert observed["authorization"] == f"Basic {expected_basic}"
    assert observed["content_type"] == "application/x-www-form-urlencoded"
    assert observed["form"] == {
        "grant_type": ["client_credentials"],
        "scope": ["applications.commands.update"],
    }


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (
            httpx.Response(
                401,
                json={"error": "invalid_client", "error_description": "Bad secret"},
            ),
            "Failed to obtain access token: Bad secret",
        ),
        (
            httpx.Response(400, json={"error": "invalid_scope"}),
            "Failed to obtain access token: invalid_scope",
        ),
        (
            httpx.Response(503, text="upstream down"),
            "Failed to obtain access token: Service Unavailable",
        ),
        (
            httpx.Response(400, json=["not", "an", "object"]),
            "Failed to obtain access token: Bad Request",
        ),
    ],
)
async def test_fetch_token_error_messages(
    response: httpx.Response, expected: str
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(DiscordAPIError) as excinfo:
        await fetch_client_credentials_token(
            application_id="app-1",
            client_secret="s3cret",
            token_url=TOKEN_URL,
            transport=httpx.MockTransport(handler),
        )

    assert str(excinfo.value) == expected


@pytest.mark.anyio
async def test_fetch_token_rejects_success_without_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"token_type": "Bearer"})

    with pytest.raises(DiscordAPIError):
        await fetch_client_credentials_token(
            application_id="app-1",
            client_secret="s3cret",
            token_url=TOKEN_URL,
            transport=httpx.MockTransport(handler),
        )


@pytest.mark.anyio
async def test_fetch_token_wraps_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DiscordAPIError) as excinfo:
        await fetch_client_credentials_token(
            application_id="app-1",
            client_secret="s3cret",
            token_url=TOKEN_URL,
            transport=httpx.MockTransport(handler),
        )

    assert "connection refused" in str(excinfo.value)
