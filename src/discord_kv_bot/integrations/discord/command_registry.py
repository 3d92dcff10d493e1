from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from ...core.config import RegistrarSettings
from ...core.logging_utils import log_event
from .commands import build_application_commands
from .errors import DiscordConfigError
from .oauth import fetch_client_credentials_token
from .rest import DiscordRestClient


async def sync_commands(
    rest: DiscordRestClient,
    *,
    application_id: str,
    guild_id: str,
    commands: list[dict[str, Any]],
    logger: logging.Logger,
) -> list[dict[str, Any]]:
    """Replace the guild's command set with ``commands``.

    Commands registered in the guild but absent from ``commands`` are removed.
    """
    normalized_guild_id = guild_id.strip()
    if not normalized_guild_id:
        raise ValueError("guild_id must be non-empty")

    updated = await rest.bulk_overwrite_application_commands(
        application_id=application_id,
        guild_id=normalized_guild_id,
        commands=commands,
    )
    log_event(
        logger,
        logging.INFO,
        "discord.commands.sync.overwrite",
        scope="guild",
        guild_id=normalized_guild_id,
        application_id=application_id,
        command_count=len(commands),
        updated_count=len(updated),
    )
    return updated


async def register_guild_commands(
    settings: RegistrarSettings,
    *,
    logger: logging.Logger,
    token_fetcher: Callable[..., Awaitable[str]] = fetch_client_credentials_token,
    rest_client_factory: Callable[..., Any] = DiscordRestClient,
    sync_func: Callable[..., Awaitable[Any]] = sync_commands,
) -> None:
    missing = settings.missing()
    if missing:
        raise DiscordConfigError(f"Missing required environment variable: {missing[0]}")
    application_id = settings.application_id or ""

    token = await token_fetcher(
        application_id=application_id,
        client_secret=settings.client_secret or "",
    )
    async with rest_client_factory(access_token=token) as rest:
        await sync_func(
            rest,
            application_id=application_id,
            guild_id=settings.dev_guild_id or "",
            commands=build_application_commands(),
            logger=logger,
        )
