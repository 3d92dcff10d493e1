from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer

from ....core.config import BotConfig
from ....integrations.discord.command_registry import register_guild_commands
from ....integrations.discord.doctor import discord_doctor_checks
from ....integrations.discord.errors import DiscordError


def register_discord_commands(
    app: typer.Typer,
    *,
    require_config: Callable[[Optional[Path]], BotConfig],
    raise_exit: Callable,
    register_func: Callable[..., Awaitable[Any]] = register_guild_commands,
) -> None:
    @app.command("register-commands")
    def discord_register_commands(
        path: Optional[Path] = typer.Option(None, "--path", help="Project root path"),
    ) -> None:
        """Replace the dev guild's slash commands with /set and /get."""
        config = require_config(path)
        missing = config.registrar.missing()
        if missing:
            raise_exit(f"Missing required environment variable: {missing[0]}")

        try:
            asyncio.run(
                register_func(
                    config.registrar,
                    logger=logging.getLogger("discord_kv_bot.discord.commands"),
                )
            )
        except (DiscordError, ValueError) as exc:
            raise_exit(str(exc), cause=exc)

        typer.echo("Slash commands registered to guild successfully.")

    @app.command("doctor")
    def discord_doctor(
        path: Optional[Path] = typer.Option(None, "--path", help="Project root path"),
    ) -> None:
        """Report whether the bot is configured to serve and register commands."""
        config = require_config(path)
        checks = discord_doctor_checks(config)
        failed = False
        for check in checks:
            status = "ok" if check.passed else check.severity
            typer.echo(f"[{status}] {check.name}: {check.message}")
            if check.fix and not check.passed:
                typer.echo(f"    fix: {check.fix}")
            if not check.passed and check.severity == "error":
                failed = True
        if failed:
            raise typer.Exit(code=1)
