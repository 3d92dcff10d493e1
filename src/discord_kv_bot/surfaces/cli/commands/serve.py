from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import typer
import uvicorn

from ....core.config import BotConfig
from ....core.kv_store import KeyValueStoreError
from ....core.logging_utils import setup_rotating_logger
from ...web.app import create_app


def register_serve_commands(
    app: typer.Typer,
    *,
    require_config: Callable[[Optional[Path]], BotConfig],
    raise_exit: Callable,
) -> None:
    @app.command("serve")
    def serve(
        path: Optional[Path] = typer.Option(None, "--path", help="Project root path"),
        host: Optional[str] = typer.Option(None, "--host", help="Host to bind"),
        port: Optional[int] = typer.Option(None, "--port", help="Port to bind"),
    ) -> None:
        """Serve the interactions endpoint."""
        config = require_config(path)
        if not config.public_key:
            typer.echo(
                f"warning: {config.public_key_env} is unset; every request will be rejected",
                err=True,
            )
        logger = setup_rotating_logger("discord_kv_bot", config.log)
        try:
            web_app = create_app(config, logger=logger)
        except KeyValueStoreError as exc:
            raise_exit(str(exc), cause=exc)
        uvicorn.run(
            web_app,
            host=host or config.server.host,
            port=port or config.server.port,
            log_level=config.log.level.lower(),
        )
