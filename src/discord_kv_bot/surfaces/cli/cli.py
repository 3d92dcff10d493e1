import logging

import typer

from .commands.discord import register_discord_commands
from .commands.serve import register_serve_commands
from .commands.utils import get_version
from .commands.utils import raise_exit as _raise_exit
from .commands.utils import require_config as _require_config

logger = logging.getLogger("discord_kv_bot.cli")

app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"discord-kv-bot {get_version()}")
    raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    # `--version` is handled eagerly via `_version_callback`.
    return


def main() -> None:
    """Entrypoint for CLI execution."""
    app()


register_serve_commands(
    app,
    require_config=_require_config,
    raise_exit=_raise_exit,
)
register_discord_commands(
    app,
    require_config=_require_config,
    raise_exit=_raise_exit,
)
