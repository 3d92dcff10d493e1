"""One-shot registration of the /set and /get slash commands.

Equivalent to `discord-kv-bot register-commands`; reads DISCORD_APPLICATION_ID,
DISCORD_CLIENT_SECRET and DEV_GUILD_ID from the environment (or `.env`).
"""

from __future__ import annotations

import sys

from discord_kv_bot.cli import app


def main(argv: list[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    app(["register-commands", *args])


if __name__ == "__main__":
    main()
