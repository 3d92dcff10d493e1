from __future__ import annotations

from typing import Any, Optional

from ...core.kv_store import KeyValueStore
from .constants import DM_SCOPE
from .interactions import extract_command_name_and_options
from .rendering import escape_markdown, format_bold


def scoped_storage_key(guild_id: Optional[str], key: str) -> str:
    return f"g:{guild_id or DM_SCOPE}:{key}"


def _guild_scope(interaction: dict[str, Any]) -> Optional[str]:
    # Raw value, not the stripped id used for logging.
    guild_id = interaction.get("guild_id")
    return str(guild_id) if guild_id else None


async def handle_set_command(
    interaction: dict[str, Any], options: dict[str, Any], store: KeyValueStore
) -> dict[str, Any]:
    key = options.get("key")
    value = options.get("value")
    if not key or not value:
        return {"content": "Both key and value must be provided."}

    storage_key = scoped_storage_key(_guild_scope(interaction), str(key))
    await store.put(storage_key, str(value))
    return {"content": f"Saved {format_bold(key)}."}


async def handle_get_command(
    interaction: dict[str, Any], options: dict[str, Any], store: KeyValueStore
) -> dict[str, Any]:
    key = options.get("key")
    if not key:
        return {"content": "Key must be provided."}

    storage_key = scoped_storage_key(_guild_scope(interaction), str(key))
    value = await store.get(storage_key)
    if value is None:
        return {"content": f"No value found for {format_bold(key)}."}
    return {"content": f"{format_bold(key)} → {escape_markdown(value)}"}


async def handle_application_command(
    interaction: dict[str, Any], store: KeyValueStore
) -> dict[str, Any]:
    """Run a slash command and return the response ``data`` payload."""
    name, options = extract_command_name_and_options(interaction)
    if name == "set":
        return await handle_set_command(interaction, options, store)
    if name == "get":
        return await handle_get_command(interaction, options, store)
    return {"content": f"Unknown command: {name or ''}"}
