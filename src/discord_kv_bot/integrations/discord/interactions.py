from __future__ import annotations

from typing import Any, Optional


def _as_id(value: object) -> str | None:
    if value is None:
        return None
    token = str(value).strip()
    return token or None


def extract_interaction_type(interaction_payload: Any) -> Optional[int]:
    if not isinstance(interaction_payload, dict):
        return None
    interaction_type = interaction_payload.get("type")
    # JSON booleans decode to bool, which is an int subclass.
    if isinstance(interaction_type, bool):
        return None
    if isinstance(interaction_type, float) and interaction_type.is_integer():
        return int(interaction_type)
    if not isinstance(interaction_type, int):
        return None
    return interaction_type


def extract_command_name_and_options(
    interaction_payload: dict[str, Any],
) -> tuple[Optional[str], dict[str, Any]]:
    data = interaction_payload.get("data")
    if not isinstance(data, dict):
        return None, {}

    name = data.get("name")
    command_name = str(name) if name is not None else None

    options = data.get("options")
    parsed_options: dict[str, Any] = {}
    for item in options if isinstance(options, list) else []:
        if not isinstance(item, dict):
            continue
        option_name = item.get("name")
        if not isinstance(option_name, str) or not option_name:
            continue
        parsed_options.setdefault(option_name, item.get("value"))

    return command_name, parsed_options


def extract_interaction_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("id"))


def extract_guild_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("guild_id"))


def extract_user_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    member = interaction_payload.get("member")
    if isinstance(member, dict):
        member_user = member.get("user")
        if isinstance(member_user, dict):
            user_id = _as_id(member_user.get("id"))
            if user_id:
                return user_id
    user = interaction_payload.get("user")
    if isinstance(user, dict):
        return _as_id(user.get("id"))
    return None
