from __future__ import annotations

import pytest

from discord_kv_bot.integrations.discord.interactions import (
    extract_command_name_and_options,
    extract_guild_id,
    extract_interaction_id,
    extract_interaction_type,
    extract_user_id,
)


def test_extract_command_name_and_options_for_set() -> None:
    payload = {
        "data": {
            "name": "set",
            "options": [
                {"type": 3, "name": "key", "value": "foo"},
                {"type": 3, "name": "value", "value": "bar"},
            ],
        }
    }
    name, options = extract_command_name_and_options(payload)
    assert name == "set"
    assert options == {"key": "foo", "value": "bar"}


def test_extract_command_name_and_options_keeps_first_duplicate() -> None:
    payload = {
        "data": {
            "name": "get",
            "options": [
                {"name": "key", "value": "first"},
                {"name": "key", "value": "second"},
                "garbage",
                {"value": "nameless"},
            ],
        }
    }
    _name, options = extract_command_name_and_options(payload)
    assert options == {"key": "first"}


def test_extract_command_name_and_options_without_data() -> None:
    assert extract_command_name_and_options({"type": 2}) == (None, {})
    assert extract_command_name_and_options({"data": "nope"}) == (None, {})


def test_extract_ids_from_interaction_payload() -> None:
    payload = {
        "id": "inter-1",
        "guild_id": "guild-1",
        "member": {"user": {"id": "user-1"}},
    }
    assert extract_interaction_id(payload) == "inter-1"
    assert extract_guild_id(payload) == "guild-1"
    assert extract_user_id(payload) == "user-1"


def test_extract_user_id_falls_back_to_dm_user() -> None:
    payload = {"user": {"id": "user-2"}}
    assert extract_user_id(payload) == "user-2"
    assert extract_guild_id(payload) is None


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"type": 1}, 1),
        ({"type": 2}, 2),
        ({"type": 3}, 3),
        ({"type": "1"}, None),
        ({"type": True}, None),
        ({"type": 2.0}, 2),
        ({"type": 1.5}, None),
        ({}, None),
        ([1, 2], None),
        ("text", None),
    ],
)
def test_extract_interaction_type(payload, expected) -> None:
    assert extract_interaction_type(payload) == expected
