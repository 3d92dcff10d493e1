from __future__ import annotations

from typing import Any

# Discord application command types.
CHAT_INPUT = 1

# Discord application command option types.
STRING = 3


def build_application_commands() -> list[dict[str, Any]]:
    return [
        {
            "type": CHAT_INPUT,
            "name": "set",
            "description": "Store a value for this server or DM.",
            "options": [
                {
                    "type": STRING,
                    "name": "key",
                    "description": "Key to set",
                    "required": True,
                },
                {
                    "type": STRING,
                    "name": "value",
                    "description": "Value to store",
                    "required": True,
                },
            ],
        },
        {
            "type": CHAT_INPUT,
            "name": "get",
            "description": "Retrieve a stored value for this server or DM.",
            "options": [
                {
                    "type": STRING,
                    "name": "key",
                    "description": "Key to look up",
                    "required": True,
                }
            ],
        },
    ]
