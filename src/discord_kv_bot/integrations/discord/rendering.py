from __future__ import annotations

import re
from typing import Any

from .constants import (
    MESSAGE_FLAG_EPHEMERAL,
    RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE,
    RESPONSE_TYPE_PONG,
)

_MARKDOWN_ESCAPE_RE = re.compile(r"([\\*_`~])")


def escape_markdown(text: object) -> str:
    value = str(text)
    if not value:
        return ""
    return _MARKDOWN_ESCAPE_RE.sub(r"\\\1", value)


def format_bold(text: object) -> str:
    return f"**{escape_markdown(text)}**"


def pong_response() -> dict[str, Any]:
    return {"type": RESPONSE_TYPE_PONG}


def ephemeral_message_response(content: str) -> dict[str, Any]:
    return {
        "type": RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE,
        "data": {"content": content, "flags": MESSAGE_FLAG_EPHEMERAL},
    }
