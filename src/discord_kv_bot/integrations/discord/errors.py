from __future__ import annotations

from typing import Optional


class DiscordError(Exception):
    """Base Discord integration error."""


class DiscordConfigError(DiscordError):
    """Discord integration configuration error."""


class DiscordAPIError(DiscordError):
    """Discord API request error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DiscordSignatureError(DiscordError):
    """Malformed signature material (bad hex, wrong key length)."""
