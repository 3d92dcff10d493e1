from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ...core.kv_store import KeyValueStore
from ...core.logging_utils import log_event
from .constants import (
    INTERACTION_TYPE_APPLICATION_COMMAND,
    INTERACTION_TYPE_PING,
    MESSAGE_FLAG_EPHEMERAL,
    RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
)
from .interactions import (
    extract_command_name_and_options,
    extract_guild_id,
    extract_interaction_id,
    extract_interaction_type,
    extract_user_id,
)
from .kv_commands import handle_application_command
from .rendering import ephemeral_message_response, pong_response
from .signature import verify_signature

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


@dataclass(frozen=True)
class InteractionReply:
    status_code: int
    payload: Optional[dict[str, Any]] = None
    text: Optional[str] = None

    @classmethod
    def json(cls, payload: dict[str, Any], status_code: int = 200) -> "InteractionReply":
        return cls(status_code=status_code, payload=payload)

    @classmethod
    def plain(cls, text: str, status_code: int) -> "InteractionReply":
        return cls(status_code=status_code, text=text)


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        value = headers.get(name.lower())
    return value or None


class DiscordInteractionHandler:
    """Verifies and answers one interaction webhook request at a time."""

    def __init__(
        self,
        *,
        public_key: Optional[str],
        store: KeyValueStore,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._public_key = public_key
        self._store = store
        self._logger = logger or logging.getLogger(__name__)

    async def handle(
        self, method: str, headers: Mapping[str, str], body: bytes
    ) -> InteractionReply:
        if method.upper() != "POST":
            return InteractionReply.plain("Method Not Allowed", 405)

        signature = _header(headers, SIGNATURE_HEADER)
        timestamp = _header(headers, TIMESTAMP_HEADER)
        if not signature or not timestamp:
            return InteractionReply.plain("Missing signature headers", 401)

        if not verify_signature(
            body=body,
            signature=signature,
            timestamp=timestamp,
            public_key=self._public_key,
        ):
            return InteractionReply.plain("Invalid request signature", 401)

        try:
            interaction = json.loads(body)
        except (ValueError, RecursionError):
            return InteractionReply.plain("Invalid JSON body", 400)

        interaction_type = extract_interaction_type(interaction)
        if interaction_type == INTERACTION_TYPE_PING:
            return InteractionReply.json(pong_response())
        if interaction_type != INTERACTION_TYPE_APPLICATION_COMMAND:
            return InteractionReply.plain("Unsupported interaction type", 400)

        return await self._run_command(interaction)

    async def _run_command(self, interaction: dict[str, Any]) -> InteractionReply:
        command_name, _options = extract_command_name_and_options(interaction)
        log_event(
            self._logger,
            logging.INFO,
            "discord.interaction.command",
            interaction_id=extract_interaction_id(interaction),
            guild_id=extract_guild_id(interaction),
            user_id=extract_user_id(interaction),
            command=command_name,
        )
        try:
            data = await handle_application_command(interaction, self._store)
        except Exception as exc:
            log_event(
                self._logger,
                logging.ERROR,
                "discord.interaction.failed",
                interaction_id=extract_interaction_id(interaction),
                command=command_name,
                exc=exc,
            )
            return InteractionReply.json(
                ephemeral_message_response(GENERIC_ERROR_MESSAGE), status_code=500
            )

        return InteractionReply.json(
            {
                "type": RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE,
                "data": {**data, "flags": MESSAGE_FLAG_EPHEMERAL},
            }
        )
