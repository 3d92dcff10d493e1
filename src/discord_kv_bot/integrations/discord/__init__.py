"""Discord interactions webhook and command registration."""

from .command_registry import register_guild_commands, sync_commands
from .commands import build_application_commands
from .constants import (
    DISCORD_API_BASE_URL,
    DISCORD_OAUTH_TOKEN_URL,
    MESSAGE_FLAG_EPHEMERAL,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
)
from .errors import (
    DiscordAPIError,
    DiscordConfigError,
    DiscordError,
    DiscordSignatureError,
)
from .interaction_handler import DiscordInteractionHandler, InteractionReply
from .interactions import (
    extract_command_name_and_options,
    extract_guild_id,
    extract_interaction_id,
    extract_interaction_type,
    extract_user_id,
)
from .kv_commands import handle_application_command, scoped_storage_key
from .oauth import fetch_client_credentials_token
from .rendering import escape_markdown
from .rest import DiscordRestClient
from .signature import decode_hex, verify_signature

__all__ = [
    "DISCORD_API_BASE_URL",
    "DISCORD_OAUTH_TOKEN_URL",
    "MESSAGE_FLAG_EPHEMERAL",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    "DiscordError",
    "DiscordConfigError",
    "DiscordAPIError",
    "DiscordSignatureError",
    "DiscordInteractionHandler",
    "InteractionReply",
    "DiscordRestClient",
    "build_application_commands",
    "sync_commands",
    "register_guild_commands",
    "fetch_client_credentials_token",
    "extract_command_name_and_options",
    "extract_guild_id",
    "extract_interaction_id",
    "extract_interaction_type",
    "extract_user_id",
    "handle_application_command",
    "scoped_storage_key",
    "escape_markdown",
    "decode_hex",
    "verify_signature",
]
