from __future__ import annotations

DISCORD_API_BASE_URL = "https://discord.com/api/v10"
DISCORD_OAUTH_TOKEN_URL = f"{DISCORD_API_BASE_URL}/oauth2/token"
DISCORD_COMMANDS_UPDATE_SCOPE = "applications.commands.update"

# Request headers carrying the detached Ed25519 signature.
SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"

# Interaction types (https://discord.com/developers/docs/interactions/receiving-and-responding).
INTERACTION_TYPE_PING = 1
INTERACTION_TYPE_APPLICATION_COMMAND = 2

# Interaction callback types.
RESPONSE_TYPE_PONG = 1
RESPONSE_TYPE_CHANNEL_MESSAGE_WITH_SOURCE = 4

MESSAGE_FLAG_EPHEMERAL = 1 << 6

# Storage scope used when an interaction arrives outside a guild.
DM_SCOPE = "dm"
