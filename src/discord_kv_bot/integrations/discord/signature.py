"""Ed25519 verification for inbound interaction webhooks.

Discord signs ``timestamp + body`` with the application's private key and sends
the detached signature as hex. The public key from the developer portal is also
hex encoded.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import VerifyKey

from ...core.logging_utils import log_event
from .errors import DiscordSignatureError

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def decode_hex(value: str) -> bytes:
    if len(value) % 2 != 0:
        raise DiscordSignatureError("Invalid hex string: odd length")
    if _HEX_RE.fullmatch(value) is None:
        raise DiscordSignatureError("Invalid hex string: non-hex characters")
    return bytes.fromhex(value)


def verify_signature(
    *,
    body: bytes,
    signature: str,
    timestamp: str,
    public_key: Optional[str],
) -> bool:
    if not public_key:
        log_event(logger, logging.ERROR, "discord.signature.missing_public_key")
        return False

    try:
        message = timestamp.encode("utf-8") + body
        verify_key = VerifyKey(decode_hex(public_key))
        verify_key.verify(message, decode_hex(signature))
    except BadSignatureError:
        return False
    except (DiscordSignatureError, CryptoError, TypeError, ValueError) as exc:
        log_event(logger, logging.WARNING, "discord.signature.invalid", exc=exc)
        return False
    return True
