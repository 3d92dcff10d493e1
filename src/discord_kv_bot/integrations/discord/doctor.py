"""Configuration doctor checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.config import BotConfig
from .errors import DiscordSignatureError
from .signature import decode_hex


@dataclass(frozen=True)
class DoctorCheck:
    name: str
    passed: bool
    message: str
    check_id: str
    severity: str = "info"
    fix: Optional[str] = None


def _public_key_check(config: BotConfig) -> DoctorCheck:
    if not config.public_key:
        return DoctorCheck(
            name="Discord public key",
            passed=False,
            message=f"Public key is not configured (env: {config.public_key_env}).",
            check_id="discord.public_key",
            severity="error",
            fix=f"Set {config.public_key_env} to the key from the developer portal.",
        )
    try:
        key_bytes = decode_hex(config.public_key)
    except DiscordSignatureError as exc:
        return DoctorCheck(
            name="Discord public key",
            passed=False,
            message=f"Public key is not valid hex: {exc}",
            check_id="discord.public_key",
            severity="error",
        )
    if len(key_bytes) != 32:
        return DoctorCheck(
            name="Discord public key",
            passed=False,
            message=f"Public key must be 32 bytes, got {len(key_bytes)}.",
            check_id="discord.public_key",
            severity="error",
        )
    return DoctorCheck(
        name="Discord public key",
        passed=True,
        message=f"Public key configured (env: {config.public_key_env}).",
        check_id="discord.public_key",
    )


def _registrar_check(config: BotConfig) -> DoctorCheck:
    missing = config.registrar.missing()
    if missing:
        return DoctorCheck(
            name="Command registration",
            passed=False,
            message=f"Missing env vars: {', '.join(missing)}",
            check_id="discord.registrar",
            severity="warning",
            fix="Required only for `discord-kv-bot register-commands`.",
        )
    return DoctorCheck(
        name="Command registration",
        passed=True,
        message=f"Registration targets guild {config.registrar.dev_guild_id}.",
        check_id="discord.registrar",
    )


def _store_check(config: BotConfig) -> DoctorCheck:
    store = config.store
    if store.backend == "memory":
        return DoctorCheck(
            name="Key-value store",
            passed=True,
            message="In-memory store; values are lost on restart.",
            check_id="kv.store",
            severity="warning",
        )
    if store.backend == "sqlite":
        return DoctorCheck(
            name="Key-value store",
            passed=True,
            message=f"SQLite store at {store.path}.",
            check_id="kv.store",
        )
    cf = store.cloudflare
    missing = cf.missing()
    if missing:
        return DoctorCheck(
            name="Key-value store",
            passed=False,
            message=f"Cloudflare KV store missing env vars: {', '.join(missing)}",
            check_id="kv.store",
            severity="error",
        )
    return DoctorCheck(
        name="Key-value store",
        passed=True,
        message=f"Cloudflare KV namespace {cf.namespace_id}.",
        check_id="kv.store",
    )


def discord_doctor_checks(config: BotConfig) -> list[DoctorCheck]:
    return [
        _public_key_check(config),
        _registrar_check(config),
        _store_check(config),
    ]
