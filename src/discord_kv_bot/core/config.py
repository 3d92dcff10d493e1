from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger("discord_kv_bot.core.config")

CONFIG_FILENAME = "discord-kv-bot.yml"
STATE_DIRNAME = ".discord-kv-bot"

DEFAULT_PUBLIC_KEY_ENV = "DISCORD_PUBLIC_KEY"
DEFAULT_APPLICATION_ID_ENV = "DISCORD_APPLICATION_ID"
DEFAULT_CLIENT_SECRET_ENV = "DISCORD_CLIENT_SECRET"
DEFAULT_DEV_GUILD_ID_ENV = "DEV_GUILD_ID"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787

STORE_BACKENDS = ("memory", "sqlite", "cloudflare")
DEFAULT_STORE_BACKEND = "sqlite"
DEFAULT_STORE_PATH = f"{STATE_DIRNAME}/kv.sqlite3"
DEFAULT_CF_ACCOUNT_ID_ENV = "CLOUDFLARE_ACCOUNT_ID"
DEFAULT_CF_NAMESPACE_ID_ENV = "CLOUDFLARE_KV_NAMESPACE_ID"
DEFAULT_CF_API_TOKEN_ENV = "CLOUDFLARE_API_TOKEN"

DEFAULT_LOG_PATH = f"{STATE_DIRNAME}/discord-kv-bot.log"
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 3
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the bot configuration is invalid."""


@dataclass(frozen=True)
class LogConfig:
    path: Path
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT
    level: str = "INFO"


@dataclass(frozen=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass(frozen=True)
class CloudflareKVConfig:
    account_id_env: str = DEFAULT_CF_ACCOUNT_ID_ENV
    namespace_id_env: str = DEFAULT_CF_NAMESPACE_ID_ENV
    api_token_env: str = DEFAULT_CF_API_TOKEN_ENV
    account_id: Optional[str] = None
    namespace_id: Optional[str] = None
    api_token: Optional[str] = None

    def missing(self) -> list[str]:
        pairs = (
            (self.account_id_env, self.account_id),
            (self.namespace_id_env, self.namespace_id),
            (self.api_token_env, self.api_token),
        )
        return [env_name for env_name, value in pairs if not value]


@dataclass(frozen=True)
class StoreConfig:
    backend: str = DEFAULT_STORE_BACKEND
    path: Optional[Path] = None
    cloudflare: CloudflareKVConfig = field(default_factory=CloudflareKVConfig)


@dataclass(frozen=True)
class RegistrarSettings:
    """Settings the command registrar needs before it touches the network."""

    application_id_env: str
    client_secret_env: str
    dev_guild_id_env: str
    application_id: Optional[str]
    client_secret: Optional[str]
    dev_guild_id: Optional[str]

    def missing(self) -> list[str]:
        pairs = (
            (self.application_id_env, self.application_id),
            (self.client_secret_env, self.client_secret),
            (self.dev_guild_id_env, self.dev_guild_id),
        )
        return [env_name for env_name, value in pairs if not value]


@dataclass(frozen=True)
class BotConfig:
    root: Path
    public_key_env: str
    public_key: Optional[str]
    registrar: RegistrarSettings
    server: ServerConfig
    store: StoreConfig
    log: LogConfig

    @classmethod
    def from_raw(
        cls,
        *,
        root: Path,
        raw: Optional[dict[str, Any]] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "BotConfig":
        cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}
        source: Mapping[str, str] = env if env is not None else os.environ

        public_key_env = _parse_env_name(cfg, "public_key_env", DEFAULT_PUBLIC_KEY_ENV)
        application_id_env = _parse_env_name(
            cfg, "application_id_env", DEFAULT_APPLICATION_ID_ENV
        )
        client_secret_env = _parse_env_name(
            cfg, "client_secret_env", DEFAULT_CLIENT_SECRET_ENV
        )
        dev_guild_id_env = _parse_env_name(
            cfg, "dev_guild_id_env", DEFAULT_DEV_GUILD_ID_ENV
        )
        registrar = RegistrarSettings(
            application_id_env=application_id_env,
            client_secret_env=client_secret_env,
            dev_guild_id_env=dev_guild_id_env,
            application_id=_lookup(source, application_id_env),
            client_secret=_lookup(source, client_secret_env),
            dev_guild_id=_lookup(source, dev_guild_id_env),
        )

        return cls(
            root=root,
            public_key_env=public_key_env,
            public_key=_lookup(source, public_key_env),
            registrar=registrar,
            server=_parse_server(cfg.get("server")),
            store=_parse_store(root, cfg.get("store"), source),
            log=_parse_log(root, cfg.get("log")),
        )


def load_dotenv_for_root(root: Path) -> None:
    """
    Load ``.env`` files for the project root.

    Later files win, and values from files override inherited process env.
    """
    try:
        root = root.resolve()
        candidates = [
            root / ".env",
            root / STATE_DIRNAME / ".env",
        ]
        for candidate in candidates:
            if candidate.exists():
                load_dotenv(dotenv_path=candidate, override=True)
    except OSError as exc:
        logger.debug("Failed to load .env file: %s", exc)


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def load_config(
    root: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    load_env_files: bool = True,
) -> BotConfig:
    root = (root or Path.cwd()).resolve()
    if load_env_files and env is None:
        load_dotenv_for_root(root)
    raw = _load_yaml_dict(root / CONFIG_FILENAME)
    return BotConfig.from_raw(root=root, raw=raw, env=env)


def _lookup(source: Mapping[str, str], env_name: str) -> Optional[str]:
    value = source.get(env_name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_env_name(cfg: dict[str, Any], key: str, default: str) -> str:
    value = str(cfg.get(key, default)).strip()
    if not value:
        raise ConfigError(f"{key} must be non-empty")
    return value


def _parse_positive_int(value: Any, *, default: int, key: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer") from exc
    if parsed <= 0:
        raise ConfigError(f"{key} must be > 0")
    return parsed


def _section(value: Any, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping")
    return value


def _parse_server(value: Any) -> ServerConfig:
    cfg = _section(value, "server")
    host = str(cfg.get("host", DEFAULT_HOST)).strip() or DEFAULT_HOST
    port = _parse_positive_int(cfg.get("port"), default=DEFAULT_PORT, key="server.port")
    if port > 65535:
        raise ConfigError("server.port must be <= 65535")
    return ServerConfig(host=host, port=port)


def _parse_store(
    root: Path, value: Any, source: Mapping[str, str]
) -> StoreConfig:
    cfg = _section(value, "store")
    backend = str(cfg.get("backend", DEFAULT_STORE_BACKEND)).strip().lower()
    if backend not in STORE_BACKENDS:
        allowed = ", ".join(STORE_BACKENDS)
        raise ConfigError(f"store.backend must be one of: {allowed}")

    path_value = cfg.get("path", DEFAULT_STORE_PATH)
    if not isinstance(path_value, str) or not path_value.strip():
        raise ConfigError("store.path must be a string path")

    account_id_env = _parse_env_name(cfg, "account_id_env", DEFAULT_CF_ACCOUNT_ID_ENV)
    namespace_id_env = _parse_env_name(
        cfg, "namespace_id_env", DEFAULT_CF_NAMESPACE_ID_ENV
    )
    api_token_env = _parse_env_name(cfg, "api_token_env", DEFAULT_CF_API_TOKEN_ENV)
    cloudflare = CloudflareKVConfig(
        account_id_env=account_id_env,
        namespace_id_env=namespace_id_env,
        api_token_env=api_token_env,
        account_id=_lookup(source, account_id_env),
        namespace_id=_lookup(source, namespace_id_env),
        api_token=_lookup(source, api_token_env),
    )
    return StoreConfig(
        backend=backend,
        path=(root / path_value).resolve(),
        cloudflare=cloudflare,
    )


def _parse_log(root: Path, value: Any) -> LogConfig:
    cfg = _section(value, "log")
    path_value = cfg.get("path", DEFAULT_LOG_PATH)
    if not isinstance(path_value, str) or not path_value.strip():
        raise ConfigError("log.path must be a string path")
    level = str(cfg.get("level", "INFO")).strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"log.level must be one of: {', '.join(LOG_LEVELS)}")
    return LogConfig(
        path=(root / path_value).resolve(),
        max_bytes=_parse_positive_int(
            cfg.get("max_bytes"), default=DEFAULT_LOG_MAX_BYTES, key="log.max_bytes"
        ),
        backup_count=_parse_positive_int(
            cfg.get("backup_count"),
            default=DEFAULT_LOG_BACKUP_COUNT,
            key="log.backup_count",
        ),
        level=level,
    )
