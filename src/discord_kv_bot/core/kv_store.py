from __future__ import annotations

import asyncio
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .config import StoreConfig

KV_SCHEMA_VERSION = 1

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA busy_timeout=5000;",
)


class KeyValueStoreError(Exception):
    """Raised when the backing key-value store rejects or fails a call."""


@runtime_checkable
class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def put(self, key: str, value: str) -> None: ...

    async def close(self) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and throwaway local runs."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    async def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    async def put(self, key: str, value: str) -> None:
        self._values[key] = value

    async def close(self) -> None:
        return None


class SqliteKeyValueStore:
    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kv-store")
        self._connection: Optional[sqlite3.Connection] = None

    @property
    def path(self) -> Path:
        return self._db_path

    async def initialize(self) -> None:
        await self._run(self._connection_sync)

    async def get(self, key: str) -> Optional[str]:
        return await self._run(self._get_sync, key)

    async def put(self, key: str, value: str) -> None:
        await self._run(self._put_sync, key, value)

    async def close(self) -> None:
        await self._run(self._close_sync)
        self._executor.shutdown(wait=True)

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, func, *args)
        except sqlite3.Error as exc:
            raise KeyValueStoreError(f"sqlite store failure: {exc}") from exc

    def _connection_sync(self) -> sqlite3.Connection:
        if self._connection is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._db_path)
            for pragma in SQLITE_PRAGMAS:
                conn.execute(pragma)
            self._ensure_schema(conn)
            self._connection = conn
        return self._connection

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                )
                """
            )
            conn.execute(f"PRAGMA user_version={KV_SCHEMA_VERSION};")

    def _get_sync(self, key: str) -> Optional[str]:
        conn = self._connection_sync()
        row = conn.execute(
            "SELECT value FROM kv_entries WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        return str(row[0])

    def _put_sync(self, key: str, value: str) -> None:
        conn = self._connection_sync()
        with conn:
            conn.execute(
                """
                INSERT INTO kv_entries (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
                """,
                (key, value),
            )

    def _close_sync(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None


def build_store(config: "StoreConfig") -> KeyValueStore:
    if config.backend == "memory":
        return InMemoryKeyValueStore()
    if config.backend == "sqlite":
        if config.path is None:
            raise KeyValueStoreError("sqlite store requires store.path")
        return SqliteKeyValueStore(config.path)
    if config.backend == "cloudflare":
        from ..integrations.cloudflare.kv import CloudflareKVStore

        cf = config.cloudflare
        missing = cf.missing()
        if missing:
            raise KeyValueStoreError(
                f"cloudflare store requires env vars: {', '.join(missing)}"
            )
        return CloudflareKVStore(
            account_id=cf.account_id or "",
            namespace_id=cf.namespace_id or "",
            api_token=cf.api_token or "",
        )
    raise KeyValueStoreError(f"unknown store backend: {config.backend}")
