"""Test harness configuration.

This repo uses a `src/` layout. Ensure tests always import the in-repo code,
even when an older `discord_kv_bot` is installed in the environment.
"""

from __future__ import annotations

import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import pytest

DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS = 60


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    src_path = str(src_dir)
    if sys.path[:1] != [src_path] and src_path not in sys.path:
        sys.path.insert(0, src_path)


def pytest_collection_modifyitems(
    session: pytest.Session, config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Apply a default per-test timeout to non-integration tests."""
    _ = session, config
    for item in items:
        if item.get_closest_marker("integration") is not None:
            continue
        item.add_marker(pytest.mark.timeout(DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS))


@pytest.fixture()
def anyio_backend() -> str:
    # The code under test is asyncio-based; don't run anyio tests on trio.
    return "asyncio"


@dataclass(frozen=True)
class SignedRequestFactory:
    """Signs interaction bodies the way Discord does."""

    signing_key: Any

    @property
    def public_key_hex(self) -> str:
        return self.signing_key.verify_key.encode().hex()

    def sign(self, body: bytes, timestamp: str) -> str:
        return self.signing_key.sign(timestamp.encode("utf-8") + body).signature.hex()

    def headers(
        self,
        body: bytes,
        *,
        timestamp: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> dict[str, str]:
        ts = timestamp if timestamp is not None else str(int(time.time()))
        return {
            "Content-Type": "application/json",
            "X-Signature-Ed25519": signature
            if signature is not None
            else self.sign(body, ts),
            "X-Signature-Timestamp": ts,
        }

    def encode(self, payload: Any) -> bytes:
        return json.dumps(payload).encode("utf-8")


@pytest.fixture()
def signer() -> SignedRequestFactory:
    # Import lazily so `pytest_configure()` has adjusted sys.path first.
    from nacl.signing import SigningKey

    return SignedRequestFactory(signing_key=SigningKey.generate())


def command_interaction(
    name: Optional[str],
    options: Optional[dict[str, Any]] = None,
    *,
    guild_id: Optional[str] = "g1",
    interaction_id: str = "inter-1",
) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if name is not None:
        data["name"] = name
    if options is not None:
        data["options"] = [
            {"type": 3, "name": option_name, "value": value}
            for option_name, value in options.items()
        ]
    payload: dict[str, Any] = {
        "id": interaction_id,
        "type": 2,
        "data": data,
        "member": {"user": {"id": "user-1"}},
    }
    if guild_id is not None:
        payload["guild_id"] = guild_id
    return payload
