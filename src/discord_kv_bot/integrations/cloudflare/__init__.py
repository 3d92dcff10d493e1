"""Cloudflare Workers KV adapter."""

from .kv import CLOUDFLARE_API_BASE_URL, CloudflareKVStore

__all__ = ["CLOUDFLARE_API_BASE_URL", "CloudflareKVStore"]
