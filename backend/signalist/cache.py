from __future__ import annotations

import json
from typing import Any, Awaitable, Callable

from redis.asyncio import Redis

from signalist.config.settings import settings

_client: Redis | None = None


def _get_client() -> Redis:
    global _client
    if _client is None:
        _client = Redis.from_url(settings.redis_url)
    return _client


async def get_json(cache_key: str) -> Any | None:
    try:
        client = _get_client()
        raw = await client.get(cache_key)
    except Exception:
        return None

    if not raw:
        return None

    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError):
        return None


async def set_json(cache_key: str, value: Any, ttl_seconds: int) -> None:
    try:
        client = _get_client()
        await client.setex(cache_key, ttl_seconds, json.dumps(value))
    except Exception:
        return None


async def remember(
    cache_key: str, ttl_seconds: int, loader: Callable[[], Awaitable[Any]]
) -> Any:
    cached = await get_json(cache_key)
    if cached is not None:
        return cached
    value = await loader()
    await set_json(cache_key, value, ttl_seconds)
    return value
