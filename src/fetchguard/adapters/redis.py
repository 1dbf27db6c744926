"""Redis storage adapter."""

from __future__ import annotations

import time
from typing import Any

from fetchguard.types import CacheEntry

_PAYLOAD = b"payload"
_MODIFIED_AT = b"modified_at"


def _as_text(data: bytes | str) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8")
    return data


class AsyncRedisStore:
    """Async Redis storage adapter.

    Each address is stored as a hash holding the payload and the write
    timestamp, written in a single ``HSET`` so both fields change together.
    """

    def __init__(
        self,
        client: Any,  # redis.asyncio.Redis
        *,
        prefix: str = "fetchguard",
    ) -> None:
        self._client = client
        self._prefix = prefix

    def _cache_key(self, address: str) -> str:
        """Generate full Redis key for cache entries."""
        return f"{self._prefix}:cache:{address}"

    async def read(self, address: str) -> CacheEntry | None:
        """Get the entry for an address."""
        data = await self._client.hgetall(self._cache_key(address))
        if not data:
            return None
        fields = {_as_text(k): v for k, v in data.items()}
        if "payload" not in fields or "modified_at" not in fields:
            return None
        return CacheEntry(
            address=address,
            payload=_as_text(fields["payload"]),
            modified_at=int(fields["modified_at"]),
        )

    async def write(self, address: str, payload: str) -> None:
        """Store a payload stamped with the current time."""
        await self._client.hset(
            self._cache_key(address),
            mapping={
                _PAYLOAD: payload,
                _MODIFIED_AT: str(int(time.time() * 1000)),
            },
        )

    async def delete(self, address: str) -> None:
        """Delete the entry for an address."""
        await self._client.delete(self._cache_key(address))

    async def clear(self) -> None:
        """Delete all entries under this store's prefix."""
        # Use SCAN to find and delete all cache keys
        cursor: int = 0
        pattern = f"{self._prefix}:cache:*"
        while True:
            result = await self._client.scan(cursor, match=pattern, count=100)
            cursor = result[0]
            keys = result[1]
            if keys:
                await self._client.delete(*keys)
            if cursor == 0:
                break

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
