"""Cache entry store: freshness, validity and reads of persisted responses."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from fetchguard.adapters.base import AsyncCacheStore
from fetchguard.errors import DeserializationError
from fetchguard.serialization import Deserializer, deserialize_payload
from fetchguard.types import CacheEntry, CacheHit

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ResponseCache:
    """Persisted GET responses keyed by resolved address.

    An entry is valid when it exists and its age does not exceed the
    requested expiry (no expiry means any age is valid). Entries that cannot
    be deserialized are reported as absent instead of raising.
    """

    def __init__(
        self,
        store: AsyncCacheStore,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._clock = clock

    @property
    def store(self) -> AsyncCacheStore:
        return self._store

    def is_fresh(self, entry: CacheEntry, expiry_ms: int | None) -> bool:
        """Check if an entry's age is within the expiry."""
        if expiry_ms is None:
            return True
        age = self._clock() * 1000 - entry.modified_at
        return age <= expiry_ms

    async def is_valid(self, address: str, expiry_ms: int | None = None) -> bool:
        """Check if an entry exists and is within the expiry."""
        entry = await self._store.read(address)
        return entry is not None and self.is_fresh(entry, expiry_ms)

    async def read(self, address: str, deserialize: Deserializer[T]) -> T | None:
        """Read and deserialize an entry, or ``None`` if absent or unreadable."""
        hit = await self.lookup(address, deserialize)
        return hit.value if hit else None

    async def lookup(
        self,
        address: str,
        deserialize: Deserializer[T],
        expiry_ms: int | None = None,
    ) -> CacheHit[T] | None:
        """Return the entry and its value if it is valid and deserializable."""
        entry = await self._store.read(address)
        if entry is None or not self.is_fresh(entry, expiry_ms):
            return None
        try:
            value = deserialize_payload(deserialize, entry.payload)
        except DeserializationError as exc:
            logger.warning("Ignoring unreadable cache entry for %s: %s", address, exc)
            return None
        return CacheHit(entry=entry, value=value)

    async def write(self, address: str, payload: str) -> None:
        """Replace the entry for an address."""
        await self._store.write(address, payload)

    async def delete(self, address: str) -> None:
        """Delete the entry for an address."""
        await self._store.delete(address)

    async def delete_all(self) -> None:
        """Delete every entry."""
        await self._store.clear()
