"""In-memory storage adapter (async only)."""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Callable

from fetchguard.types import CacheEntry


class AsyncMemoryStore:
    """Async in-memory storage adapter with optional LRU eviction."""

    def __init__(
        self,
        max_items: int | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_items = max_items
        self._clock = clock
        self._lock = asyncio.Lock()

    async def read(self, address: str) -> CacheEntry | None:
        """Get the entry for an address."""
        async with self._lock:
            entry = self._cache.get(address)
            if entry:
                self._cache.move_to_end(address)  # LRU touch
            return entry

    async def write(self, address: str, payload: str) -> None:
        """Store a payload stamped with the current clock time."""
        entry = CacheEntry(
            address=address,
            payload=payload,
            modified_at=int(self._clock() * 1000),
        )
        async with self._lock:
            self._cache[address] = entry
            self._cache.move_to_end(address)
            if self._max_items and len(self._cache) > self._max_items:
                self._cache.popitem(last=False)

    async def delete(self, address: str) -> None:
        """Delete the entry for an address."""
        async with self._lock:
            self._cache.pop(address, None)

    async def clear(self) -> None:
        """Delete all entries."""
        async with self._lock:
            self._cache.clear()

    async def disconnect(self) -> None:
        """Disconnect from the storage backend (no-op for memory)."""
        pass
