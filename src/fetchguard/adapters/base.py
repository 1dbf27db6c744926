"""Base adapter protocol for cache storage backends."""

from typing import Protocol, runtime_checkable

from fetchguard.types import CacheEntry


@runtime_checkable
class AsyncCacheStore(Protocol):
    """Async keyed store holding one serialized response per address.

    Implementations must replace entries atomically, so a concurrent reader
    sees either the previous payload or the new one, never a partial write.
    ``CacheEntry.modified_at`` must be the monotonic last-write time of the
    slot; it is the only freshness signal the client uses.
    """

    async def read(self, address: str) -> CacheEntry | None:
        """Get the entry for an address."""
        ...

    async def write(self, address: str, payload: str) -> None:
        """Store a payload, replacing any previous entry."""
        ...

    async def delete(self, address: str) -> None:
        """Delete the entry for an address."""
        ...

    async def clear(self) -> None:
        """Delete all entries."""
        ...

    async def disconnect(self) -> None:
        """Release backend resources."""
        ...
