"""Storage adapters for fetchguard (async only)."""

from fetchguard.adapters.base import AsyncCacheStore
from fetchguard.adapters.file import AsyncFileStore
from fetchguard.adapters.memory import AsyncMemoryStore
from fetchguard.adapters.redis import AsyncRedisStore

__all__ = [
    "AsyncCacheStore",
    "AsyncFileStore",
    "AsyncMemoryStore",
    "AsyncRedisStore",
]
