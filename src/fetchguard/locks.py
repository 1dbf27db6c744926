"""Per-address lock registry.

At most one fetch decision runs per address at a time, while callers for
different addresses never wait on each other. Locks are created lazily and
reused. The registry only touches its map between suspension points of the
event loop, so looking up or inserting a lock never needs a registry-wide
lock.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from fetchguard.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOCKS = 10_000


@dataclass
class _Slot:
    loop: asyncio.AbstractEventLoop
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0  # holders plus waiters


class LockRegistry:
    """Map from address to an asyncio lock, bounded by idle-LRU eviction.

    When more than ``max_locks`` addresses are tracked, the least recently
    used slots that nobody holds or waits on are dropped. Slots in use are
    never dropped, so the map can exceed the bound while that many addresses
    are busy at once.
    """

    def __init__(self, max_locks: int | None = DEFAULT_MAX_LOCKS) -> None:
        if max_locks is not None and max_locks < 1:
            raise ConfigurationError("max_locks must be at least 1")
        self._max_locks = max_locks
        self._slots: OrderedDict[str, _Slot] = OrderedDict()

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, address: object) -> bool:
        return address in self._slots

    def is_locked(self, address: str) -> bool:
        """Check if a fetch for this address currently holds the lock."""
        slot = self._slots.get(address)
        return slot is not None and slot.lock.locked()

    @asynccontextmanager
    async def acquire(self, address: str) -> AsyncIterator[None]:
        """Hold the lock for an address for the duration of the block.

        The lock is released on every exit path, including cancellation
        while waiting for it.
        """
        loop = asyncio.get_running_loop()
        slot = self._slots.get(address)
        # asyncio locks are bound to one loop; rebuild idle slots from another
        if slot is None or (slot.loop is not loop and slot.users == 0):
            slot = self._slots[address] = _Slot(loop=loop)
        self._slots.move_to_end(address)
        slot.users += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.users -= 1
            self._evict_idle()

    def _evict_idle(self) -> None:
        if self._max_locks is None or len(self._slots) <= self._max_locks:
            return
        excess = len(self._slots) - self._max_locks
        for address in [a for a, s in self._slots.items() if s.users == 0][:excess]:
            del self._slots[address]
        if len(self._slots) > self._max_locks:
            logger.debug(
                "Lock registry holds %d busy addresses (bound %d)",
                len(self._slots),
                self._max_locks,
            )


_default_registry: LockRegistry | None = None


def default_registry() -> LockRegistry:
    """Return the process-wide registry shared by clients by default."""
    global _default_registry
    if _default_registry is None:
        _default_registry = LockRegistry()
    return _default_registry
