"""Tests for the response cache (freshness, validity, reads)."""

import pytest

from fetchguard import AsyncMemoryStore, ResponseCache, parse_with
from fetchguard.serialization import json_loads

ADDRESS = "https://api.example.com/users?page=1"


@pytest.fixture
def cache(clock) -> ResponseCache:
    """Create a ResponseCache whose store and reader share one clock."""
    return ResponseCache(AsyncMemoryStore(clock=clock), clock=clock)


class TestValidity:
    """Tests for is_valid and expiry boundaries."""

    async def test_missing_entry_is_invalid(self, cache: ResponseCache) -> None:
        assert not await cache.is_valid(ADDRESS)
        assert not await cache.is_valid(ADDRESS, 60_000)

    async def test_no_expiry_accepts_any_age(
        self, cache: ResponseCache, clock
    ) -> None:
        await cache.write(ADDRESS, "[]")
        clock.advance(365 * 86_400)
        assert await cache.is_valid(ADDRESS)

    async def test_expiry_boundary(self, cache: ResponseCache, clock) -> None:
        """Test that an entry is valid just before expiry and invalid just after."""
        await cache.write(ADDRESS, "[]")
        clock.advance(299.99)
        assert await cache.is_valid(ADDRESS, 300_000)
        clock.advance(0.02)
        assert not await cache.is_valid(ADDRESS, 300_000)

    async def test_rewrite_refreshes_age(
        self, cache: ResponseCache, clock
    ) -> None:
        await cache.write(ADDRESS, "[1]")
        clock.advance(600)
        assert not await cache.is_valid(ADDRESS, 300_000)
        await cache.write(ADDRESS, "[2]")
        assert await cache.is_valid(ADDRESS, 300_000)


class TestRead:
    """Tests for read and lookup."""

    async def test_round_trip(self, cache: ResponseCache) -> None:
        payload = '{"id": 1, "name": "Zoë"}\r\n'
        await cache.write(ADDRESS, payload)
        hit = await cache.lookup(ADDRESS, json_loads)
        assert hit is not None
        assert hit.entry.payload == payload
        assert hit.value == {"id": 1, "name": "Zoë"}

    async def test_read_missing_returns_none(self, cache: ResponseCache) -> None:
        assert await cache.read(ADDRESS, json_loads) is None

    async def test_unreadable_entry_is_absent(self, cache: ResponseCache) -> None:
        """Test that a payload that cannot be deserialized reads as absent."""
        await cache.write(ADDRESS, "<html>maintenance</html>")
        assert await cache.read(ADDRESS, json_loads) is None
        assert await cache.lookup(ADDRESS, json_loads) is None

    async def test_converter_failure_is_absent(self, cache: ResponseCache) -> None:
        await cache.write(ADDRESS, '{"unexpected": true}')
        deserialize = parse_with(lambda data: data["id"])
        assert await cache.read(ADDRESS, deserialize) is None

    async def test_lookup_respects_expiry(
        self, cache: ResponseCache, clock
    ) -> None:
        await cache.write(ADDRESS, "[]")
        clock.advance(61)
        assert await cache.lookup(ADDRESS, json_loads, 60_000) is None
        assert await cache.lookup(ADDRESS, json_loads) is not None


class TestDelete:
    """Tests for administrative invalidation."""

    async def test_delete_one(self, cache: ResponseCache) -> None:
        await cache.write(ADDRESS, "[]")
        await cache.write("other", "[]")
        await cache.delete(ADDRESS)
        assert not await cache.is_valid(ADDRESS)
        assert await cache.is_valid("other")

    async def test_delete_all(self, cache: ResponseCache) -> None:
        await cache.write(ADDRESS, "[]")
        await cache.write("other", "[]")
        await cache.delete_all()
        assert not await cache.is_valid(ADDRESS)
        assert not await cache.is_valid("other")
