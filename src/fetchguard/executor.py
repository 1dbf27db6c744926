"""Fetch executor: one network attempt plus the cache write on success."""

from __future__ import annotations

import logging
from typing import TypeVar

from fetchguard.cache import ResponseCache
from fetchguard.serialization import Deserializer, deserialize_payload
from fetchguard.transport import Transport
from fetchguard.types import Failure, FetchOutcome, Success

T = TypeVar("T")

logger = logging.getLogger(__name__)


class FetchExecutor:
    """Performs GET attempts and persists successful responses."""

    def __init__(self, transport: Transport, cache: ResponseCache) -> None:
        self._transport = transport
        self._cache = cache

    async def attempt(
        self, address: str, deserialize: Deserializer[T]
    ) -> FetchOutcome[T]:
        """Fetch an address once.

        A response that cannot be deserialized is a failure and is not
        cached. On failure the cache is left untouched and the original
        error is returned as is.
        """
        try:
            payload = await self._transport.send("GET", address)
            value = deserialize_payload(deserialize, payload)
        except Exception as exc:
            logger.warning("GET %s failed: %s", address, exc)
            return Failure(exc)

        await self._cache.write(address, payload)
        logger.debug("GET %s succeeded, cache updated", address)
        return Success(value=value, payload=payload)
