"""Async API client with cache policies for GET requests."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

from fetchguard.adapters.base import AsyncCacheStore
from fetchguard.adapters.file import AsyncFileStore
from fetchguard.address import QueryParams, join_url, resolve_address
from fetchguard.cache import ResponseCache
from fetchguard.duration import parse_expiry
from fetchguard.errors import ConfigurationError
from fetchguard.executor import FetchExecutor
from fetchguard.locks import LockRegistry, default_registry
from fetchguard.notifications import DegradeNotifier, Observer, default_notifier
from fetchguard.policy import (
    Action,
    Notify,
    consults_cache_first,
    consults_cache_on_failure,
    resolve_failure,
    should_use_cache_first,
)
from fetchguard.serialization import Deserializer, json_loads
from fetchguard.transport import HttpxTransport, Transport
from fetchguard.types import (
    CacheHit,
    CachePolicy,
    Degradation,
    Duration,
    ErrorAction,
    Failure,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)

STALE_DATA_WARNING = "The latest data cannot be received from the server right now."

_UNSET: Any = object()


class ApiClient:
    """Fetches GET resources, caching responses and degrading to cache.

    Requests for the same resolved address are serialized through the lock
    registry, so concurrent callers never trigger duplicate fetches: the
    second caller runs after the first has written the cache and can serve
    that entry under ``CACHE_OR_FRESH_OR_FAIL``.

    Example::

        async with create_client(base_url="https://api.example.com") as api:
            api.subscribe(lambda d: print(d.message))
            users = await api.get("users", {"page": 1})
            profile = await api.cache(CachePolicy.CACHE_OR_FRESH_OR_FAIL, "5m").get("me")
    """

    def __init__(
        self,
        transport: Transport,
        store: AsyncCacheStore,
        *,
        base_url: str = "",
        policy: CachePolicy = CachePolicy.FRESH_OR_CACHE_OR_FAIL,
        expiry: Duration | None = None,
        error_action: ErrorAction = ErrorAction.THROW,
        stale_data_warning: str = STALE_DATA_WARNING,
        locks: LockRegistry | None = None,
        notifier: DegradeNotifier | None = None,
        fallback_respects_expiry: bool = False,
    ) -> None:
        self._transport = transport
        self._cache = ResponseCache(store)
        self._executor = FetchExecutor(transport, self._cache)
        self._base_url = base_url
        self._policy = policy
        self._expiry_ms = parse_expiry(expiry)
        self._error_action = error_action
        self._stale_data_warning = stale_data_warning
        self._locks = locks if locks is not None else default_registry()
        self._notifier = notifier if notifier is not None else default_notifier()
        self._fallback_respects_expiry = fallback_respects_expiry

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @property
    def policy(self) -> CachePolicy:
        return self._policy

    @property
    def error_action(self) -> ErrorAction:
        return self._error_action

    @property
    def locks(self) -> LockRegistry:
        return self._locks

    @property
    def notifier(self) -> DegradeNotifier:
        return self._notifier

    @property
    def response_cache(self) -> ResponseCache:
        return self._cache

    def cache(self, policy: CachePolicy, expiry: Duration | None = None) -> ApiClient:
        """Return a client with a different default policy and expiry.

        The copy shares the transport, store, lock registry and notifier.
        """
        configured = copy.copy(self)
        configured._policy = policy
        configured._expiry_ms = parse_expiry(expiry)
        return configured

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a degrade observer. Returns an unsubscribe callable."""
        return self._notifier.subscribe(observer)

    def resolve(self, path: str, params: QueryParams | None = None) -> str:
        """Resolve a path and query parameters against the base URL."""
        return resolve_address(join_url(self._base_url, path), params)

    async def get(
        self,
        path: str,
        params: QueryParams | None = None,
        *,
        policy: CachePolicy | None = None,
        expiry: Duration | None = _UNSET,
        deserialize: Deserializer[T] = json_loads,
    ) -> T:
        """GET a path relative to the base URL with optional query parameters."""
        return await self.fetch(
            self.resolve(path, params),
            policy=policy,
            expiry=expiry,
            deserialize=deserialize,
        )

    async def fetch(
        self,
        address: str,
        *,
        policy: CachePolicy | None = None,
        expiry: Duration | None = _UNSET,
        deserialize: Deserializer[T] = json_loads,
    ) -> T:
        """Fetch a resolved address according to the cache policy.

        Args:
            address: Resolved resource address.
            policy: Overrides the client's policy for this request.
            expiry: Overrides the client's expiry; ``None`` accepts any age.
            deserialize: Converts response text to the returned value.

        Returns:
            The fresh value, or a cached one when the policy allows it.

        Raises:
            Exception: The original transport or deserialization error when
                no cached fallback applies.
        """
        policy = policy or self._policy
        expiry_ms = self._expiry_ms if expiry is _UNSET else parse_expiry(expiry)
        logger.debug("GET %s (policy=%s)", address, policy.name)

        async with self._locks.acquire(address):
            hit: CacheHit[T] | None = None
            if consults_cache_first(policy):
                hit = await self._cache.lookup(address, deserialize, expiry_ms)
            if should_use_cache_first(policy, cache_valid=hit is not None):
                logger.debug("Serving %s from cache", address)
                return cast(CacheHit[T], hit).value

            outcome = await self._executor.attempt(address, deserialize)
            if not isinstance(outcome, Failure):
                return outcome.value

            return await self._resolve_failure(
                address, policy, expiry_ms, deserialize, outcome.error
            )

    async def _resolve_failure(
        self,
        address: str,
        policy: CachePolicy,
        expiry_ms: int | None,
        deserialize: Deserializer[T],
        error: BaseException,
    ) -> T:
        hit: CacheHit[T] | None = None
        if consults_cache_on_failure(policy):
            fallback_expiry = expiry_ms if self._fallback_respects_expiry else None
            hit = await self._cache.lookup(address, deserialize, fallback_expiry)

        decision = resolve_failure(policy, hit is not None, self._error_action)

        if decision.notify is Notify.WITH_CACHE and hit is not None:
            self._notifier.emit(
                Degradation(
                    address=address,
                    message=self._stale_data_warning,
                    value=hit.value,
                    payload=hit.entry.payload,
                )
            )
        elif decision.notify is Notify.WITH_MESSAGE:
            self._notifier.emit(Degradation(address=address, message=str(error)))

        if decision.action is Action.RETURN_CACHED and hit is not None:
            logger.info("Serving cached %s after failed fetch", address)
            return hit.value
        raise error

    async def invalidate(self, address: str) -> None:
        """Delete the cached response for an address."""
        await self._cache.delete(address)

    async def invalidate_all(self) -> None:
        """Delete all cached responses."""
        await self._cache.delete_all()

    async def close(self) -> None:
        """Flush pending notifications and release transport and store."""
        await self._notifier.drain()
        await self._transport.close()
        await self._cache.store.disconnect()


def create_client(
    *,
    base_url: str = "",
    cache_dir: str | Path = ".fetchguard-cache",
    store: AsyncCacheStore | None = None,
    transport: Transport | None = None,
    policy: CachePolicy = CachePolicy.FRESH_OR_CACHE_OR_FAIL,
    expiry: Duration | None = None,
    error_action: ErrorAction = ErrorAction.THROW,
    stale_data_warning: str = STALE_DATA_WARNING,
    locks: LockRegistry | None = None,
    notifier: DegradeNotifier | None = None,
    timeout: float = 30.0,
    headers: dict[str, str] | None = None,
    fallback_respects_expiry: bool = False,
) -> ApiClient:
    """Create an API client.

    Args:
        base_url: Prefix for paths passed to ``get``
        cache_dir: Directory for the default file store
        store: Storage adapter (default: file store in ``cache_dir``)
        transport: Transport (default: httpx with ``timeout`` and ``headers``)
        policy: Default cache policy
        expiry: Default expiry; ``None`` accepts any age
        error_action: What to do when fresh data cannot be fetched
        stale_data_warning: Message sent to observers when serving cache
        locks: Per-address lock registry (default: the process-wide one)
        notifier: Degrade notifier (default: the process-wide one)
        timeout: Request timeout in seconds for the default transport
        headers: Extra headers for the default transport
        fallback_respects_expiry: Apply ``expiry`` to the post-failure fallback too

    Returns:
        ApiClient with fetch, get, cache, invalidate, subscribe, close
    """
    if not isinstance(policy, CachePolicy):
        raise ConfigurationError(f"Unknown cache policy: {policy!r}")
    if not isinstance(error_action, ErrorAction):
        raise ConfigurationError(f"Unknown error action: {error_action!r}")
    if timeout <= 0:
        raise ConfigurationError("timeout must be positive")
    parse_expiry(expiry)

    return ApiClient(
        transport or HttpxTransport(headers=headers, timeout=timeout),
        store or AsyncFileStore(cache_dir),
        base_url=base_url,
        policy=policy,
        expiry=expiry,
        error_action=error_action,
        stale_data_warning=stale_data_warning,
        locks=locks,
        notifier=notifier,
        fallback_respects_expiry=fallback_respects_expiry,
    )


__all__ = ["STALE_DATA_WARNING", "ApiClient", "create_client"]
