"""fetchguard - Offline-tolerant GET fetching with cache policies."""

import logging

# Adapters (async only)
from fetchguard.adapters import (
    AsyncCacheStore,
    AsyncFileStore,
    AsyncMemoryStore,
    AsyncRedisStore,
)

# Address resolution
from fetchguard.address import resolve_address

# Core engine
from fetchguard.cache import ResponseCache

# Client API
from fetchguard.client import STALE_DATA_WARNING, ApiClient, create_client

# Duration parsing
from fetchguard.duration import parse_duration

# Errors
from fetchguard.errors import (
    ConfigurationError,
    DeserializationError,
    FetchGuardError,
    TransportError,
)
from fetchguard.executor import FetchExecutor
from fetchguard.locks import LockRegistry
from fetchguard.notifications import DegradeNotifier
from fetchguard.policy import Action, Decision, Notify, resolve_failure
from fetchguard.serialization import json_loads, parse_with
from fetchguard.transport import HttpxTransport, Transport

# Core types
from fetchguard.types import (
    CacheEntry,
    CacheHit,
    CachePolicy,
    Degradation,
    Duration,
    ErrorAction,
    Failure,
    Success,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "STALE_DATA_WARNING",
    "Action",
    "ApiClient",
    "AsyncCacheStore",
    "AsyncFileStore",
    "AsyncMemoryStore",
    "AsyncRedisStore",
    "CacheEntry",
    "CacheHit",
    "CachePolicy",
    "ConfigurationError",
    "Decision",
    "DegradeNotifier",
    "Degradation",
    "DeserializationError",
    "Duration",
    "ErrorAction",
    "Failure",
    "FetchExecutor",
    "FetchGuardError",
    "HttpxTransport",
    "LockRegistry",
    "Notify",
    "ResponseCache",
    "Success",
    "Transport",
    "TransportError",
    "create_client",
    "json_loads",
    "parse_duration",
    "parse_with",
    "resolve_address",
    "resolve_failure",
]
