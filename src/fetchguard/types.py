"""Core types for fetchguard."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CachePolicy(Enum):
    """How fresh and cached data are weighed against each other for a GET."""

    # Try the network first, fall back to cache, otherwise fail.
    FRESH_OR_CACHE_OR_FAIL = "fresh_or_cache_or_fail"
    # Serve a valid cache entry without touching the network.
    CACHE_OR_FRESH_OR_FAIL = "cache_or_fresh_or_fail"
    # Never fall back to cache.
    FRESH_OR_FAIL = "fresh_or_fail"


class ErrorAction(Enum):
    """What the client does when fresh data could not be fetched."""

    THROW = "throw"
    IGNORE = "ignore"
    IGNORE_AND_NOTIFY = "ignore_and_notify"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A persisted response with its last-write time."""

    address: str
    payload: str
    modified_at: int  # Unix timestamp ms


@dataclass(frozen=True, slots=True)
class CacheHit(Generic[T]):
    """A cache entry that exists, is within expiry and could be deserialized."""

    entry: CacheEntry
    value: T


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A fetch attempt that produced a deserialized value."""

    value: T
    payload: str


@dataclass(frozen=True, slots=True)
class Failure:
    """A fetch attempt that failed with the original error."""

    error: BaseException


FetchOutcome = Success[T] | Failure


@dataclass(frozen=True, slots=True)
class Degradation:
    """Broadcast when a client degrades instead of returning fresh data.

    ``value`` and ``payload`` are ``None`` when no usable cache entry
    existed and only the error message can be reported.
    """

    address: str
    message: str
    value: object | None = None
    payload: str | None = None


# Duration type alias
Duration = str | int | timedelta  # "30s", "5m", "2h", "1d", milliseconds or timedelta
