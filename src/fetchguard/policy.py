"""Cache policy decisions.

Pure functions from (policy, cache validity, error action) to what the client
does next. Nothing here performs I/O; the client feeds in the facts and acts
on the returned :class:`Decision`.

After a failed fetch:

========================  ====================  ===========================
Policy                    Cache valid           Cache invalid or absent
========================  ====================  ===========================
FRESH_OR_CACHE_OR_FAIL    return cached,        raise; IGNORE_AND_NOTIFY
                          notify first if       notifies with the error
                          IGNORE_AND_NOTIFY     message first
CACHE_OR_FRESH_OR_FAIL    return cached         as above
FRESH_OR_FAIL             (cache not used)      as above
========================  ====================  ===========================

A successful fetch always wins, and a raised error is always the original
fetch error.
"""

from dataclasses import dataclass
from enum import Enum

from fetchguard.errors import ConfigurationError
from fetchguard.types import CachePolicy, ErrorAction


class Action(Enum):
    RETURN_CACHED = "return_cached"
    RAISE = "raise"


class Notify(Enum):
    NONE = "none"
    WITH_CACHE = "with_cache"
    WITH_MESSAGE = "with_message"


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of the policy engine for a failed fetch."""

    action: Action
    notify: Notify = Notify.NONE


def consults_cache_first(policy: CachePolicy) -> bool:
    """Whether the cache is checked before any network access."""
    return policy is CachePolicy.CACHE_OR_FRESH_OR_FAIL


def should_use_cache_first(policy: CachePolicy, cache_valid: bool) -> bool:
    """Whether a valid cache entry lets the fetch be skipped entirely."""
    return consults_cache_first(policy) and cache_valid


def consults_cache_on_failure(policy: CachePolicy) -> bool:
    """Whether a failed fetch may fall back to the cache under this policy."""
    return policy is not CachePolicy.FRESH_OR_FAIL


def resolve_failure(
    policy: CachePolicy,
    cache_valid: bool,
    error_action: ErrorAction,
) -> Decision:
    """Decide how to resolve a failed fetch."""
    if not isinstance(policy, CachePolicy):
        raise ConfigurationError(f"Unknown cache policy: {policy!r}")

    if consults_cache_on_failure(policy) and cache_valid:
        if (
            policy is CachePolicy.FRESH_OR_CACHE_OR_FAIL
            and error_action is ErrorAction.IGNORE_AND_NOTIFY
        ):
            return Decision(Action.RETURN_CACHED, Notify.WITH_CACHE)
        return Decision(Action.RETURN_CACHED)

    if error_action is ErrorAction.IGNORE_AND_NOTIFY:
        return Decision(Action.RAISE, Notify.WITH_MESSAGE)
    return Decision(Action.RAISE)
