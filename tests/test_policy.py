"""Tests for the cache policy decision table."""

import pytest

from fetchguard import (
    Action,
    CachePolicy,
    ConfigurationError,
    Decision,
    ErrorAction,
    Notify,
    resolve_failure,
)
from fetchguard.policy import (
    consults_cache_first,
    consults_cache_on_failure,
    should_use_cache_first,
)

FRESH_OR_CACHE = CachePolicy.FRESH_OR_CACHE_OR_FAIL
CACHE_OR_FRESH = CachePolicy.CACHE_OR_FRESH_OR_FAIL
FRESH_ONLY = CachePolicy.FRESH_OR_FAIL


class TestShortCircuit:
    """Tests for skipping the fetch when cache is acceptable first."""

    def test_only_cache_first_policy_skips(self) -> None:
        assert should_use_cache_first(CACHE_OR_FRESH, cache_valid=True)
        assert not should_use_cache_first(FRESH_OR_CACHE, cache_valid=True)
        assert not should_use_cache_first(FRESH_ONLY, cache_valid=True)

    def test_only_cache_first_policy_reads_before_fetch(self) -> None:
        assert consults_cache_first(CACHE_OR_FRESH)
        assert not consults_cache_first(FRESH_OR_CACHE)
        assert not consults_cache_first(FRESH_ONLY)

    def test_invalid_cache_never_skips(self) -> None:
        for policy in CachePolicy:
            assert not should_use_cache_first(policy, cache_valid=False)

    def test_fresh_only_ignores_cache_on_failure(self) -> None:
        assert consults_cache_on_failure(FRESH_OR_CACHE)
        assert consults_cache_on_failure(CACHE_OR_FRESH)
        assert not consults_cache_on_failure(FRESH_ONLY)


class TestResolveFailureWithValidCache:
    """Tests for failed fetches when a valid cache entry exists."""

    @pytest.mark.parametrize("action", list(ErrorAction))
    def test_cache_or_fresh_returns_cached_silently(self, action: ErrorAction) -> None:
        assert resolve_failure(CACHE_OR_FRESH, True, action) == Decision(
            Action.RETURN_CACHED
        )

    def test_fresh_or_cache_returns_cached(self) -> None:
        for action in (ErrorAction.THROW, ErrorAction.IGNORE):
            assert resolve_failure(FRESH_OR_CACHE, True, action) == Decision(
                Action.RETURN_CACHED
            )

    def test_fresh_or_cache_notifies_with_cache(self) -> None:
        decision = resolve_failure(FRESH_OR_CACHE, True, ErrorAction.IGNORE_AND_NOTIFY)
        assert decision == Decision(Action.RETURN_CACHED, Notify.WITH_CACHE)

    def test_fresh_only_never_returns_cached(self) -> None:
        assert resolve_failure(FRESH_ONLY, True, ErrorAction.THROW).action is Action.RAISE
        decision = resolve_failure(FRESH_ONLY, True, ErrorAction.IGNORE_AND_NOTIFY)
        assert decision == Decision(Action.RAISE, Notify.WITH_MESSAGE)


class TestResolveFailureWithoutCache:
    """Tests for failed fetches with no usable cache entry."""

    @pytest.mark.parametrize("policy", list(CachePolicy))
    def test_throw_raises(self, policy: CachePolicy) -> None:
        assert resolve_failure(policy, False, ErrorAction.THROW) == Decision(Action.RAISE)

    @pytest.mark.parametrize("policy", list(CachePolicy))
    def test_ignore_still_raises_without_notification(self, policy: CachePolicy) -> None:
        assert resolve_failure(policy, False, ErrorAction.IGNORE) == Decision(Action.RAISE)

    @pytest.mark.parametrize("policy", list(CachePolicy))
    def test_ignore_and_notify_notifies_then_raises(self, policy: CachePolicy) -> None:
        decision = resolve_failure(policy, False, ErrorAction.IGNORE_AND_NOTIFY)
        assert decision == Decision(Action.RAISE, Notify.WITH_MESSAGE)

    def test_unknown_policy(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown cache policy"):
            resolve_failure("sometimes", False, ErrorAction.THROW)  # type: ignore[arg-type]
