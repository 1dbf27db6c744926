"""Shared pytest fixtures."""

import asyncio

import pytest

from fetchguard import (
    ApiClient,
    AsyncFileStore,
    AsyncMemoryStore,
    DegradeNotifier,
    ErrorAction,
    LockRegistry,
    TransportError,
)


class FakeTransport:
    """Scripted transport that records every request."""

    def __init__(self) -> None:
        self.responses: dict[str, str] = {}
        self.error: BaseException | None = None
        self.delay = 0.0
        self.calls: list[str] = []
        self.closed = False

    async def send(self, method: str, url: str) -> str:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if url not in self.responses:
            raise TransportError(f"{method} {url} returned HTTP 404", status_code=404)
        return self.responses[url]

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Settable clock returning Unix seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def transport() -> FakeTransport:
    """Create a fresh FakeTransport for each test."""
    return FakeTransport()


@pytest.fixture
def clock() -> FakeClock:
    """Create a settable clock for expiry tests."""
    return FakeClock()


@pytest.fixture
def store() -> AsyncMemoryStore:
    """Create a fresh AsyncMemoryStore for each test."""
    return AsyncMemoryStore()


@pytest.fixture
def file_store(tmp_path) -> AsyncFileStore:
    """Create an AsyncFileStore in a temporary directory."""
    return AsyncFileStore(tmp_path / "cache")


@pytest.fixture
def make_client(transport: FakeTransport, store: AsyncMemoryStore):
    """Build clients sharing the test transport and store."""

    def factory(**kwargs) -> ApiClient:
        kwargs.setdefault("error_action", ErrorAction.THROW)
        kwargs.setdefault("locks", LockRegistry())
        kwargs.setdefault("notifier", DegradeNotifier())
        return ApiClient(transport, store, **kwargs)

    return factory


@pytest.fixture(autouse=True)
def isolated_defaults(monkeypatch) -> None:
    """Give each test its own process-wide lock registry and notifier."""
    monkeypatch.setattr("fetchguard.locks._default_registry", None)
    monkeypatch.setattr("fetchguard.notifications._default_notifier", None)
