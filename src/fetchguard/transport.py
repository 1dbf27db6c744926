"""Transports that perform the network call for a resolved address."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx

from fetchguard.errors import TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Async transport interface.

    ``send`` returns the raw response text or raises. Whatever it raises
    reaches the caller of ``ApiClient.fetch`` unchanged when no cached
    fallback applies.
    """

    async def send(self, method: str, url: str) -> str:
        """Send a request and return the response text."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...


class HttpxTransport:
    """Transport backed by :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        *,
        base_url: str = "",
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers={"Accept": "application/json", **(headers or {})},
            timeout=timeout,
            follow_redirects=True,
        )

    async def send(self, method: str, url: str) -> str:
        """Send a request and return the response text."""
        try:
            response = await self._client.request(method, url)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{method} {url} failed: {exc}", address=url
            ) from exc

        if not response.is_success:
            raise TransportError(
                f"{method} {url} returned HTTP {response.status_code}",
                address=url,
                status_code=response.status_code,
            )
        return response.text

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
