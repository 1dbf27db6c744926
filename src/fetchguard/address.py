"""Resource address resolution.

An address is the key shared by the cache and the lock registry, so two
logically equal requests must resolve to byte-identical strings.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

QueryParams = Mapping[str, Any] | str | object


def _param_items(params: object) -> list[tuple[str, Any]]:
    """Extract name/value pairs from a mapping, dataclass or plain object."""
    if isinstance(params, Mapping):
        items = params.items()
    elif dataclasses.is_dataclass(params) and not isinstance(params, type):
        items = ((f.name, getattr(params, f.name)) for f in dataclasses.fields(params))
    else:
        items = (
            (name, value)
            for name, value in vars(params).items()
            if not name.startswith("_")
        )
    pairs = [(str(name), "" if value is None else value) for name, value in items]
    return sorted(pairs, key=lambda pair: pair[0])


def build_query_string(params: QueryParams | None) -> str:
    """Render query parameters with a stable, sorted order."""
    if params is None:
        return ""
    if isinstance(params, str):
        return params.strip().lstrip("?")
    return urlencode(_param_items(params), doseq=True)


def resolve_address(base: str, params: QueryParams | None = None) -> str:
    """Combine a base URL and query parameters into a resource address.

    Example:
        resolve_address("https://api.example.com/users", {"page": 2, "q": "a b"})
        # "https://api.example.com/users?page=2&q=a+b"
    """
    query = build_query_string(params)
    if not query:
        return base

    if "?" in base:
        address = f"{base}&{query}"
        while "&&" in address:
            address = address.replace("&&", "&")
        return address.replace("?&", "?")
    return f"{base}?{query}"


def join_url(base_url: str, path: str) -> str:
    """Join a client base URL and a request path with exactly one slash."""
    if not base_url or "://" in path:
        return path
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
