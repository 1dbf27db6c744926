"""Payload deserialization helpers.

A deserializer is any callable that turns response text into a value. The
cache and the fetch executor treat any exception it raises as a
:class:`~fetchguard.errors.DeserializationError`.
"""

import json
from collections.abc import Callable
from typing import Any, TypeVar

from fetchguard.errors import DeserializationError

T = TypeVar("T")

Deserializer = Callable[[str], T]


def json_loads(payload: str) -> Any:
    """Decode a JSON payload."""
    return json.loads(payload)


def parse_with(converter: Callable[[Any], T]) -> Deserializer[T]:
    """Build a deserializer that decodes JSON and then applies a converter.

    Example:
        @dataclass
        class User:
            id: int
            name: str

        fetch(address, deserialize=parse_with(lambda data: User(**data)))
    """

    def deserialize(payload: str) -> T:
        return converter(json.loads(payload))

    return deserialize


def deserialize_payload(deserialize: Deserializer[T], payload: str) -> T:
    """Run a deserializer, normalizing failures to DeserializationError."""
    try:
        return deserialize(payload)
    except DeserializationError:
        raise
    except Exception as exc:
        raise DeserializationError(f"Cannot deserialize payload: {exc}") from exc
