"""Duration parsing utilities."""

import re
from datetime import timedelta

from fetchguard.errors import ConfigurationError
from fetchguard.types import Duration

_DURATION_PATTERN = re.compile(r"^(\d+)(ms|s|m|h|d)$")
_UNITS: dict[str, int] = {
    "ms": 1,
    "s": 1000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
}


def parse_duration(duration: Duration) -> int:
    """Parse duration to milliseconds. Passthrough if already int."""
    if isinstance(duration, timedelta):
        if duration < timedelta(0):
            raise ConfigurationError(f"Invalid duration: {duration!r}")
        return int(duration.total_seconds() * 1000)

    if isinstance(duration, int):
        if duration < 0:
            raise ConfigurationError(f"Invalid duration: {duration!r}")
        return duration

    match = _DURATION_PATTERN.match(duration)
    if not match:
        raise ConfigurationError(f"Invalid duration: {duration!r}")

    value, unit = match.groups()
    return int(value) * _UNITS[unit]


def parse_expiry(expiry: Duration | None) -> int | None:
    """Parse an optional expiry; ``None`` means any age is acceptable."""
    if expiry is None:
        return None
    return parse_duration(expiry)
