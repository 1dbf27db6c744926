"""Exception hierarchy for fetchguard.

Subclass hierarchy::

    FetchGuardError
    +-- TransportError        network or HTTP failure, cause chained
    +-- DeserializationError  payload could not be parsed
    +-- ConfigurationError    invalid client settings (also a ValueError)

The client never wraps a transport failure in another exception: whatever
the transport raised is what the caller of ``fetch`` sees.
"""


class FetchGuardError(Exception):
    """Base exception for all fetchguard errors."""


class TransportError(FetchGuardError):
    """Raised by a transport when a request could not be completed.

    Args:
        message: Human-readable error description.
        address: The resolved address that was requested.
        status_code: HTTP status code, when a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        address: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.address = address
        self.status_code = status_code


class DeserializationError(FetchGuardError):
    """Raised when a payload cannot be parsed into the expected shape."""


class ConfigurationError(FetchGuardError, ValueError):
    """Raised for invalid durations, bounds or other client settings."""
