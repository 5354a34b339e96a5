"""Exceptions raised by the P2PB2B client."""
from typing import Optional, Sequence, Tuple


class P2PB2BError(Exception):
    """Base exception for all client errors."""
    pass


class SerializationError(P2PB2BError):
    """Request value could not be encoded to JSON."""
    pass


class TransportError(P2PB2BError):
    """Request construction or network I/O failed."""
    pass


class StatusMismatchError(P2PB2BError):
    """Response status code was not one of the expected codes.

    `body` holds the raw response text when the caller had read it, so the
    server's own error message is not lost.
    """

    def __init__(self, expected: Sequence[int], actual: int, body: Optional[str] = None):
        self.expected: Tuple[int, ...] = tuple(expected)
        self.actual = actual
        self.body = body
        super().__init__(self.expected, actual, body)

    def with_body(self, body: str) -> "StatusMismatchError":
        return StatusMismatchError(self.expected, self.actual, body=body)

    def __reduce__(self):
        return (type(self), (self.expected, self.actual, self.body))

    def __str__(self) -> str:
        msg = f"http response status != {list(self.expected)}, got {self.actual}"
        if self.body is not None:
            msg = f"{msg}: {self.body}"
        return msg


class DeserializationError(P2PB2BError):
    """Response body could not be decoded into the expected model."""

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body

    def __reduce__(self):
        return (type(self), (str(self), self.body))


__all__ = [
    "P2PB2BError",
    "SerializationError",
    "TransportError",
    "StatusMismatchError",
    "DeserializationError",
]
