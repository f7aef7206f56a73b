"""Exceptions raised while querying a server's status."""

from __future__ import annotations


class PingError(Exception):
    """Base exception for status query errors."""


class ConnectionError(PingError):  # noqa: A001
    """Raised when the server cannot be reached or the connection breaks."""


class FramingError(PingError):
    """Raised when a packet frame is malformed or the stream ends mid-packet."""


class UnknownPacketError(PingError):
    """Raised when decoding a packet id with no registered field layout."""


class PayloadDecodeError(PingError):
    """Raised when a field inside a packet body cannot be decoded."""


class UnsupportedOperationError(PingError):
    """Raised when encoding is attempted with a decode-only field type."""
