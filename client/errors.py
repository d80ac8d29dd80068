"""Exception hierarchy for the synchronisation client.

None of these escape the session: they are raised where the failure is
detected and caught, logged and dropped at the session or router boundary.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for every recoverable client error."""


class ConnectionFailure(SyncError):
    """Connecting, sending or reading failed. The client stays disconnected."""

    CLOSED = "closed"
    IO_FAILURE = "io"

    def __init__(self, message: str, reason: str = IO_FAILURE) -> None:
        super().__init__(message)
        self.reason = reason


class DecodeError(SyncError):
    """A received chunk could not be decompressed or decoded."""


class FrameOverflowError(DecodeError):
    """Undelimited data grew past the pending buffer limit and was discarded."""


class ParseError(SyncError):
    """A snapshot payload is not a valid world state document."""


class ProtocolError(SyncError):
    """A message has an unknown prefix or a malformed body."""
