"""
Error taxonomy for the Transmission adapter.

ConnectionFailure and SessionDesync propagate to the caller, which may decide
to reconnect. DuplicateTorrent and ArgumentError are turned into user-facing
notifications by the dispatcher and never reach the caller as exceptions.
"""

from typing import Any, Dict, Optional


class TransmissionError(Exception):
    """Base exception for everything raised by this package."""


class ConnectionFailure(TransmissionError):
    """The daemon could not be reached, timed out, or refused the handshake."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(TransmissionError):
    """The daemon answered with an unexpected status or a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SessionDesync(TransmissionError):
    """A command was rejected with 409 after the session was negotiated."""


class DuplicateTorrent(TransmissionError):
    """The daemon already knows the torrent that was added."""

    def __init__(self, arguments: Optional[Dict[str, Any]] = None):
        super().__init__("This torrent is already added.")
        self.arguments = arguments or {}


class ArgumentError(TransmissionError):
    """An action was passed something other than an ordered torrent sequence."""


class TorrentFileError(TransmissionError):
    """A .torrent file given to add_by_file could not be read."""
