"""
Transmission Adapter - Talk to a Transmission daemon over JSON-RPC.

Provides the session handshake, torrent polling with snapshot reconciliation,
and torrent commands for a torrent-manager front end.
"""

from .config import Config
from .exceptions import (
    ArgumentError,
    ConnectionFailure,
    DuplicateTorrent,
    ProtocolError,
    SessionDesync,
    TorrentFileError,
    TransmissionError,
)
from .models import PollDiff, TorrentRecord, TrackerURL
from .service import TransmissionService

__version__ = "0.1.0"
__all__ = [
    "TransmissionService",
    "Config",
    "PollDiff",
    "TorrentRecord",
    "TrackerURL",
    "TransmissionError",
    "ConnectionFailure",
    "ProtocolError",
    "SessionDesync",
    "DuplicateTorrent",
    "ArgumentError",
    "TorrentFileError",
]
