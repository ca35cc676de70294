"""
Command dispatch for user actions.

Maps high-level actions (start, stop, verify, queue moves, removal) onto
Transmission commands over a sequence of torrents, and adds torrents from a
magnet link or a .torrent file. An empty torrent sequence means "all
torrents", which is how the global pause/resume actions are expressed.
"""

import asyncio
import base64
import os
from collections.abc import Sequence
from typing import Any, BinaryIO, Dict, List, Optional, Union

from .exceptions import ArgumentError, DuplicateTorrent, TorrentFileError, TransmissionError
from .logger import logger
from .notifications import LogNotifier, Notifier
from .rpc_client import RPCClient, RPCResult, classify_response


DELETE_LOCAL_DATA = "delete-local-data"


def _read_torrent_data(source: Union[bytes, str, "os.PathLike[str]", BinaryIO]) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return f.read()
    return source.read()


async def encode_metainfo(source: Union[bytes, str, "os.PathLike[str]", BinaryIO]) -> str:
    """Read a .torrent file's content off the event loop and base64 encode it."""
    loop = asyncio.get_running_loop()
    try:
        data = await loop.run_in_executor(None, _read_torrent_data, source)
    except OSError as e:
        raise TorrentFileError(f"Could not read torrent file: {e}") from e
    return base64.b64encode(data).decode("ascii")


def _hash_of(torrent: Any) -> str:
    if isinstance(torrent, str):
        info_hash = torrent
    elif isinstance(torrent, dict):
        info_hash = torrent.get("hash") or torrent.get("hashString")
    else:
        info_hash = getattr(torrent, "hash", None)
    if not info_hash or not isinstance(info_hash, str):
        raise ArgumentError(f"Torrent has no usable hash: {torrent!r}")
    return info_hash


def torrent_hashes(torrents: Any) -> List[str]:
    """Hashes of an ordered torrent sequence; raises ArgumentError otherwise."""
    if not isinstance(torrents, Sequence) or isinstance(torrents, (str, bytes)):
        raise ArgumentError(f"Expected a sequence of torrents, got {type(torrents).__name__}")
    return [_hash_of(torrent) for torrent in torrents]


class CommandDispatcher:
    def __init__(self, client: RPCClient, notifier: Optional[Notifier] = None):
        self.client = client
        self.notifier = notifier or LogNotifier()

    async def act(
        self,
        command: str,
        torrents: Any,
        mutator: Optional[str] = None,
        value: Any = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Apply ``command`` to ``torrents``.

        Args:
            command: Transmission method name, e.g. ``torrent-start``
            torrents: Ordered sequence of TorrentRecords (or dicts/hashes);
                empty applies the command to every torrent
            mutator: Optional extra argument key, e.g. ``delete-local-data``
            value: Value for ``mutator``

        Returns:
            The raw response body, or None when ``torrents`` isn't a sequence
        """
        try:
            hashes = torrent_hashes(torrents)
        except ArgumentError as e:
            logger.warning(f"Action {command} rejected: {e}")
            self.notifier.alert("Error", "Action was passed incorrect arguments")
            return None

        arguments: Dict[str, Any] = {}
        if hashes:
            arguments["ids"] = hashes
        if mutator:
            arguments[mutator] = value

        logger.info(f"{command} on {len(hashes) or 'all'} torrent(s)")
        return await self.client.send(command, arguments)

    async def start(self, torrents):
        return await self.act("torrent-start", torrents)

    async def stop(self, torrents):
        return await self.act("torrent-stop", torrents)

    async def verify(self, torrents):
        return await self.act("torrent-verify", torrents)

    async def queue_up(self, torrents):
        return await self.act("queue-move-up", torrents)

    async def queue_down(self, torrents):
        return await self.act("queue-move-down", torrents)

    async def remove(self, torrents):
        return await self.act("torrent-remove", torrents)

    async def remove_and_local(self, torrents):
        return await self.act("torrent-remove", torrents, DELETE_LOCAL_DATA, True)

    async def pause_all(self):
        return await self.act("torrent-stop", [])

    async def resume_all(self):
        return await self.act("torrent-start", [])

    async def add_by_magnet(self, url: str) -> RPCResult:
        """Add a torrent from a magnet link."""
        return await self._add({"filename": url})

    async def add_by_file(self, source: Union[bytes, str, "os.PathLike[str]", BinaryIO]) -> RPCResult:
        """Add a torrent from .torrent content, a path to one, or an open binary file."""
        try:
            metainfo = await encode_metainfo(source)
        except TorrentFileError as e:
            self._report_failure(e)
            raise
        return await self._add({"metainfo": metainfo})

    async def _add(self, arguments: Dict[str, Any]) -> RPCResult:
        try:
            body = await self.client.send("torrent-add", arguments)
            result = classify_response(body)
            result.raise_for_result()
        except DuplicateTorrent as e:
            name = (e.arguments or {}).get("name")
            logger.info(f"Torrent already added: {name or 'unknown'}")
            self.notifier.alert("Duplicate!", "This torrent is already added.")
            return result
        except TransmissionError as e:
            self._report_failure(e)
            raise

        added = result.arguments.get("torrent-added") or {}
        logger.info(f"Added torrent {added.get('name') or added.get('hashString') or ''}".rstrip())
        return result

    def _report_failure(self, error: TransmissionError) -> None:
        logger.error(f"Failed to add torrent: {error}")
        self.notifier.alert("Undefined error!", str(error))
