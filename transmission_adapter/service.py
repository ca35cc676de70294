"""
Transmission service facade for a torrent-manager front end.

Wires the session manager, RPC client, command dispatcher and torrent view
together behind one object. The front end calls connect() once, polls with
torrents(), and invokes the named actions with the torrents the user selected.
"""

from typing import Any, List, Optional, Union

import httpx

from .config import Config
from .dispatcher import CommandDispatcher
from .logger import logger
from .models import PollDiff
from .notifications import LogNotifier, Notifier
from .reconciler import TorrentView, reconcile
from .rpc_client import RPCClient
from .session import SessionManager


class TransmissionService:
    name = "Transmission"
    enable_tracker_filter = True

    def __init__(
        self,
        notifier: Optional[Notifier] = None,
        fields: Optional[List[str]] = None,
        track_changes: bool = True,
        timeout: Optional[float] = Config.REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.notifier = notifier or LogNotifier()
        self.fields = list(fields or Config.TRANSMISSION_FIELDS)
        # Records are keyed by hash, so it is requested whatever else is configured
        if "hashString" not in self.fields:
            self.fields.append("hashString")
        self.session = SessionManager(path=Config.TRANSMISSION_RPC_PATH)
        self.client = RPCClient(self.session, timeout=timeout, transport=transport)
        self.dispatcher = CommandDispatcher(self.client, self.notifier)
        self.view = TorrentView() if track_changes else None

    async def __aenter__(self) -> "TransmissionService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def connect(
        self,
        host: str = Config.TRANSMISSION_HOST,
        port: Union[int, str] = Config.TRANSMISSION_PORT,
        user: Optional[str] = Config.TRANSMISSION_USERNAME,
        password: Optional[str] = Config.TRANSMISSION_PASSWORD,
        timeout: float = Config.CONNECT_TIMEOUT,
    ) -> httpx.Response:
        response = await self.client.connect(host, port, user, password, timeout=timeout)
        # A new daemon means earlier polls no longer describe anything
        if self.view is not None:
            self.view.clear()
        return response

    async def torrents(self) -> PollDiff:
        """Poll the daemon and reconcile the result into a PollDiff."""
        raw = await self.client.fetch_torrents(self.fields)
        if self.view is None:
            diff = reconcile(raw)
        else:
            diff = self.view.update(raw)
        logger.debug(
            f"Poll: {len(diff.all)} new, {len(diff.changed)} changed, "
            f"{len(diff.deleted)} deleted, {len(diff.trackers)} trackers"
        )
        return diff

    async def add_torrent_url(self, magnet: str):
        return await self.dispatcher.add_by_magnet(magnet)

    async def upload_torrent(self, data):
        return await self.dispatcher.add_by_file(data)

    async def start(self, torrents: Any):
        return await self.dispatcher.start(torrents)

    async def stop(self, torrents: Any):
        return await self.dispatcher.stop(torrents)

    async def verify(self, torrents: Any):
        return await self.dispatcher.verify(torrents)

    async def queue_up(self, torrents: Any):
        return await self.dispatcher.queue_up(torrents)

    async def queue_down(self, torrents: Any):
        return await self.dispatcher.queue_down(torrents)

    async def remove(self, torrents: Any):
        return await self.dispatcher.remove(torrents)

    async def remove_and_local(self, torrents: Any):
        return await self.dispatcher.remove_and_local(torrents)

    async def pause_all(self):
        return await self.dispatcher.pause_all()

    async def resume_all(self):
        return await self.dispatcher.resume_all()
