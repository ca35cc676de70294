"""
Background polling of a Transmission daemon.

Polls the service on a fixed interval and hands every PollDiff to a consumer
callback (the UI view model). A failed poll is logged and the loop backs off
to the idle interval before trying again; SessionDesync is handled the same
way, leaving the decision to reconnect with the consumer.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from .config import Config
from .logger import logger
from .models import PollDiff
from .service import TransmissionService


Consumer = Callable[[PollDiff], Union[None, Awaitable[None]]]


class TorrentPoller:
    def __init__(
        self,
        service: TransmissionService,
        consumer: Consumer,
        interval: float = Config.POLL_INTERVAL,
        idle_interval: float = Config.POLL_IDLE_INTERVAL,
    ):
        self.service = service
        self.consumer = consumer
        self.interval = interval
        self.idle_interval = idle_interval
        self.last_error: Optional[str] = None
        self._running = False

    async def poll_once(self) -> PollDiff:
        diff = await self.service.torrents()
        result: Any = self.consumer(diff)
        if inspect.isawaitable(result):
            await result
        return diff

    async def run(self) -> None:
        """Main polling loop."""
        self._running = True
        logger.info(f"Torrent poller started (interval: {self.interval}s)")

        try:
            while self._running:
                try:
                    await self.poll_once()
                    self.last_error = None
                    await asyncio.sleep(self.interval)

                except asyncio.CancelledError:
                    break
                except Exception as e:
                    self.last_error = str(e)
                    logger.error(f"Error in polling loop: {e}")
                    await asyncio.sleep(self.idle_interval)
        finally:
            self._running = False

        logger.info("Torrent poller stopped")

    def stop(self) -> None:
        """Signal the polling loop to stop."""
        self._running = False

    @property
    def running(self) -> bool:
        return self._running
