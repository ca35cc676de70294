"""
Notification sinks for user-facing messages.

The dispatcher reports duplicate adds, argument mistakes and undefined errors
through ``alert(title, message)``. A front end plugs in its own sink; the
default one writes to the log.
"""

import sys
from typing import List, Protocol, TextIO, Tuple

from .logger import logger


class Notifier(Protocol):
    def alert(self, title: str, message: str) -> None:
        ...


class LogNotifier:
    def alert(self, title: str, message: str) -> None:
        logger.warning(f"{title} {message}")


class StreamNotifier:
    """Print alerts to a text stream, stderr by default."""

    def __init__(self, stream: TextIO = None):
        self.stream = stream or sys.stderr

    def alert(self, title: str, message: str) -> None:
        logger.warning(f"{title} {message}")
        print(f"{title} {message}".strip(), file=self.stream)


class RecordingNotifier:
    """Keeps every alert in memory, for front ends that render them later."""

    def __init__(self):
        self.alerts: List[Tuple[str, str]] = []

    def alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))
