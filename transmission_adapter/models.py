"""
View-model types produced by the adapter.

TorrentRecord is the normalized form of one daemon-reported torrent, keyed by
its info hash. PollDiff is what a single poll hands to the UI layer, and
TrackerURL is an announce URL broken into parts for grouping by tracker.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional


STATUS_NAMES = {
    0: "stopped",
    1: "check pending",
    2: "checking",
    3: "download pending",
    4: "downloading",
    5: "seed pending",
    6: "seeding",
}

# RPC field name -> TorrentRecord attribute
FIELD_MAP = {
    "id": "id",
    "hashString": "hash",
    "name": "name",
    "totalSize": "total_size",
    "percentDone": "percent_done",
    "downloadedEver": "downloaded_ever",
    "uploadedEver": "uploaded_ever",
    "uploadRatio": "upload_ratio",
    "rateUpload": "rate_upload",
    "rateDownload": "rate_download",
    "eta": "eta",
    "comment": "comment",
    "peersConnected": "peers_connected",
    "maxConnectedPeers": "max_connected_peers",
    "peersGettingFromUs": "peers_getting_from_us",
    "peersSendingToUs": "peers_sending_to_us",
    "queuePosition": "queue_position",
    "status": "status",
    "addedDate": "added_date",
    "doneDate": "done_date",
    "downloadDir": "download_dir",
    "recheckProgress": "recheck_progress",
    "isFinished": "is_finished",
    "priorities": "priorities",
    "trackers": "trackers",
    "labels": "labels",
}


def _announce_urls(trackers: Any) -> List[str]:
    # Transmission reports tracker dicts, older callers may hand in plain URLs
    urls = []
    for tracker in trackers or []:
        if isinstance(tracker, dict):
            announce = tracker.get("announce")
            if announce:
                urls.append(announce)
        elif isinstance(tracker, str):
            urls.append(tracker)
    return urls


@dataclass
class TorrentRecord:
    """
    One torrent as reported by the daemon.

    Every field except ``hash`` may be None, meaning the poll did not carry it.
    ``downloaded_ever`` and ``uploaded_ever`` are the daemon's lifetime
    counters and keep growing across repeated downloads of the same torrent.
    """
    hash: str
    id: Optional[int] = None
    name: Optional[str] = None
    total_size: Optional[int] = None
    percent_done: Optional[float] = None
    downloaded_ever: Optional[int] = None
    uploaded_ever: Optional[int] = None
    upload_ratio: Optional[float] = None
    rate_upload: Optional[int] = None
    rate_download: Optional[int] = None
    eta: Optional[int] = None
    comment: Optional[str] = None
    peers_connected: Optional[int] = None
    max_connected_peers: Optional[int] = None
    peers_getting_from_us: Optional[int] = None
    peers_sending_to_us: Optional[int] = None
    queue_position: Optional[int] = None
    status: Optional[int] = None
    added_date: Optional[int] = None
    done_date: Optional[int] = None
    download_dir: Optional[str] = None
    recheck_progress: Optional[float] = None
    is_finished: Optional[bool] = None
    priorities: Optional[List[int]] = None
    trackers: Optional[List[str]] = None
    labels: Optional[List[str]] = None

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "TorrentRecord":
        values = {}
        for key, attr in FIELD_MAP.items():
            if key in data:
                values[attr] = data[key]
        if "trackers" in values:
            values["trackers"] = _announce_urls(values["trackers"])
        values["hash"] = (values.get("hash") or "").lower()
        return cls(**values)

    @property
    def status_name(self) -> Optional[str]:
        if self.status is None:
            return None
        return STATUS_NAMES.get(self.status, "unknown")

    def merged(self, newer: "TorrentRecord") -> "TorrentRecord":
        """Overlay the fields ``newer`` carries onto a copy of this record."""
        updates = {}
        for f in fields(self):
            value = getattr(newer, f.name)
            if value is not None:
                updates[f.name] = value
        return replace(self, **updates)


@dataclass
class TrackerURL:
    protocol: str
    domain: str
    hostname: str
    extension: str
    port: Optional[str]
    path: str
    params: str
    hash: str


@dataclass
class PollDiff:
    """Result of one poll, consumed once by the UI layer."""
    labels: List[str] = field(default_factory=list)
    all: List[TorrentRecord] = field(default_factory=list)
    changed: List[TorrentRecord] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    trackers: List[str] = field(default_factory=list)
    dirty: bool = True
