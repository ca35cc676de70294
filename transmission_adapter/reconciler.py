"""
Reconciliation of polled torrent snapshots.

reconcile() turns a raw ``torrent-get`` torrent list into a PollDiff. Without
prior state every record is reported as new; given the records known from
earlier polls it also sorts out which torrents changed and which vanished.
TorrentView is a small holder for that prior state on the caller's side.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import PollDiff, TorrentRecord, TrackerURL


URL_REGEX = re.compile(
    r"^(https?)://"
    r"((?:[^:/?#]+\.)?([^.:/?#]+\.([a-z]+)))"
    r"(?::([0-9]+))?"
    r"(/?[^?#]*)"
    r"(\?[^#]*|)"
    r"(#.*|)$"
)


def parse_url(url: str) -> Optional[TrackerURL]:
    """Split an announce URL into its parts, or None if it doesn't parse."""
    match = URL_REGEX.match(url or "")
    if not match:
        return None
    return TrackerURL(
        protocol=match.group(1),
        domain=match.group(2),
        hostname=match.group(3),
        extension=match.group(4),
        port=match.group(5),
        path=match.group(6),
        params=match.group(7),
        hash=match.group(8),
    )


def get_trackers(records: Iterable[TorrentRecord]) -> List[str]:
    """Distinct tracker hostnames across all records, in first-seen order."""
    announce_urls = dict.fromkeys(
        url for record in records for url in (record.trackers or [])
    )

    hostnames = {}
    for url in announce_urls:
        parsed = parse_url(url)
        if parsed is not None:
            hostnames.setdefault(parsed.hostname, None)
    return list(hostnames)


def get_labels(records: Iterable[TorrentRecord]) -> List[str]:
    return list(dict.fromkeys(
        label for record in records for label in (record.labels or [])
    ))


def reconcile(
    raw_torrents: Iterable[Dict[str, Any]],
    known: Optional[Mapping[str, TorrentRecord]] = None,
) -> PollDiff:
    """
    Build a PollDiff from one poll's torrent list.

    Args:
        raw_torrents: Torrent dicts exactly as returned by ``torrent-get``
        known: Records from earlier polls keyed by hash. When omitted every
            torrent lands in ``all`` and nothing is reported changed or deleted.

    Returns:
        PollDiff whose ``changed`` records are already merged onto the prior
        record, so fields missing from this poll keep their old values.
    """
    records = [TorrentRecord.from_rpc(raw) for raw in raw_torrents]
    diff = PollDiff()

    if known is None:
        diff.all = records
    else:
        seen = set()
        for record in records:
            seen.add(record.hash)
            previous = known.get(record.hash)
            if previous is None:
                diff.all.append(record)
            else:
                diff.changed.append(previous.merged(record))
        diff.deleted = [info_hash for info_hash in known if info_hash not in seen]

    current = diff.all + diff.changed
    diff.trackers = get_trackers(current)
    diff.labels = get_labels(current)
    return diff


class TorrentView:
    """Caller-side record of what earlier polls reported."""

    def __init__(self):
        self.records: Dict[str, TorrentRecord] = {}

    def update(self, raw_torrents: Iterable[Dict[str, Any]]) -> PollDiff:
        diff = reconcile(raw_torrents, self.records)
        self.apply(diff)
        return diff

    def apply(self, diff: PollDiff) -> None:
        for record in diff.all + diff.changed:
            self.records[record.hash] = record
        for info_hash in diff.deleted:
            self.records.pop(info_hash, None)

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)
