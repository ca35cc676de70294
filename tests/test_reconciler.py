from transmission_adapter.models import TorrentRecord
from transmission_adapter.reconciler import (
    TorrentView,
    get_trackers,
    parse_url,
    reconcile,
)

from conftest import raw_torrent


HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40


class TestParseUrl:
    def test_splits_announce_url(self):
        parsed = parse_url("http://tracker.example.com:6969/announce?x=1#frag")

        assert parsed.protocol == "http"
        assert parsed.domain == "tracker.example.com"
        assert parsed.hostname == "example.com"
        assert parsed.extension == "com"
        assert parsed.port == "6969"
        assert parsed.path == "/announce"
        assert parsed.params == "?x=1"
        assert parsed.hash == "#frag"

    def test_optional_parts(self):
        parsed = parse_url("https://example.org/announce")

        assert parsed.domain == "example.org"
        assert parsed.hostname == "example.org"
        assert parsed.port is None
        assert parsed.params == ""
        assert parsed.hash == ""

    def test_malformed_urls_do_not_match(self):
        assert parse_url("udp://tracker.opentrackr.org:1337/announce") is None
        assert parse_url("http://localhost:8080/announce") is None
        assert parse_url("not a url") is None
        assert parse_url("") is None


class TestTrackers:
    def test_shared_announce_url_counted_once(self):
        shared = "http://tracker.example.com:6969/announce"
        diff = reconcile([
            raw_torrent(HASH_A, trackers=[shared]),
            raw_torrent(HASH_B, trackers=[shared]),
        ])

        assert diff.trackers == ["example.com"]

    def test_hostnames_distinct_in_first_seen_order(self):
        records = [
            TorrentRecord(hash=HASH_A, trackers=[
                "http://b.second.net/announce",
                "udp://dropped.org:80",
            ]),
            TorrentRecord(hash=HASH_B, trackers=[
                "https://first.example.com/announce",
                "http://other.second.net:80/announce",
            ]),
        ]

        assert get_trackers(records) == ["second.net", "example.com"]

    def test_records_without_trackers(self):
        assert get_trackers([TorrentRecord(hash=HASH_A)]) == []


class TestReconcile:
    def test_without_prior_state_everything_is_new(self):
        diff = reconcile([raw_torrent(HASH_A), raw_torrent(HASH_B, id=2)])

        assert [t.hash for t in diff.all] == [HASH_A, HASH_B]
        assert diff.changed == []
        assert diff.deleted == []
        assert diff.dirty is True

    def test_record_fields_are_normalized(self):
        diff = reconcile([raw_torrent(
            HASH_A.upper(),
            name="debian.iso",
            trackers=["http://bttracker.debian.org:6969/announce"],
            totalSize=1024,
            percentDone=0.5,
            status=4,
            queuePosition=2,
        )])
        record = diff.all[0]

        assert record.hash == HASH_A
        assert record.name == "debian.iso"
        assert record.total_size == 1024
        assert record.percent_done == 0.5
        assert record.queue_position == 2
        assert record.status_name == "downloading"
        assert record.trackers == ["http://bttracker.debian.org:6969/announce"]

    def test_lifetime_counters_pass_through(self):
        diff = reconcile([raw_torrent(HASH_A, downloadedEver=3 * 2**30, uploadedEver=7 * 2**30, totalSize=2**30)])

        assert diff.all[0].downloaded_ever == 3 * 2**30
        assert diff.all[0].uploaded_ever == 7 * 2**30

    def test_prior_state_splits_new_changed_and_deleted(self):
        known = {
            HASH_A: TorrentRecord(hash=HASH_A, name="A", rate_download=10, comment="kept"),
            HASH_C: TorrentRecord(hash=HASH_C, name="C"),
        }

        diff = reconcile([
            {"hashString": HASH_A, "rateDownload": 99},
            raw_torrent(HASH_B, name="B"),
        ], known)

        assert [t.hash for t in diff.all] == [HASH_B]
        assert len(diff.changed) == 1
        changed = diff.changed[0]
        assert changed.rate_download == 99
        assert changed.name == "A"
        assert changed.comment == "kept"
        assert diff.deleted == [HASH_C]
        # Prior records are not mutated
        assert known[HASH_A].rate_download == 10

    def test_labels_are_collected(self):
        diff = reconcile([
            raw_torrent(HASH_A, labels=["linux", "iso"]),
            raw_torrent(HASH_B, labels=["iso"]),
        ])
        assert diff.labels == ["linux", "iso"]


class TestTorrentView:
    def test_successive_polls(self):
        view = TorrentView()

        first = view.update([raw_torrent(HASH_A, name="A"), raw_torrent(HASH_B, name="B")])
        assert len(first.all) == 2
        assert len(view) == 2

        second = view.update([{"hashString": HASH_A, "percentDone": 1.0}])
        assert second.all == []
        assert [t.hash for t in second.changed] == [HASH_A]
        assert second.changed[0].name == "A"
        assert second.deleted == [HASH_B]
        assert set(view.records) == {HASH_A}
        assert view.records[HASH_A].percent_done == 1.0

    def test_clear(self):
        view = TorrentView()
        view.update([raw_torrent(HASH_A)])
        view.clear()

        assert len(view.update([raw_torrent(HASH_A)]).all) == 1
