"""
Command-line interface for the Transmission adapter.

Provides terminal access to the adapter's operations:
- Listing torrents and trackers
- Adding torrents from magnet links or .torrent files
- Torrent actions (start, stop, verify, queue moves, remove)
- Global pause/resume

Usage:
    transmission-adapter list
    transmission-adapter add <magnet/file>
    transmission-adapter stop <info_hash> [<info_hash> ...]
    transmission-adapter pause-all
"""

import argparse
import asyncio
import os
import sys

from .config import Config
from .exceptions import TransmissionError
from .notifications import StreamNotifier
from .service import TransmissionService


ACTIONS = {
    "start": "start",
    "stop": "stop",
    "verify": "verify",
    "queue-up": "queue_up",
    "queue-down": "queue_down",
    "remove": "remove",
}


def format_bytes(size):
    """Format bytes as human-readable string."""
    if size is None:
        return "N/A"
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} PB"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transmission-adapter",
        description="Transmission RPC adapter CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list
  %(prog)s trackers
  %(prog)s add magnet:?xt=...
  %(prog)s add ./debian.iso.torrent
  %(prog)s stop <info_hash>
  %(prog)s remove <info_hash> --delete-data
  %(prog)s pause-all
"""
    )
    parser.add_argument("--host", default=Config.TRANSMISSION_HOST, help="Daemon host")
    parser.add_argument("--port", type=int, default=Config.TRANSMISSION_PORT, help="RPC port")
    parser.add_argument("--username", default=Config.TRANSMISSION_USERNAME, help="RPC username")
    parser.add_argument("--password", default=Config.TRANSMISSION_PASSWORD, help="RPC password")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("list", help="List all torrents")
    subparsers.add_parser("trackers", help="List distinct tracker hostnames")

    add_parser = subparsers.add_parser("add", help="Add a torrent")
    add_parser.add_argument("uri", help="Magnet URI or .torrent file path")

    for name in ACTIONS:
        action_parser = subparsers.add_parser(name, help=f"{name.replace('-', ' ').capitalize()} torrents")
        action_parser.add_argument("info_hashes", nargs="+", help="Torrent info hashes")
        if name == "remove":
            action_parser.add_argument("--delete-data", action="store_true",
                                       help="Also delete downloaded data")

    subparsers.add_parser("pause-all", help="Stop every torrent")
    subparsers.add_parser("resume-all", help="Start every torrent")

    return parser


async def run(args) -> int:
    async with TransmissionService(notifier=StreamNotifier(), track_changes=False) as service:
        await service.connect(args.host, args.port, args.username, args.password)

        if args.command == "list":
            diff = await service.torrents()
            if not diff.all:
                print("No torrents found.")
                return 0
            print(f"{'HASH':<20} {'STATUS':<18} {'PROGRESS':<10} {'SIZE':<12} {'NAME'}")
            print("-" * 80)
            for t in diff.all:
                progress = f"{(t.percent_done or 0) * 100:.1f}%"
                size = format_bytes(t.total_size)
                name = (t.name or 'Unknown')[:40]
                print(f"{t.hash[:16] + '...':<20} {t.status_name or '-':<18} {progress:<10} {size:<12} {name}")

        elif args.command == "trackers":
            diff = await service.torrents()
            for hostname in diff.trackers:
                print(hostname)

        elif args.command == "add":
            if os.path.exists(args.uri):
                result = await service.upload_torrent(args.uri)
            else:
                result = await service.add_torrent_url(args.uri)
            if result.ok:
                print("Torrent added")

        elif args.command in ACTIONS:
            torrents = list(args.info_hashes)
            if args.command == "remove" and args.delete_data:
                await service.remove_and_local(torrents)
            else:
                await getattr(service, ACTIONS[args.command])(torrents)
            print(f"{args.command} sent for {len(torrents)} torrent(s)")

        elif args.command == "pause-all":
            await service.pause_all()
            print("All torrents stopped")

        elif args.command == "resume-all":
            await service.resume_all()
            print("All torrents started")

    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run(args)))
    except TransmissionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
