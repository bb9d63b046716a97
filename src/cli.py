#!/usr/bin/env python3
"""
CLI for running the scan notifier on a directory.

Usage:
    python -m src.cli ./documents
    python -m src.cli ./documents --interval 2 --workers 4 --exclude '\\.git'
    python -m src.cli ./documents --json --no-change
"""

import argparse
import json
import logging
import signal
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.scan_notifier import (
    Event,
    LifecycleError,
    ScanNotifier,
    ScanNotifierError,
    ScanSettings,
)

_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cli")


class GracefulShutdown:
    """Stop the notifier on SIGINT/SIGTERM."""

    def __init__(self, notifier: ScanNotifier):
        self.notifier = notifier
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        try:
            self.notifier.stop()
        except LifecycleError as e:
            logger.debug(f"Ignoring shutdown signal: {e}")


def build_settings(args) -> ScanSettings:
    """Merge environment settings with command line overrides."""
    settings = ScanSettings.from_env()

    if args.interval is not None:
        settings.scan_interval = args.interval
    if args.workers is not None:
        settings.max_workers = args.workers
    if args.queue_size is not None:
        settings.queue_size = args.queue_size
    if args.include is not None:
        settings.include_paths = args.include
    if args.exclude is not None:
        settings.exclude_paths = args.exclude
    if args.no_change:
        settings.ignore_no_change = False

    for flag in (
        "errors", "delete", "create", "modify", "perm",
        "file", "folder", "symlink", "folder_content",
    ):
        if getattr(args, f"ignore_{flag}"):
            setattr(settings, f"ignore_{flag}", True)

    return settings


def format_event(event: Event, as_json: bool) -> str:
    if as_json:
        return json.dumps(event.to_dict())
    line = f"{event.kind.value:<8} {event.path_type.value:<9} {event.path}"
    if event.error is not None:
        line += f" ({event.error})"
    return line


def cmd_scan(args):
    """Run the scan notifier and print events until interrupted."""
    root = Path(args.root).resolve()
    settings = build_settings(args)

    try:
        notifier = ScanNotifier(root, settings.to_options())
    except ScanNotifierError as e:
        logger.error(f"Cannot start scan notifier: {e}")
        sys.exit(1)

    GracefulShutdown(notifier)

    def consume():
        for event in notifier.queue():
            print(format_event(event, args.json), flush=True)

    consumer = threading.Thread(target=consume, name="EventConsumer", daemon=True)
    consumer.start()

    logger.info(f"Scanning {root} every {settings.scan_interval}s with {settings.max_workers} worker(s)")
    logger.info("Press Ctrl+C to stop")

    notifier.start()
    consumer.join(timeout=2.0)
    logger.info("Scan notifier stopped")


def main():
    parser = argparse.ArgumentParser(
        description="Periodically scan a directory and print change events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Settings not given on the command line are read from SCAN_NOTIFIER_*
environment variables (a .env file at the project root is loaded).

Examples:
  # Scan the current directory every second
  python -m src.cli .

  # Two workers, skip VCS folders, JSON output
  python -m src.cli ./documents --workers 2 --exclude '/\\.git' --json
        """,
    )
    parser.add_argument("root", help="Root directory to scan")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--interval", type=float, help="Seconds between passes")
    parser.add_argument("--workers", type=int, help="Workers per pass")
    parser.add_argument("--queue-size", type=int, help="Capacity of the event queues")
    parser.add_argument("--include", help="Regex that reported paths must match")
    parser.add_argument("--exclude", help="Regex of paths to exclude")
    parser.add_argument("--no-change", action="store_true", help="Emit NOCHANGE events")
    parser.add_argument("--json", action="store_true", help="Print events as JSON lines")
    parser.add_argument("--ignore-errors", action="store_true", help="Suppress ERROR events")
    parser.add_argument("--ignore-delete", action="store_true", help="Suppress DELETE events")
    parser.add_argument("--ignore-create", action="store_true", help="Suppress CREATE events")
    parser.add_argument("--ignore-modify", action="store_true", help="Suppress MODIFY events")
    parser.add_argument("--ignore-perm", action="store_true", help="Suppress PERM events")
    parser.add_argument("--ignore-file", action="store_true", help="Ignore regular files")
    parser.add_argument("--ignore-folder", action="store_true", help="Ignore directories")
    parser.add_argument("--ignore-symlink", action="store_true", help="Ignore symbolic links")
    parser.add_argument("--ignore-folder-content", action="store_true", help="Do not descend into directories")
    parser.set_defaults(func=cmd_scan)

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    args.func(args)


if __name__ == "__main__":
    main()
