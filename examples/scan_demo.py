#!/usr/bin/env python3
"""
Scan notifier demo.

This example demonstrates:
1. Seeding a notifier on a temporary directory
2. A consumer thread printing events from the stream
3. Creating, modifying, chmod-ing and deleting files
4. Pausing, resuming and changing options while scanning

Usage:
    python examples/scan_demo.py
"""

import os
import shutil
import sys
import tempfile
import threading
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.scan_notifier import EventKind, ScanNotifier, regex_options


def consume(notifier: ScanNotifier):
    """Print every event until the notifier stops."""
    icons = {
        EventKind.CREATE: "+",
        EventKind.DELETE: "-",
        EventKind.MODIFY: "~",
        EventKind.PERM: "%",
        EventKind.ERROR: "!",
        EventKind.NOCHANGE: "=",
    }
    for event in notifier.queue():
        print(f"[CONSUMER] {icons[event.kind]} {event.kind.value:<8} {event.path_type.value:<9} {event.path}")
        if event.error is not None:
            print(f"           Error: {event.error}")
    print("[CONSUMER] Event stream closed")


def main():
    demo_dir = Path(tempfile.mkdtemp(prefix="scan_demo_"))
    print("=" * 60)
    print(f"Scan notifier demo in {demo_dir}")
    print("=" * 60)

    (demo_dir / "existing.txt").write_text("seeded, not reported")

    options = (
        regex_options(exclude=r"\.tmp$")
        .set_queue_size(32)
        .set_max_workers(2)
        .set_scan_interval(0.5)
    )

    try:
        notifier = ScanNotifier(demo_dir, options)
        consumer = threading.Thread(target=consume, args=(notifier,), daemon=True)
        consumer.start()
        notifier.start_async()

        print("\n[DEMO] Creating files...")
        (demo_dir / "hello.txt").write_text("Hello, World!")
        (demo_dir / "scratch.tmp").write_text("excluded by pattern")
        (demo_dir / "subdir").mkdir()
        (demo_dir / "subdir" / "nested.txt").write_text("nested")
        time.sleep(1.5)

        print("\n[DEMO] Modifying and chmod-ing hello.txt...")
        (demo_dir / "hello.txt").write_text("Hello, Updated World!")
        os.chmod(demo_dir / "hello.txt", 0o600)
        time.sleep(1.5)

        print("\n[DEMO] Pausing, then deleting existing.txt...")
        notifier.pause()
        (demo_dir / "existing.txt").unlink()
        time.sleep(1.5)
        print("[DEMO] Resuming (DELETE expected now)...")
        notifier.resume()
        time.sleep(1.5)

        print("\n[DEMO] Scaling to 8 workers and moving a file...")
        options.set_max_workers(8)
        (demo_dir / "hello.txt").rename(demo_dir / "subdir" / "moved.txt")
        time.sleep(1.5)

        print("\n[DEMO] Flushing history (everything re-reported as CREATE)...")
        notifier.flush()
        time.sleep(1.5)

        print("\n[DEMO] Stopping...")
        notifier.stop()
        notifier.wait(timeout=5)
        consumer.join(timeout=5)
    finally:
        shutil.rmtree(demo_dir, ignore_errors=True)

    print("\nDemo complete")


if __name__ == "__main__":
    main()
