"""Tests for the command line wiring."""

import argparse
import json
import signal

from src.cli import GracefulShutdown, build_settings, format_event
from src.scan_notifier.config import ScanOptions
from src.scan_notifier.models import Event, EventKind, PathType
from src.scan_notifier.notifier import ScanNotifier


def make_args(**overrides):
    values = {
        "interval": None,
        "workers": None,
        "queue_size": None,
        "include": None,
        "exclude": None,
        "no_change": False,
        "json": False,
    }
    for flag in (
        "errors", "delete", "create", "modify", "perm",
        "file", "folder", "symlink", "folder_content",
    ):
        values[f"ignore_{flag}"] = False
    values.update(overrides)
    return argparse.Namespace(**values)


class TestBuildSettings:
    """Tests for build_settings function."""

    def test_env_then_overrides(self, monkeypatch):
        monkeypatch.setenv("SCAN_NOTIFIER_MAX_WORKERS", "3")
        monkeypatch.setenv("SCAN_NOTIFIER_SCAN_INTERVAL", "4")

        settings = build_settings(make_args(interval=0.5, exclude=r"\.git"))

        assert settings.max_workers == 3
        assert settings.scan_interval == 0.5
        assert settings.exclude_paths == r"\.git"

    def test_flags(self, monkeypatch):
        monkeypatch.delenv("SCAN_NOTIFIER_IGNORE_NO_CHANGE", raising=False)

        settings = build_settings(make_args(no_change=True, ignore_delete=True, ignore_folder_content=True))

        assert settings.ignore_no_change is False
        assert settings.ignore_delete is True
        assert settings.ignore_folder_content is True
        assert settings.ignore_create is False


class TestFormatEvent:
    """Tests for format_event function."""

    def test_text(self):
        line = format_event(Event("/r/a.txt", PathType.FILE, EventKind.CREATE), as_json=False)
        assert "CREATE" in line
        assert line.endswith("/r/a.txt")

    def test_text_with_error(self):
        event = Event("/r/x", PathType.DIRECTORY, EventKind.ERROR, "denied")
        assert format_event(event, as_json=False).endswith("(denied)")

    def test_json(self):
        line = format_event(Event("/r/a.txt", PathType.FILE, EventKind.DELETE), as_json=True)
        assert json.loads(line) == {
            "path": "/r/a.txt",
            "type": "FILE",
            "kind": "DELETE",
            "error": None,
        }


class TestGracefulShutdown:
    """Tests for GracefulShutdown class."""

    def test_repeated_signals_do_not_raise(self, tmp_path, monkeypatch):
        monkeypatch.setattr(signal, "signal", lambda signum, handler: None)
        notifier = ScanNotifier(tmp_path, ScanOptions().set_scan_interval(0.05))
        shutdown = GracefulShutdown(notifier)

        shutdown._handler(signal.SIGINT, None)

        notifier.start_async()
        shutdown._handler(signal.SIGINT, None)
        shutdown._handler(signal.SIGTERM, None)

        assert notifier.wait(timeout=5) is True
        assert notifier.is_running is False
