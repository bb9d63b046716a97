"""Tests for entry filtering."""

import pytest

from src.scan_notifier.config import ScanOptions, regex_options
from src.scan_notifier.filters import EntryFilter, FilterDecision
from src.scan_notifier.models import PathType

ROOT = "/data/root"


def make_filter(options=None):
    return EntryFilter(ROOT, (options or ScanOptions()).setup())


class TestEntryFilter:
    """Tests for EntryFilter class."""

    def test_accepts_by_default(self):
        f = make_filter()
        for path_type in (PathType.FILE, PathType.DIRECTORY, PathType.SYMLINK):
            assert f.check(f"{ROOT}/x", path_type) is FilterDecision.ACCEPT

    def test_unsupported_skipped(self):
        assert make_filter().check(f"{ROOT}/fifo", PathType.UNSUPPORTED) is FilterDecision.SKIP

    def test_root_never_reported(self):
        f = make_filter(regex_options(include=r"root"))
        assert f.check(ROOT, PathType.DIRECTORY) is FilterDecision.SKIP
        assert f.accepts(ROOT, PathType.DIRECTORY) is False

    def test_exclude_pattern(self):
        f = make_filter(regex_options(exclude=r"\.git"))
        assert f.check(f"{ROOT}/.git/config", PathType.FILE) is FilterDecision.SKIP
        assert f.check(f"{ROOT}/src/a.py", PathType.FILE) is FilterDecision.ACCEPT

    def test_include_pattern(self):
        f = make_filter(regex_options(include=r"\.txt$"))
        assert f.check(f"{ROOT}/a.txt", PathType.FILE) is FilterDecision.ACCEPT
        assert f.check(f"{ROOT}/a.py", PathType.FILE) is FilterDecision.SKIP

    def test_exclude_wins_over_include(self):
        f = make_filter(regex_options(exclude=r"secret", include=r"\.txt$"))
        assert f.check(f"{ROOT}/secret.txt", PathType.FILE) is FilterDecision.SKIP

    def test_ignore_file(self):
        f = make_filter(ScanOptions().set_ignore_file_event(True))
        assert f.check(f"{ROOT}/a.txt", PathType.FILE) is FilterDecision.SKIP
        assert f.check(f"{ROOT}/dir", PathType.DIRECTORY) is FilterDecision.ACCEPT

    def test_ignore_folder(self):
        f = make_filter(ScanOptions().set_ignore_folder_event(True))
        assert f.check(f"{ROOT}/dir", PathType.DIRECTORY) is FilterDecision.SKIP
        assert f.check(f"{ROOT}/dir/a.txt", PathType.FILE) is FilterDecision.ACCEPT

    def test_ignore_symlink(self):
        f = make_filter(ScanOptions().set_ignore_symlink(True))
        assert f.check(f"{ROOT}/link", PathType.SYMLINK) is FilterDecision.SKIP

    def test_ignore_folder_content_reports_directory(self):
        f = make_filter(ScanOptions().set_ignore_folder_content_event(True))
        decision = f.check(f"{ROOT}/dir", PathType.DIRECTORY)
        assert decision is FilterDecision.SKIP_SUBTREE
        assert f.reports(decision) is True

    def test_ignore_folder_content_and_folder(self):
        options = ScanOptions().set_ignore_folder_content_event(True).set_ignore_folder_event(True)
        f = make_filter(options)
        decision = f.check(f"{ROOT}/dir", PathType.DIRECTORY)
        assert decision is FilterDecision.SKIP_SUBTREE
        assert f.reports(decision) is False

    def test_options_read_on_every_call(self):
        options = ScanOptions()
        f = make_filter(options)
        assert f.accepts(f"{ROOT}/a.txt", PathType.FILE) is True

        options.set_exclude_paths(r"a\.txt")
        assert f.accepts(f"{ROOT}/a.txt", PathType.FILE) is False

        options.set_exclude_paths(None)
        assert f.accepts(f"{ROOT}/a.txt", PathType.FILE) is True

    @pytest.mark.parametrize("decision,expected", [
        (FilterDecision.ACCEPT, True),
        (FilterDecision.SKIP, False),
        (FilterDecision.SKIP_SUBTREE, True),
    ])
    def test_reports(self, decision, expected):
        assert make_filter().reports(decision) is expected
