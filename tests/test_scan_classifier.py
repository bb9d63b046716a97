"""Tests for the event classifier."""

import os

import pytest

from src.scan_notifier.cache import PathStateCache
from src.scan_notifier.classifier import EventClassifier
from src.scan_notifier.config import ScanOptions
from src.scan_notifier.models import EventKind, PathSnapshot, PathType, RawEntry


@pytest.fixture
def setup(tmp_path):
    cache = PathStateCache()
    options = ScanOptions().setup()
    events = []
    classifier = EventClassifier(cache, options, events.append)
    path = tmp_path / "a.txt"
    path.write_text("hello")
    return classifier, cache, options, events, str(path)


def seed(cache, path):
    cache.store(path, PathSnapshot.from_stat(os.lstat(path)))


def bump_mtime(path, seconds=10):
    st = os.lstat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + seconds * 10**9))


class TestEventClassifier:
    """Tests for EventClassifier class."""

    def test_unknown_path_is_created(self, setup):
        classifier, cache, _, events, path = setup

        classifier.classify(RawEntry(path, PathType.FILE))

        assert [e.kind for e in events] == [EventKind.CREATE]
        assert events[0].path_type is PathType.FILE
        snapshot, found = cache.lookup(path)
        assert found is True
        assert snapshot.visited is True

    def test_create_suppressed_still_cached(self, setup):
        classifier, cache, options, events, path = setup
        options.set_ignore_create_event(True)

        classifier.classify(RawEntry(path, PathType.FILE))

        assert events == []
        assert path in cache

    def test_no_change_suppressed_by_default(self, setup):
        classifier, cache, _, events, path = setup
        seed(cache, path)

        classifier.classify(RawEntry(path, PathType.FILE))

        assert events == []
        assert cache.lookup(path)[0].visited is True

    def test_no_change_when_enabled(self, setup):
        classifier, cache, options, events, path = setup
        options.set_ignore_no_change_event(False)
        seed(cache, path)

        classifier.classify(RawEntry(path, PathType.FILE))

        assert [e.kind for e in events] == [EventKind.NOCHANGE]

    def test_modify(self, setup):
        classifier, cache, _, events, path = setup
        seed(cache, path)
        bump_mtime(path)

        classifier.classify(RawEntry(path, PathType.FILE))

        assert [e.kind for e in events] == [EventKind.MODIFY]
        assert cache.lookup(path)[0].mod_time_ns == os.lstat(path).st_mtime_ns

    def test_perm(self, setup):
        classifier, cache, _, events, path = setup
        os.chmod(path, 0o644)
        seed(cache, path)
        os.chmod(path, 0o600)

        classifier.classify(RawEntry(path, PathType.FILE))

        assert [e.kind for e in events] == [EventKind.PERM]
        assert cache.lookup(path)[0].permissions == 0o600

    def test_perm_and_modify_are_independent(self, setup):
        classifier, cache, _, events, path = setup
        os.chmod(path, 0o644)
        seed(cache, path)
        os.chmod(path, 0o600)
        bump_mtime(path)

        classifier.classify(RawEntry(path, PathType.FILE))

        assert sorted(e.kind.value for e in events) == ["MODIFY", "PERM"]

    def test_suppressed_modify_still_updates_cache(self, setup):
        classifier, cache, options, events, path = setup
        options.set_ignore_modify_event(True)
        seed(cache, path)
        bump_mtime(path)

        classifier.classify(RawEntry(path, PathType.FILE))
        classifier.classify(RawEntry(path, PathType.FILE))

        assert events == []
        assert cache.lookup(path)[0].mod_time_ns == os.lstat(path).st_mtime_ns

    def test_walk_error_emits_error(self, setup):
        classifier, cache, _, events, path = setup
        error = PermissionError(13, "Permission denied")

        classifier.classify(RawEntry(path, PathType.DIRECTORY, error))

        assert len(events) == 1
        assert events[0].kind is EventKind.ERROR
        assert events[0].error is error
        assert path not in cache

    def test_vanished_path_emits_error_without_cache_change(self, setup, tmp_path):
        classifier, cache, _, events, _ = setup
        missing = str(tmp_path / "gone.txt")

        classifier.classify(RawEntry(missing, PathType.FILE))

        assert [e.kind for e in events] == [EventKind.ERROR]
        assert isinstance(events[0].error, FileNotFoundError)
        assert missing not in cache

    def test_errors_suppressed(self, setup, tmp_path):
        classifier, _, options, events, _ = setup
        options.set_ignore_errors(True)

        classifier.classify(RawEntry(str(tmp_path / "gone.txt"), PathType.FILE))

        assert events == []

    def test_flush_during_classify_is_not_undone(self, setup):
        classifier, cache, _, events, path = setup
        seed(cache, path)
        bump_mtime(path)
        real_lookup = cache.lookup

        def lookup_then_flush(p):
            result = real_lookup(p)
            cache.clear()
            return result

        cache.lookup = lookup_then_flush
        classifier.classify(RawEntry(path, PathType.FILE))

        assert [e.kind for e in events] == [EventKind.MODIFY]
        assert path not in cache
