"""Change detection for a single walk entry."""

import logging
import os
import stat
from typing import Callable

from .cache import PathStateCache
from .config import ScanOptions
from .models import Event, EventKind, PathSnapshot, RawEntry, get_path_type

logger = logging.getLogger(__name__)


class EventClassifier:
    """
    Compares a walk entry with its cached snapshot and emits events.

    The cache is updated as a side effect. Each kind of event is emitted
    only if it is not suppressed by the options; detection and cache
    updates happen either way.
    """

    def __init__(
        self,
        cache: PathStateCache,
        options: ScanOptions,
        emit: Callable[[Event], None],
    ):
        """
        Initialize the classifier.

        Args:
            cache: Per-path snapshot cache
            options: Live options shared with the notifier
            emit: Callback receiving each produced event
        """
        self.cache = cache
        self.options = options
        self.emit = emit

    def classify(self, entry: RawEntry) -> None:
        """
        Classify one entry, fetching fresh metadata with ``os.lstat``.

        Args:
            entry: Accepted walk entry
        """
        if entry.error is not None:
            self.report_error(entry, entry.error)
            return

        try:
            st = os.lstat(entry.path)
        except OSError as e:
            self.report_error(entry, e)
            return

        self.apply(entry.path, st)

    def report_error(self, entry: RawEntry, error: BaseException) -> None:
        """Emit an ERROR event for an entry, leaving the cache untouched."""
        logger.debug(f"Failed to read {entry.path}: {error}")
        if not self.options.ignore_errors:
            self.emit(Event(entry.path, entry.path_type, EventKind.ERROR, error))

    def apply(self, path: str, st: os.stat_result) -> None:
        """
        Compare fresh metadata against the cache.

        Args:
            path: Absolute path of the entry
            st: Result of ``os.lstat`` for the path
        """
        path_type = get_path_type(st.st_mode)
        snapshot, found = self.cache.lookup(path)

        if not found:
            self.cache.store(path, PathSnapshot.from_stat(st, visited=True))
            if not self.options.ignore_create:
                self.emit(Event(path, path_type, EventKind.CREATE))
            return

        snapshot.visited = True
        changed = False

        if stat.S_IMODE(st.st_mode) != snapshot.permissions:
            changed = True
            if not self.options.ignore_perm:
                self.emit(Event(path, path_type, EventKind.PERM))

        if st.st_mtime_ns != snapshot.mod_time_ns:
            changed = True
            snapshot.mod_time_ns = st.st_mtime_ns
            if not self.options.ignore_modify:
                self.emit(Event(path, path_type, EventKind.MODIFY))

        # The snapshot is shared with the cache; a concurrent flush drops it.
        snapshot.mode = st.st_mode

        if not changed and not self.options.ignore_no_change:
            self.emit(Event(path, path_type, EventKind.NOCHANGE))
