"""Periodic scan notifier: lifecycle, scan loop and deletion sweep."""

import logging
import os
import stat
import threading
import time
from pathlib import Path
from typing import Optional, Union

from .cache import PathStateCache
from .classifier import EventClassifier
from .config import ScanOptions
from .exceptions import (
    InitializationError,
    InternalError,
    InvalidRootDirPathError,
    ScanAlreadyStartedError,
    ScanIsStoppingError,
    ScanNotReadyError,
    ScanNotRunningError,
)
from .filters import EntryFilter, FilterDecision
from .models import Event, EventKind, PathSnapshot, PathType, RawEntry
from .queue import POLL_INTERVAL, BoundedQueue, EventStream
from .walker import WalkAction, walk_tree
from .workers import WorkerPool

logger = logging.getLogger(__name__)


class ScanNotifier:
    """
    Periodically walks a directory tree and reports changes as events.

    Each pass walks the tree, hands accepted entries to a pool of workers
    that classify them against the cached snapshots, waits for the pool to
    drain, then sweeps the cache for paths that were not seen. Events are
    consumed through ``queue()``.

    Options may be changed from any thread while the notifier runs.
    """

    def __init__(
        self,
        root: Union[str, Path],
        options: Optional[ScanOptions] = None,
    ):
        """
        Validate the root, seed the cache and allocate the queues.

        Args:
            root: Directory to monitor
            options: Live options (defaults are used if omitted)

        Raises:
            InvalidRootDirPathError: If root is not an accessible directory
            InitializationError: If the initial walk fails
        """
        self.root = os.path.abspath(os.fspath(root))
        try:
            st = os.stat(self.root)
        except OSError as e:
            raise InvalidRootDirPathError(f"invalid root directory path: {e}") from e
        if not stat.S_ISDIR(st.st_mode):
            raise InvalidRootDirPathError(f"invalid root directory path: {self.root} is not a directory")

        self.options = (options or ScanOptions()).setup()

        self._cache = PathStateCache()
        self._filter = EntryFilter(self.root, self.options)

        try:
            walk_tree(self.root, self._seed)
        except OSError as e:
            raise InitializationError(f"error parsing root directory: {e}") from e

        queue_size = self.options.queue_size
        self._events = BoundedQueue(queue_size)
        self._stream = EventStream(self._events)
        self._intake = BoundedQueue(queue_size)
        self._classifier = EventClassifier(self._cache, self.options, self._emit)
        self._pool = WorkerPool(self._intake, self._process_entry, self._on_worker_failure)

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._cancel: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = True
        self._running = False
        self._stopping = False
        self._paused = False
        self._passes = 0

        logger.debug(f"Seeded {len(self._cache)} path(s) under {self.root}")

    @classmethod
    def new(
        cls,
        root: Union[str, Path],
        options: Optional[ScanOptions] = None,
    ) -> "ScanNotifier":
        """Create a notifier for ``root``; see ``__init__``."""
        return cls(root, options)

    def _seed(self, path: str, path_type: PathType, error: Optional[OSError]):
        if error is not None:
            raise error

        decision = self._filter.check(path, path_type)
        if self._filter.reports(decision):
            try:
                self._cache.store(path, PathSnapshot.from_stat(os.lstat(path)))
            except OSError as e:
                logger.debug(f"Skipping vanished path {path}: {e}")

        if decision is FilterDecision.SKIP_SUBTREE:
            return WalkAction.SKIP_DIR
        return None

    # --- public API ---

    def queue(self) -> EventStream:
        """Return the read-only stream of events."""
        return self._stream

    @property
    def is_running(self) -> bool:
        """Whether the scan loop is running."""
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_stopping(self) -> bool:
        return self._stopping

    @property
    def cache(self) -> PathStateCache:
        """The per-path snapshot cache."""
        return self._cache

    def start(self, cancel: Optional[threading.Event] = None) -> None:
        """
        Run the scan loop in the calling thread until stopped.

        Args:
            cancel: Optional event; setting it has the same effect as ``stop()``

        Raises:
            ScanAlreadyStartedError: If already running
            ScanIsStoppingError: If a stop is in progress
            ScanNotReadyError: If the notifier was torn down
        """
        self._begin(cancel)
        self._scan_loop()

    def start_async(self, cancel: Optional[threading.Event] = None) -> None:
        """
        Run the scan loop in a background thread.

        Precondition errors are raised synchronously, as with ``start``.
        """
        self._begin(cancel)
        self._thread = threading.Thread(
            target=self._scan_loop,
            name="ScanLoop",
            daemon=True,
        )
        self._thread.start()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for a background scan loop to exit.

        Returns:
            True if no background loop is left running
        """
        if self._thread is None:
            return True
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def stop(self) -> None:
        """
        Ask the scan loop to exit after the current pass.

        Raises:
            ScanIsStoppingError: If a stop is already in progress
            ScanNotRunningError: If the notifier is not running
        """
        with self._lock:
            if self._stopping:
                raise ScanIsStoppingError("scan notifier is stopping")
            if not self._running:
                raise ScanNotRunningError("scan notifier is not running")
            self._stopping = True
            self._stop_event.set()
        logger.info(f"Stopping scan notifier for {self.root}")

    def pause(self) -> None:
        """
        Suspend scanning; no changes are detected until ``resume()``.

        Raises:
            ScanIsStoppingError: If a stop is in progress
            ScanNotRunningError: If the notifier is not running
        """
        with self._lock:
            if self._stopping:
                raise ScanIsStoppingError("scan notifier is stopping")
            if not self._running:
                raise ScanNotRunningError("scan notifier is not running")
            self._paused = True
        logger.info(f"Paused scan notifier for {self.root}")

    def resume(self) -> None:
        """
        Resume scanning after ``pause()``.

        Raises:
            ScanIsStoppingError: If a stop is in progress
        """
        with self._lock:
            if self._stopping:
                raise ScanIsStoppingError("scan notifier is stopping")
            if not self._paused:
                return
            self._paused = False
        logger.info(f"Resumed scan notifier for {self.root}")

    def flush(self) -> None:
        """
        Forget every cached snapshot.

        Every path still present is reported as CREATE on the next pass.
        Paths removed before that pass are not reported as DELETE.
        """
        count = self._cache.clear()
        logger.debug(f"Flushed {count} cached path(s)")

    # --- scan loop ---

    def _begin(self, cancel: Optional[threading.Event]) -> None:
        with self._lock:
            if self._running:
                raise ScanAlreadyStartedError("scan notifier has already started")
            if self._stopping:
                raise ScanIsStoppingError("scan notifier is stopping")
            if not self._ready:
                raise ScanNotReadyError("scan notifier is not (re)initialized")
            self._running = True
            self._cancel = cancel
            self._stop_event.clear()
        logger.info(f"Started scan notifier for {self.root}")

    def _should_exit(self) -> bool:
        if self._stop_event.is_set():
            return True
        return self._cancel is not None and self._cancel.is_set()

    def _sleep(self) -> None:
        """Sleep one scan interval, waking early on stop or cancellation."""
        deadline = time.monotonic() + self.options.scan_interval
        while not self._should_exit():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            self._stop_event.wait(min(remaining, POLL_INTERVAL))

    def _scan_loop(self) -> None:
        try:
            while not self._should_exit():
                if self._paused:
                    self._sleep()
                    continue
                self._run_pass()
                self._sleep()
        finally:
            self._teardown()

    def _run_pass(self) -> None:
        started = time.monotonic()
        self._pool.spawn(self.options.max_workers)
        try:
            walk_tree(self.root, self._visit)
        finally:
            self._pool.finish()
            self._pool.wait()

        deleted = self._sweep()
        self._passes += 1
        logger.debug(
            f"Pass {self._passes} over {self.root} done in "
            f"{time.monotonic() - started:.3f}s, {len(self._cache)} tracked, {deleted} deleted"
        )

    def _visit(self, path: str, path_type: PathType, error: Optional[OSError]):
        if error is not None:
            logger.warning(f"Failed to walk {path}: {error}")

        decision = self._filter.check(path, path_type)
        if self._filter.reports(decision):
            self._intake.put(RawEntry(path, path_type, error))

        if decision is FilterDecision.SKIP_SUBTREE:
            return WalkAction.SKIP_DIR
        return None

    def _process_entry(self, entry: RawEntry) -> None:
        # Options may have changed since the entry was queued.
        if not self._filter.accepts(entry.path, entry.path_type):
            return
        self._classifier.classify(entry)

    def _on_worker_failure(self, entry: RawEntry, error: Exception) -> None:
        if self.options.ignore_errors:
            return
        internal = InternalError(f"internal error: {error}")
        internal.__cause__ = error
        self._emit(Event(entry.path, entry.path_type, EventKind.ERROR, internal))

    def _emit(self, event: Event) -> None:
        if not self._events.put(event, abandon=self._should_exit):
            logger.debug(f"Dropped {event.kind.value} event for {event.path} during shutdown")

    def _sweep(self) -> int:
        """
        Report and evict paths that were not seen during the pass.

        Visited flags are reset for the next pass. Eviction happens even
        when DELETE events are suppressed.
        """
        deleted = 0

        def visit(path: str, snapshot: PathSnapshot) -> bool:
            nonlocal deleted
            if not self._running or self._should_exit():
                return False
            if snapshot.visited:
                snapshot.visited = False
                return True
            if not self.options.ignore_delete:
                self._emit(Event(path, snapshot.path_type, EventKind.DELETE))
            self._cache.delete(path)
            deleted += 1
            return True

        self._cache.for_each(visit)
        return deleted

    def _teardown(self) -> None:
        with self._lock:
            self._stopping = True
            self._stop_event.set()

        self._intake.close()
        self._pool.finish()
        self._pool.wait()
        self._events.close()
        self._cache.clear()

        with self._lock:
            self._running = False
            self._stopping = False
            self._paused = False
            self._ready = False
        logger.info(f"Stopped scan notifier for {self.root}")

    # --- context manager ---

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._running and not self._stopping:
            try:
                self.stop()
            except (ScanNotRunningError, ScanIsStoppingError):
                pass
        self.wait()
        return False
