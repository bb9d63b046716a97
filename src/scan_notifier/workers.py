"""Worker pool draining the intake queue during a scan pass."""

import logging
import queue
import threading
from typing import Callable, List, Optional

from .exceptions import QueueClosedError
from .models import RawEntry
from .queue import POLL_INTERVAL, BoundedQueue

logger = logging.getLogger(__name__)


class WorkerPool:
    """
    Runs a set of identical consumers over the intake queue for one pass.

    Workers retire once the traversal is marked finished and the intake
    queue is empty. ``wait`` is the barrier the scan loop uses before
    sweeping the cache.
    """

    def __init__(
        self,
        intake: BoundedQueue,
        handler: Callable[[RawEntry], None],
        on_failure: Optional[Callable[[RawEntry, Exception], None]] = None,
    ):
        """
        Initialize the pool.

        Args:
            intake: Queue of raw walk entries
            handler: Called once for every entry taken from the queue
            on_failure: Called when ``handler`` raises unexpectedly
        """
        self.intake = intake
        self.handler = handler
        self.on_failure = on_failure
        self._finished = threading.Event()
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    def spawn(self, count: int) -> int:
        """
        Start ``count`` workers for a new pass.

        Args:
            count: Number of workers (read once per pass)

        Returns:
            Number of workers started
        """
        with self._lock:
            self._finished.clear()
            for i in range(count):
                thread = threading.Thread(
                    target=self._work,
                    name=f"ScanWorker-{i + 1}",
                    daemon=True,
                )
                thread.start()
                self._threads.append(thread)
        logger.debug(f"Spawned {count} scan worker(s)")
        return count

    def finish(self) -> None:
        """Mark the traversal finished so idle workers can retire."""
        self._finished.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for every worker to retire.

        Args:
            timeout: Seconds to wait per worker, None to wait indefinitely

        Returns:
            True if all workers retired
        """
        with self._lock:
            threads = list(self._threads)

        for thread in threads:
            thread.join(timeout=timeout)

        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            return not self._threads

    @property
    def active(self) -> int:
        """Number of workers still running."""
        with self._lock:
            return sum(1 for t in self._threads if t.is_alive())

    def _work(self) -> None:
        processed = 0
        while True:
            try:
                entry = self.intake.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                if self._finished.is_set() and self.intake.empty():
                    break
                continue
            except QueueClosedError:
                break

            processed += 1
            try:
                self.handler(entry)
            except Exception as e:
                logger.error(f"Worker failed on {entry.path}: {e}", exc_info=True)
                if self.on_failure is not None:
                    self.on_failure(entry, e)

        logger.debug(f"{threading.current_thread().name} retired after {processed} entries")
