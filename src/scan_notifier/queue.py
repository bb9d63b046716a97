"""Bounded in-memory queues connecting the walk, the workers and the consumer."""

import queue
import threading
import time
from typing import Any, Callable, Iterator, Optional

from .exceptions import QueueClosedError
from .models import Event

# Granularity at which blocked producers and consumers re-check for closing.
POLL_INTERVAL = 0.05


class BoundedQueue:
    """
    Thread-safe FIFO with a fixed capacity and one-way closing.

    Producers block while the queue is full. Closing wakes them up with
    a QueueClosedError; items already queued can still be drained.
    """

    def __init__(self, maxsize: int):
        """
        Initialize the queue.

        Args:
            maxsize: Capacity of the queue (must be positive)
        """
        if maxsize <= 0:
            raise ValueError(f"queue capacity must be positive: {maxsize}")
        self.maxsize = maxsize
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize)
        self._closed = threading.Event()

    def put(self, item: Any, abandon: Optional[Callable[[], bool]] = None) -> bool:
        """
        Add an item, blocking while the queue is full.

        Args:
            item: Item to enqueue
            abandon: Checked while blocked; returning True gives up

        Returns:
            True if the item was queued, False if it was abandoned

        Raises:
            QueueClosedError: If the queue is closed
        """
        while True:
            if self._closed.is_set():
                raise QueueClosedError("Queue is closed")
            try:
                self._queue.put(item, timeout=POLL_INTERVAL)
                return True
            except queue.Full:
                if abandon is not None and abandon():
                    return False

    def get(self, timeout: Optional[float] = None) -> Any:
        """
        Remove and return the oldest item.

        Args:
            timeout: Seconds to wait; None waits until an item arrives or
                the queue is closed

        Returns:
            The oldest item

        Raises:
            queue.Empty: If the timeout expires
            QueueClosedError: If the queue is closed and drained
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if deadline is None:
                wait = POLL_INTERVAL
            else:
                wait = min(POLL_INTERVAL, max(0.0, deadline - time.monotonic()))
            try:
                return self._queue.get(timeout=wait)
            except queue.Empty:
                if self._closed.is_set() and self._queue.empty():
                    raise QueueClosedError("Queue is closed")
                if deadline is not None and time.monotonic() >= deadline:
                    raise

    def get_nowait(self) -> Any:
        """
        Remove and return the oldest item without waiting.

        Raises:
            queue.Empty: If no item is available
            QueueClosedError: If the queue is closed and drained
        """
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            if self._closed.is_set():
                raise QueueClosedError("Queue is closed")
            raise

    def qsize(self) -> int:
        return self._queue.qsize()

    def empty(self) -> bool:
        return self._queue.empty()

    def close(self) -> None:
        """Close the queue. Further puts fail; gets drain what is left."""
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __len__(self) -> int:
        return self._queue.qsize()


class EventStream:
    """
    Read-only view over the notifier's event queue.

    Iterating yields events until the notifier is stopped and every
    queued event has been consumed.
    """

    def __init__(self, events: BoundedQueue):
        self._events = events

    def get(self, timeout: Optional[float] = None) -> Event:
        """
        Wait for the next event.

        Raises:
            queue.Empty: If the timeout expires
            QueueClosedError: If the notifier stopped and the stream is drained
        """
        return self._events.get(timeout=timeout)

    def get_nowait(self) -> Event:
        """Return the next event if one is ready, else raise queue.Empty."""
        return self._events.get_nowait()

    def qsize(self) -> int:
        return self._events.qsize()

    @property
    def closed(self) -> bool:
        return self._events.closed

    def __iter__(self) -> Iterator[Event]:
        while True:
            try:
                yield self._events.get()
            except QueueClosedError:
                return

    def __len__(self) -> int:
        return self._events.qsize()
