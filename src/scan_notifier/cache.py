"""Thread-safe cache of the last observed state of each path."""

import threading
from typing import Callable, Dict, Optional, Tuple

from .models import PathSnapshot


class PathStateCache:
    """
    Concurrent mapping from absolute path to its last PathSnapshot.

    Single-key operations are atomic. ``for_each`` iterates over a copy of
    the entries so the visitor may store or delete while iterating.
    """

    def __init__(self):
        """Initialize an empty cache."""
        self._paths: Dict[str, PathSnapshot] = {}
        self._lock = threading.Lock()

    def lookup(self, path: str) -> Tuple[Optional[PathSnapshot], bool]:
        """
        Get the snapshot for a path.

        Args:
            path: Absolute path

        Returns:
            (snapshot, found) - snapshot is None when not found
        """
        with self._lock:
            snapshot = self._paths.get(path)
            return snapshot, snapshot is not None

    def store(self, path: str, snapshot: PathSnapshot) -> None:
        """Insert or replace the snapshot for a path."""
        with self._lock:
            self._paths[path] = snapshot

    def delete(self, path: str) -> bool:
        """
        Remove a path from the cache.

        Returns:
            True if the path was cached
        """
        with self._lock:
            return self._paths.pop(path, None) is not None

    def for_each(self, visitor: Callable[[str, PathSnapshot], bool]) -> int:
        """
        Call ``visitor(path, snapshot)`` for every cached entry.

        Iteration stops as soon as the visitor returns False. Entries
        removed by an earlier visitor call are not visited.

        Args:
            visitor: Callback returning whether to continue

        Returns:
            Number of entries visited
        """
        with self._lock:
            items = list(self._paths.items())

        count = 0
        for path, snapshot in items:
            with self._lock:
                if self._paths.get(path) is not snapshot:
                    continue
            count += 1
            if not visitor(path, snapshot):
                break
        return count

    def clear(self) -> int:
        """
        Remove all entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._paths)
            self._paths.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._paths
