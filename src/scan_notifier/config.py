"""Configuration for the scan notifier package."""

import os
import re
import threading
from dataclasses import dataclass, fields
from typing import Any, Optional, Pattern, Union

DEFAULT_QUEUE_SIZE = 10
DEFAULT_MAX_WORKERS = 1
DEFAULT_SCAN_INTERVAL = 1.0

PatternLike = Union[str, Pattern, None]


class AtomicValue:
    """A single value cell with its own lock."""

    def __init__(self, value: Any = None):
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> Any:
        with self._lock:
            return self._value

    def store(self, value: Any) -> None:
        with self._lock:
            self._value = value

    def __repr__(self) -> str:
        return f"AtomicValue({self.load()!r})"


def _compile(pattern: PatternLike) -> Optional[Pattern]:
    """Compile a pattern, treating an empty one as unset."""
    if pattern is None:
        return None
    if isinstance(pattern, str):
        return re.compile(pattern) if pattern else None
    if not pattern.pattern:
        return None
    return pattern


class ScanOptions:
    """
    Live options shared between the caller and a running notifier.

    Every field is an independent atomic cell, so two callers may update
    two different options at the same time without blocking each other.
    Setters return the options object for chaining and are safe to call
    before or after the notifier has started.
    """

    def __init__(
        self,
        exclude_paths: PatternLike = None,
        include_paths: PatternLike = None,
    ):
        self._queue_size = AtomicValue(0)
        self._max_workers = AtomicValue(0)
        self._scan_interval = AtomicValue(None)
        self._exclude_paths = AtomicValue(_compile(exclude_paths))
        self._include_paths = AtomicValue(_compile(include_paths))

        self._ignore_errors = AtomicValue(False)
        self._ignore_no_change = AtomicValue(True)
        self._ignore_delete = AtomicValue(False)
        self._ignore_create = AtomicValue(False)
        self._ignore_modify = AtomicValue(False)
        self._ignore_perm = AtomicValue(False)
        self._ignore_file = AtomicValue(False)
        self._ignore_folder = AtomicValue(False)
        self._ignore_symlink = AtomicValue(False)
        self._ignore_folder_content = AtomicValue(False)

    def setup(self) -> "ScanOptions":
        """Fill unset sizing fields with their defaults."""
        if self._queue_size.load() <= 0:
            self._queue_size.store(DEFAULT_QUEUE_SIZE)
        if self._max_workers.load() <= 0:
            self._max_workers.store(DEFAULT_MAX_WORKERS)
        if self._scan_interval.load() is None:
            self._scan_interval.store(DEFAULT_SCAN_INTERVAL)
        return self

    # --- setters ---

    def set_queue_size(self, value: int) -> "ScanOptions":
        self._queue_size.store(value)
        return self

    def set_max_workers(self, value: int) -> "ScanOptions":
        if value <= 0:
            return self
        self._max_workers.store(value)
        return self

    def set_scan_interval(self, seconds: float) -> "ScanOptions":
        if seconds < 0:
            raise ValueError(f"scan interval must not be negative: {seconds}")
        self._scan_interval.store(float(seconds))
        return self

    def set_exclude_paths(self, pattern: PatternLike) -> "ScanOptions":
        self._exclude_paths.store(_compile(pattern))
        return self

    def set_include_paths(self, pattern: PatternLike) -> "ScanOptions":
        self._include_paths.store(_compile(pattern))
        return self

    def set_ignore_errors(self, value: bool) -> "ScanOptions":
        self._ignore_errors.store(value)
        return self

    def set_ignore_no_change_event(self, value: bool) -> "ScanOptions":
        self._ignore_no_change.store(value)
        return self

    def set_ignore_delete_event(self, value: bool) -> "ScanOptions":
        self._ignore_delete.store(value)
        return self

    def set_ignore_create_event(self, value: bool) -> "ScanOptions":
        self._ignore_create.store(value)
        return self

    def set_ignore_modify_event(self, value: bool) -> "ScanOptions":
        self._ignore_modify.store(value)
        return self

    def set_ignore_perm_event(self, value: bool) -> "ScanOptions":
        self._ignore_perm.store(value)
        return self

    def set_ignore_file_event(self, value: bool) -> "ScanOptions":
        self._ignore_file.store(value)
        return self

    def set_ignore_folder_event(self, value: bool) -> "ScanOptions":
        self._ignore_folder.store(value)
        return self

    def set_ignore_symlink(self, value: bool) -> "ScanOptions":
        self._ignore_symlink.store(value)
        return self

    def set_ignore_folder_content_event(self, value: bool) -> "ScanOptions":
        self._ignore_folder_content.store(value)
        return self

    # --- readers ---

    @property
    def queue_size(self) -> int:
        return self._queue_size.load()

    @property
    def max_workers(self) -> int:
        return self._max_workers.load()

    @property
    def scan_interval(self) -> float:
        interval = self._scan_interval.load()
        return DEFAULT_SCAN_INTERVAL if interval is None else interval

    @property
    def exclude_paths(self) -> Optional[Pattern]:
        return self._exclude_paths.load()

    @property
    def include_paths(self) -> Optional[Pattern]:
        return self._include_paths.load()

    @property
    def ignore_errors(self) -> bool:
        return self._ignore_errors.load()

    @property
    def ignore_no_change(self) -> bool:
        return self._ignore_no_change.load()

    @property
    def ignore_delete(self) -> bool:
        return self._ignore_delete.load()

    @property
    def ignore_create(self) -> bool:
        return self._ignore_create.load()

    @property
    def ignore_modify(self) -> bool:
        return self._ignore_modify.load()

    @property
    def ignore_perm(self) -> bool:
        return self._ignore_perm.load()

    @property
    def ignore_file(self) -> bool:
        return self._ignore_file.load()

    @property
    def ignore_folder(self) -> bool:
        return self._ignore_folder.load()

    @property
    def ignore_symlink(self) -> bool:
        return self._ignore_symlink.load()

    @property
    def ignore_folder_content(self) -> bool:
        return self._ignore_folder_content.load()


def regex_options(exclude: PatternLike = None, include: PatternLike = None) -> ScanOptions:
    """
    Create options with optional exclude and include patterns.

    Args:
        exclude: Regular expression for paths to exclude
        include: Regular expression that reported paths must match

    Returns:
        A new ScanOptions instance
    """
    return ScanOptions(exclude_paths=exclude, include_paths=include)


_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ScanSettings:
    """
    Static configuration for a scan notifier.

    Attributes:
        queue_size: Capacity of the intake and output queues
        max_workers: Number of workers spawned per pass
        scan_interval: Seconds to sleep between passes
        include_paths: Pattern reported paths must match
        exclude_paths: Pattern for paths to exclude
        ignore_*: Per event kind and entry type suppression flags
    """
    queue_size: int = DEFAULT_QUEUE_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    scan_interval: float = DEFAULT_SCAN_INTERVAL
    include_paths: Optional[str] = None
    exclude_paths: Optional[str] = None
    ignore_errors: bool = False
    ignore_no_change: bool = True
    ignore_delete: bool = False
    ignore_create: bool = False
    ignore_modify: bool = False
    ignore_perm: bool = False
    ignore_file: bool = False
    ignore_folder: bool = False
    ignore_symlink: bool = False
    ignore_folder_content: bool = False

    def to_options(self) -> ScanOptions:
        """Build live options from these settings."""
        return (
            regex_options(self.exclude_paths, self.include_paths)
            .set_queue_size(self.queue_size)
            .set_max_workers(self.max_workers)
            .set_scan_interval(self.scan_interval)
            .set_ignore_errors(self.ignore_errors)
            .set_ignore_no_change_event(self.ignore_no_change)
            .set_ignore_delete_event(self.ignore_delete)
            .set_ignore_create_event(self.ignore_create)
            .set_ignore_modify_event(self.ignore_modify)
            .set_ignore_perm_event(self.ignore_perm)
            .set_ignore_file_event(self.ignore_file)
            .set_ignore_folder_event(self.ignore_folder)
            .set_ignore_symlink(self.ignore_symlink)
            .set_ignore_folder_content_event(self.ignore_folder_content)
        )

    @classmethod
    def from_env(cls, prefix: str = "SCAN_NOTIFIER_", environ=None) -> "ScanSettings":
        """
        Load settings from environment variables.

        Variables are named after the fields, upper-cased and prefixed,
        e.g. ``SCAN_NOTIFIER_MAX_WORKERS``. Missing variables keep their
        default value.

        Args:
            prefix: Prefix shared by all variables
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            A ScanSettings instance
        """
        environ = os.environ if environ is None else environ
        settings = cls()

        for f in fields(cls):
            raw = environ.get(prefix + f.name.upper())
            if raw is None:
                continue
            current = getattr(settings, f.name)
            if isinstance(current, bool):
                value = raw.strip().lower() in _TRUE_VALUES
            elif isinstance(current, int):
                value = int(raw)
            elif isinstance(current, float):
                value = float(raw)
            else:
                value = raw or None
            setattr(settings, f.name, value)

        return settings
