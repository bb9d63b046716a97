"""
Scan Notifier Package

A polling notifier that periodically walks a root directory and reports
everything that changed since the previous pass as a stream of events.

Features:
- Events: CREATE, MODIFY, DELETE, PERM, ERROR, NOCHANGE
- Change detection from modification time and permission bits
- Configurable pool of workers classifying entries in parallel
- Include/exclude regular expressions and per-kind suppression flags
- Options that can be changed from any thread while scanning
- Start, stop, pause, resume and flush lifecycle
"""

from .models import (
    PathType,
    EventKind,
    Event,
    RawEntry,
    PathSnapshot,
    get_path_type,
)

from .config import (
    AtomicValue,
    ScanOptions,
    ScanSettings,
    regex_options,
)

from .exceptions import (
    ScanNotifierError,
    InvalidRootDirPathError,
    InitializationError,
    LifecycleError,
    ScanNotRunningError,
    ScanAlreadyStartedError,
    ScanIsStoppingError,
    ScanNotReadyError,
    InternalError,
    QueueClosedError,
)

from .cache import PathStateCache
from .walker import WalkAction, walk_tree
from .filters import EntryFilter, FilterDecision
from .classifier import EventClassifier
from .queue import BoundedQueue, EventStream
from .workers import WorkerPool
from .notifier import ScanNotifier


__all__ = [
    # Models
    "PathType",
    "EventKind",
    "Event",
    "RawEntry",
    "PathSnapshot",
    "get_path_type",
    # Config
    "AtomicValue",
    "ScanOptions",
    "ScanSettings",
    "regex_options",
    # Exceptions
    "ScanNotifierError",
    "InvalidRootDirPathError",
    "InitializationError",
    "LifecycleError",
    "ScanNotRunningError",
    "ScanAlreadyStartedError",
    "ScanIsStoppingError",
    "ScanNotReadyError",
    "InternalError",
    "QueueClosedError",
    # Components
    "PathStateCache",
    "WalkAction",
    "walk_tree",
    "EntryFilter",
    "FilterDecision",
    "EventClassifier",
    "BoundedQueue",
    "EventStream",
    "WorkerPool",
    # Main Notifier
    "ScanNotifier",
]

__version__ = "0.1.0"
