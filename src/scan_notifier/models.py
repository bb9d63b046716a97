"""Data models for the scan notifier package."""

import stat
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class PathType(Enum):
    """Kinds of filesystem entries."""
    FILE = "FILE"
    DIRECTORY = "DIRECTORY"
    SYMLINK = "SYMLINK"
    UNSUPPORTED = "UNSUPPORTED"


class EventKind(Enum):
    """Kinds of change events."""
    CREATE = "CREATE"
    MODIFY = "MODIFY"
    DELETE = "DELETE"
    PERM = "PERM"
    ERROR = "ERROR"
    NOCHANGE = "NOCHANGE"


def get_path_type(mode: int) -> PathType:
    """
    Resolve the entry type from ``st_mode`` bits.

    Args:
        mode: Mode as returned by ``os.lstat``

    Returns:
        The matching PathType
    """
    if stat.S_ISDIR(mode):
        return PathType.DIRECTORY
    if stat.S_ISREG(mode):
        return PathType.FILE
    if stat.S_ISLNK(mode):
        return PathType.SYMLINK
    return PathType.UNSUPPORTED


@dataclass(frozen=True)
class Event:
    """
    Represents a change detected on one path.

    Attributes:
        path: Absolute path of the entry
        path_type: Type of the entry
        kind: What happened to the entry
        error: Underlying failure for ERROR events, None otherwise
    """
    path: str
    path_type: PathType
    kind: EventKind
    error: Optional[Union[BaseException, str]] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "path": self.path,
            "type": self.path_type.value,
            "kind": self.kind.value,
            "error": str(self.error) if self.error is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create from dictionary."""
        return cls(
            path=data["path"],
            path_type=PathType(data["type"]),
            kind=EventKind(data["kind"]),
            error=data.get("error"),
        )


@dataclass
class RawEntry:
    """
    A traversal result waiting to be classified.

    Attributes:
        path: Absolute path reported by the walk
        path_type: Type resolved during the walk
        error: Traversal failure for this path, if any
    """
    path: str
    path_type: PathType
    error: Optional[BaseException] = None


@dataclass
class PathSnapshot:
    """
    Last observed metadata for one path.

    Attributes:
        mod_time_ns: Modification time in nanoseconds
        mode: Full ``st_mode`` (type and permission bits)
        visited: Whether the path was seen during the current pass
    """
    mod_time_ns: int
    mode: int
    visited: bool = False

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)

    @property
    def path_type(self) -> PathType:
        return get_path_type(self.mode)

    @classmethod
    def from_stat(cls, st, visited: bool = False) -> "PathSnapshot":
        """Build a snapshot from an ``os.stat_result``."""
        return cls(mod_time_ns=st.st_mtime_ns, mode=st.st_mode, visited=visited)
