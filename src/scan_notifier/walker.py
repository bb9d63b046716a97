"""Depth-first directory traversal built on os.scandir."""

import os
from enum import Enum
from typing import Callable, Optional

from .models import PathType, get_path_type


class WalkAction(Enum):
    """What the walk should do after visiting an entry."""
    CONTINUE = "continue"
    SKIP_DIR = "skip_dir"


VisitFunc = Callable[[str, PathType, Optional[OSError]], Optional[WalkAction]]


def _entry_type(entry: os.DirEntry) -> PathType:
    """Resolve the type of a directory entry without following symlinks."""
    try:
        if entry.is_symlink():
            return PathType.SYMLINK
        if entry.is_dir(follow_symlinks=False):
            return PathType.DIRECTORY
        if entry.is_file(follow_symlinks=False):
            return PathType.FILE
        return get_path_type(entry.stat(follow_symlinks=False).st_mode)
    except OSError:
        return PathType.UNSUPPORTED


def walk_tree(root: str, visit: VisitFunc) -> None:
    """
    Walk the tree under ``root`` in depth-first pre-order.

    ``visit(path, path_type, error)`` is called for the root and for every
    entry below it, siblings in name order. Returning ``WalkAction.SKIP_DIR``
    for a directory prunes its subtree. A directory that cannot be listed is
    visited a second time with the ``OSError``. Exceptions raised by
    ``visit`` abort the walk and propagate to the caller.

    Args:
        root: Directory to walk
        visit: Callback invoked for each entry
    """
    try:
        root_type = get_path_type(os.lstat(root).st_mode)
    except OSError as e:
        visit(root, PathType.UNSUPPORTED, e)
        return

    if visit(root, root_type, None) is WalkAction.SKIP_DIR:
        return
    if root_type is PathType.DIRECTORY:
        _walk_dir(root, visit)


def _walk_dir(path: str, visit: VisitFunc) -> None:
    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        visit(path, PathType.DIRECTORY, e)
        return

    for entry in entries:
        path_type = _entry_type(entry)
        if visit(entry.path, path_type, None) is WalkAction.SKIP_DIR:
            continue
        if path_type is PathType.DIRECTORY:
            _walk_dir(entry.path, visit)
