"""Path filtering for the scan notifier."""

from enum import Enum

from .config import ScanOptions
from .models import PathType


class FilterDecision(Enum):
    """Outcome of checking one walk entry against the options."""
    ACCEPT = "accept"
    SKIP = "skip"
    SKIP_SUBTREE = "skip_subtree"


class EntryFilter:
    """
    Decides whether an entry is reported and whether its subtree is walked.

    Options are read on every call, so changes made while a scan is running
    apply to the next entry checked.
    """

    def __init__(self, root: str, options: ScanOptions):
        """
        Initialize the filter.

        Args:
            root: Root directory of the notifier (never reported)
            options: Live options shared with the notifier
        """
        self.root = root
        self.options = options

    def check(self, path: str, path_type: PathType) -> FilterDecision:
        """
        Classify an entry. The first matching rule wins.

        Args:
            path: Absolute path of the entry
            path_type: Type of the entry

        Returns:
            The FilterDecision for this entry
        """
        if path_type is PathType.UNSUPPORTED:
            return FilterDecision.SKIP

        if path == self.root:
            return FilterDecision.SKIP

        exclude = self.options.exclude_paths
        if exclude is not None and exclude.search(path):
            return FilterDecision.SKIP

        include = self.options.include_paths
        if include is not None and not include.search(path):
            return FilterDecision.SKIP

        if path_type is PathType.FILE and self.options.ignore_file:
            return FilterDecision.SKIP

        if path_type is PathType.DIRECTORY:
            if self.options.ignore_folder_content:
                return FilterDecision.SKIP_SUBTREE
            if self.options.ignore_folder:
                return FilterDecision.SKIP

        if path_type is PathType.SYMLINK and self.options.ignore_symlink:
            return FilterDecision.SKIP

        return FilterDecision.ACCEPT

    def reports(self, decision: FilterDecision) -> bool:
        """
        Tell whether the entry itself is reported for a decision.

        A pruned directory is still reported unless folder events are
        ignored.
        """
        if decision is FilterDecision.ACCEPT:
            return True
        if decision is FilterDecision.SKIP_SUBTREE:
            return not self.options.ignore_folder
        return False

    def accepts(self, path: str, path_type: PathType) -> bool:
        """Shortcut for ``reports(check(path, path_type))``."""
        return self.reports(self.check(path, path_type))
