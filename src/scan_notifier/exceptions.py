"""Custom exceptions for the scan notifier package."""


class ScanNotifierError(Exception):
    """Base exception for all scan notifier errors."""
    pass


class InvalidRootDirPathError(ScanNotifierError):
    """Root path is not an accessible directory."""
    pass


class InitializationError(ScanNotifierError):
    """Initial walk of the root directory failed."""
    pass


class LifecycleError(ScanNotifierError):
    """Operation is not valid in the current lifecycle state."""
    pass


class ScanNotRunningError(LifecycleError):
    """Scan notifier is not running."""
    pass


class ScanAlreadyStartedError(LifecycleError):
    """Scan notifier has already started."""
    pass


class ScanIsStoppingError(LifecycleError):
    """Scan notifier is stopping."""
    pass


class ScanNotReadyError(LifecycleError):
    """Scan notifier is not (re)initialized."""
    pass


class InternalError(ScanNotifierError):
    """Unexpected internal failure."""
    pass


class QueueClosedError(ScanNotifierError):
    """Queue was closed by the notifier teardown."""
    pass
