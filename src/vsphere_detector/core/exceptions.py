"""Custom exceptions for the vSphere problem detector."""


class DetectorError(Exception):
    """Base exception for all detector errors."""


class ConfigurationError(DetectorError):
    """Configuration-related errors."""


class InfrastructureError(DetectorError):
    """vSphere or Kubernetes API could not be reached, authenticated or listed."""


class TimeoutFailure(DetectorError, TimeoutError):
    """The run deadline expired during a remote call."""


class CheckFailure(DetectorError):
    """A check's own rule was violated."""


class PropertyNotPrefetchedError(DetectorError, KeyError):
    """A node check read a VM property outside the prefetch set."""

    def __init__(self, path: str):
        """Initialize error.

        Args:
            path: Property path that was requested
        """
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"VM property {self.path!r} is not in the node prefetch set"
