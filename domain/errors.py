"""Error kinds raised across the tracker."""
from typing import Optional


class TrackerError(Exception):
    """Base class for every error the tracker raises on purpose."""


class RemoteUnavailable(TrackerError):
    """The match source could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedRecord(TrackerError):
    """A payload (remote or stored) did not have the expected shape."""


class PersistenceFailure(TrackerError):
    """The aggregate store could not be read or written."""
