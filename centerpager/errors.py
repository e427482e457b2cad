"""Error types raised by the pager."""

from typing import Optional


class PagerError(Exception):
    """Base class for all pager failures."""


class PagerIOError(PagerError):
    """An operating-system I/O failure that aborts the session.

    Wraps the underlying OSError (also chained as ``__cause__``) together
    with a short description of what the pager was doing at the time.
    """

    def __init__(self, message: str, os_error: Optional[OSError] = None):
        self.os_error = os_error
        if os_error is not None:
            detail = os_error.strerror or str(os_error)
            message = f"{message}: {detail}"
        super().__init__(message)
