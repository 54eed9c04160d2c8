# app/core/errors.py
from typing import Optional


class DashboardError(Exception):
    """Base class for errors the HTTP layer knows how to render."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DashboardError):
    """Client-caused: missing field, out-of-range or unparseable parameter."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class Unavailable(DashboardError):
    """Transport-caused: database or upstream unreachable, timed out or failing."""

    status_code = 503


class QueryError(Unavailable):
    """The database rejected the statement or the connection was lost."""


class UpstreamError(DashboardError):
    """A third-party service answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class LocalSkip(Exception):
    """A single malformed item that should be skipped, not fail the batch."""
