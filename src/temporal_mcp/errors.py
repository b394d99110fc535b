"""Errors raised while resolving tables and building temporal statements."""

from datetime import datetime


class TemporalQueryError(Exception):
    """Base class for temporal query errors."""


class UnmappedEntityError(TemporalQueryError, LookupError):
    """Raised when an entity descriptor has no table mapping."""

    def __init__(self, descriptor: object):
        self.descriptor = descriptor
        super().__init__(f"No table mapping registered for {descriptor!r}")


class InvalidRangeError(TemporalQueryError, ValueError):
    """Raised when a range query has its start after its end."""

    def __init__(self, start: datetime, end: datetime):
        self.start = start
        self.end = end
        super().__init__(f"Invalid time range: start {start.isoformat()} is after end {end.isoformat()}")
