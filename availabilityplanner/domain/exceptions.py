"""
Domain-specific exception hierarchy for the availability planner.
"""

from __future__ import annotations

from datetime import date


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class InvalidInterval(AvailabilityError, ValueError):
    """Raised when an interval does not start before it ends."""


class OverlapError(AvailabilityError):
    """Raised when two intervals of the same day intersect."""

    def __init__(self, message: str, conflicting_id: str | None = None):
        super().__init__(message)
        self.conflicting_id = conflicting_id


class PastDateError(AvailabilityError):
    """Raised when an edit targets a date before today."""

    def __init__(self, target: date, today: date):
        super().__init__(
            f"Cannot edit {target.isoformat()}: dates before {today.isoformat()} are read-only"
        )
        self.target = target
        self.today = today


class IntervalNotFound(AvailabilityError, LookupError):
    """Raised when an interval id is unknown for the given day."""


class PersistenceError(AvailabilityError):
    """Raised when the schedule store or assignment source cannot be reached or parsed."""
