"""
Domain layer - availability rules and calendar arithmetic, free of I/O.
"""

from .calendar import TimeOptions
from .exceptions import (
    AvailabilityError,
    IntervalNotFound,
    InvalidInterval,
    OverlapError,
    PastDateError,
    PersistenceError,
)
from .models import DayRecord, Interval, overlaps
from .projector import CalendarProjector
from .reconciler import DayStatus, DayView, JobAssignment, decorate, decorate_month, index_assignments
from .selection import SelectionSet
from .weekly_template import TemplateSlot, WeeklyTemplate

__all__ = [
    "AvailabilityError",
    "CalendarProjector",
    "DayRecord",
    "DayStatus",
    "DayView",
    "Interval",
    "IntervalNotFound",
    "InvalidInterval",
    "JobAssignment",
    "OverlapError",
    "PastDateError",
    "PersistenceError",
    "SelectionSet",
    "TemplateSlot",
    "TimeOptions",
    "WeeklyTemplate",
    "decorate",
    "decorate_month",
    "index_assignments",
    "overlaps",
]
