"""
Presentation-level reconciliation of stored availability with job assignments.

Nothing here writes to the availability store: job-assignment dates only
change how a date is reported, never what is stored for it.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .calendar import as_date, iter_dates, month_bounds
from .models import DayRecord, Interval


class DayStatus(str, Enum):
    BUSY = "busy"
    PAST = "past"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNSET = "unset"


@dataclass(frozen=True)
class JobAssignment:
    """A date the worker is already committed to, as reported by the job source."""
    date: date
    label: str = ""


@dataclass(frozen=True)
class DayView:
    """Decorated state of one date as shown to the calendar picker."""
    date: date
    status: DayStatus
    intervals: Tuple[Interval, ...] = ()
    labels: Tuple[str, ...] = field(default=())

    @property
    def is_busy(self) -> bool:
        return self.status is DayStatus.BUSY


AssignmentIndex = Mapping[date, Sequence[JobAssignment]]


def index_assignments(assignments: Iterable[JobAssignment]) -> Dict[date, List[JobAssignment]]:
    """Group assignments by calendar date."""
    indexed: Dict[date, List[JobAssignment]] = defaultdict(list)
    for assignment in assignments:
        indexed[as_date(assignment.date)].append(assignment)
    return dict(indexed)


def decorate(
    day: date,
    record: DayRecord | None,
    assignments: AssignmentIndex,
    today: date,
) -> DayView:
    """
    Compute the display status of a date.

    Precedence: busy (any job assignment on the date), then past, then the
    stored record (available or unavailable), then unset. Stored intervals are
    reported alongside the status even when the date is busy or past.
    """
    day = as_date(day)
    intervals = tuple(record.intervals) if record is not None else ()
    booked = assignments.get(day, ())

    if booked:
        labels = tuple(a.label for a in booked if a.label)
        return DayView(date=day, status=DayStatus.BUSY, intervals=intervals, labels=labels)

    if day < as_date(today):
        return DayView(date=day, status=DayStatus.PAST, intervals=intervals)

    if record is None:
        return DayView(date=day, status=DayStatus.UNSET)

    status = DayStatus.AVAILABLE if record.is_available else DayStatus.UNAVAILABLE
    return DayView(date=day, status=status, intervals=intervals)


def decorate_month(
    year: int,
    month: int,
    records: Mapping[date, DayRecord],
    assignments: AssignmentIndex,
    today: date,
) -> List[DayView]:
    """Decorate every date of a month, in order."""
    first, last = month_bounds(year, month)
    return [
        decorate(day, records.get(day), assignments, today)
        for day in iter_dates(first, last)
    ]
