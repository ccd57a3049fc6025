"""
Domain models for intervals and per-date availability records.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import Iterable, List

from .calendar import TimeLike, format_date, format_time, minutes_of, parse_time
from .exceptions import IntervalNotFound, InvalidInterval, OverlapError


def new_interval_id() -> str:
    """Generate a short random interval id."""
    return secrets.token_hex(4)


@dataclass(frozen=True)
class Interval:
    """
    Represents an immutable time-of-day range on a single day.

    Invariant: start must be before end.
    """
    start: time
    end: time
    id: str = field(default_factory=new_interval_id, compare=False)

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInterval(
                f"Start time {format_time(self.start)} must be before end time {format_time(self.end)}"
            )

    @classmethod
    def create(cls, start: TimeLike, end: TimeLike, interval_id: str | None = None) -> "Interval":
        """
        Build an interval from ``HH:MM`` strings or time values.

        Raises:
            InvalidInterval: If start is not before end
            ValueError: If a time cannot be parsed
        """
        start_time = parse_time(start)
        end_time = parse_time(end)
        if interval_id is None:
            return cls(start=start_time, end=end_time)
        return cls(start=start_time, end=end_time, id=interval_id)

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return minutes_of(self.end) - minutes_of(self.start)

    def overlaps(self, other: "Interval") -> bool:
        """Check if this interval overlaps with another. Touching ends do not count."""
        return self.start < other.end and other.start < self.end

    def with_new_id(self) -> "Interval":
        return replace(self, id=new_interval_id())

    def __str__(self) -> str:
        return f"{format_time(self.start)}-{format_time(self.end)}"


def overlaps(a: Interval, b: Interval) -> bool:
    return a.overlaps(b)


@dataclass
class DayRecord:
    """
    Availability of one calendar date.

    An unavailable record never holds intervals; an available one is built
    with at least one interval and keeps them sorted by start time and
    pairwise non-overlapping. Only ``remove_interval`` can leave an available
    record empty (see ``is_empty``), and the owning store deletes it then.
    """
    date: date
    is_available: bool = False
    intervals: List[Interval] = field(default_factory=list)

    def __post_init__(self):
        if not self.is_available and self.intervals:
            raise ValueError("An unavailable day cannot hold intervals")
        if self.is_available and not self.intervals:
            raise ValueError("An available day needs at least one interval")
        pending = sorted(self.intervals, key=lambda i: i.start)
        self.intervals = []
        for interval in pending:
            self.add_interval(interval)

    @classmethod
    def available(cls, day: date, intervals: Iterable[Interval]) -> "DayRecord":
        return cls(date=day, is_available=True, intervals=list(intervals))

    @classmethod
    def unavailable(cls, day: date) -> "DayRecord":
        return cls(date=day, is_available=False)

    @property
    def is_empty(self) -> bool:
        """True when the record is marked available but has no intervals left."""
        return self.is_available and not self.intervals

    def set_unavailable(self) -> None:
        self.is_available = False
        self.intervals = []

    def find_interval(self, interval_id: str) -> Interval:
        for interval in self.intervals:
            if interval.id == interval_id:
                return interval
        raise IntervalNotFound(f"No interval '{interval_id}' on {format_date(self.date)}")

    def add_interval(self, interval: Interval, ignore_id: str | None = None) -> None:
        """
        Insert an interval, keeping the list sorted by start time.

        Args:
            interval: The interval to insert
            ignore_id: Id of an interval being edited in place; it is skipped
                by the overlap check

        Raises:
            OverlapError: If the interval intersects another interval of this day
        """
        for existing in self.intervals:
            if ignore_id is not None and existing.id == ignore_id:
                continue
            if existing.overlaps(interval):
                raise OverlapError(
                    f"{interval} overlaps existing interval {existing} on {format_date(self.date)}",
                    conflicting_id=existing.id,
                )

        self.intervals.append(interval)
        self.intervals.sort(key=lambda i: i.start)
        self.is_available = True

    def remove_interval(self, interval_id: str) -> Interval:
        """
        Remove an interval by id and return it.

        When the last interval goes, the record is left empty; the owning store
        is responsible for deleting it.
        """
        interval = self.find_interval(interval_id)
        self.intervals = [i for i in self.intervals if i.id != interval_id]
        return interval

    def update_interval(self, interval_id: str, new_start: TimeLike, new_end: TimeLike) -> Interval:
        """
        Move an interval to new bounds, atomically.

        The interval keeps its id. On ``InvalidInterval`` or ``OverlapError``
        the record is left exactly as it was.
        """
        current = self.find_interval(interval_id)
        updated = Interval.create(new_start, new_end, interval_id=current.id)

        for existing in self.intervals:
            if existing.id != interval_id and existing.overlaps(updated):
                raise OverlapError(
                    f"{updated} overlaps existing interval {existing} on {format_date(self.date)}",
                    conflicting_id=existing.id,
                )

        self.intervals = [i for i in self.intervals if i.id != interval_id]
        self.add_interval(updated)
        return updated

    def copy(self) -> "DayRecord":
        """Return an independent snapshot of this record."""
        return DayRecord(date=self.date, is_available=self.is_available, intervals=list(self.intervals))

    def summary(self) -> str:
        if not self.is_available:
            return "unavailable"
        return ", ".join(str(i) for i in self.intervals)
