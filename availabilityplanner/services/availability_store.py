"""
In-memory store of per-date availability for one user session.

The store is the single owner of Day Records. Callers read snapshots and
issue commands; every command either applies completely to its date or
leaves that date exactly as it was.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, Iterator, List

from ..domain.calendar import DateLike, TimeLike, as_date, month_bounds
from ..domain.exceptions import AvailabilityError, IntervalNotFound, PastDateError
from ..domain.models import DayRecord, Interval

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of a command applied to many dates, one date at a time."""
    applied: List[date] = field(default_factory=list)
    failures: Dict[date, AvailabilityError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def failed_dates(self) -> List[date]:
        return sorted(self.failures)


class AvailabilityStore:
    """
    Mapping of calendar date to Day Record.

    Dates strictly before ``today`` are read-only.
    """

    def __init__(self, today: Callable[[], date]):
        self._today = today
        self._records: Dict[date, DayRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, value: object) -> bool:
        return value in self._records

    @property
    def today(self) -> date:
        return self._today()

    def _check_editable(self, day: date) -> None:
        current = self._today()
        if day < current:
            raise PastDateError(day, current)

    def get(self, day: DateLike) -> DayRecord | None:
        """Return a snapshot of the record for a date, or None when unset."""
        record = self._records.get(as_date(day))
        return record.copy() if record is not None else None

    def snapshot(self) -> Dict[date, DayRecord]:
        return {day: record.copy() for day, record in self._records.items()}

    def records_in_month(self, year: int, month: int) -> Dict[date, DayRecord]:
        first, last = month_bounds(year, month)
        return {
            day: record.copy()
            for day, record in self._records.items()
            if first <= day <= last
        }

    def set_date(self, day: DateLike, record: DayRecord) -> DayRecord:
        """
        Insert or replace the record for a date.

        Raises:
            PastDateError: If the date is before today
            ValueError: If the record is for another date or is available
                without intervals
        """
        day = as_date(day)
        self._check_editable(day)
        if record.date != day:
            raise ValueError(f"Record for {record.date} cannot be stored under {day}")
        if record.is_empty:
            raise ValueError("An available day needs at least one interval")

        self._records[day] = record.copy()
        return record.copy()

    def add_interval(self, day: DateLike, start: TimeLike, end: TimeLike) -> DayRecord:
        """
        Add an interval to a date, creating its record on first edit.

        Raises:
            PastDateError: If the date is before today
            InvalidInterval: If start is not before end
            OverlapError: If the interval intersects an existing one
        """
        day = as_date(day)
        self._check_editable(day)
        interval = Interval.create(start, end)

        working = self._records.get(day)
        working = working.copy() if working is not None else DayRecord(date=day)
        working.add_interval(interval)

        self._records[day] = working
        return working.copy()

    def update_interval(self, day: DateLike, interval_id: str, start: TimeLike, end: TimeLike) -> DayRecord:
        day = as_date(day)
        self._check_editable(day)
        record = self._require(day, interval_id)
        record.update_interval(interval_id, start, end)
        return record.copy()

    def remove_interval(self, day: DateLike, interval_id: str) -> DayRecord | None:
        """
        Remove an interval; the whole record goes once its last interval does.

        Returns:
            The remaining record, or None if the date is now unset
        """
        day = as_date(day)
        self._check_editable(day)
        record = self._require(day, interval_id)
        record.remove_interval(interval_id)

        if record.is_empty:
            del self._records[day]
            return None
        return record.copy()

    def _require(self, day: date, interval_id: str) -> DayRecord:
        record = self._records.get(day)
        if record is None:
            raise IntervalNotFound(f"No interval '{interval_id}' on {day.isoformat()}")
        return record

    def mark_unavailable(self, day: DateLike) -> DayRecord:
        day = as_date(day)
        return self.set_date(day, DayRecord.unavailable(day))

    def clear_date(self, day: DateLike) -> bool:
        """
        Delete the record for a date entirely.

        Returns:
            True if a record was removed
        """
        day = as_date(day)
        self._check_editable(day)
        return self._records.pop(day, None) is not None

    def clear_all(self) -> int:
        """Drop every editable record; past dates are kept. Returns the number removed."""
        current = self._today()
        doomed = [day for day in self._records if day >= current]
        for day in doomed:
            del self._records[day]
        return len(doomed)

    def batch_mark_available(self, dates: Iterable[DateLike], start: TimeLike, end: TimeLike) -> BatchResult:
        """
        Give every date the same single interval, replacing what was there.

        Each date is handled on its own: a past date is reported in the
        result's failures and does not stop the others.

        Raises:
            InvalidInterval: If start is not before end (nothing is applied)
            ValueError: If any date cannot be parsed (nothing is applied)
        """
        template = Interval.create(start, end)
        return self._apply_each(
            dates,
            lambda day: self.set_date(day, DayRecord.available(day, [template.with_new_id()])),
        )

    def batch_mark_unavailable(self, dates: Iterable[DateLike]) -> BatchResult:
        """Mark every date unavailable; past dates are reported, malformed ones abort the batch."""
        return self._apply_each(dates, self.mark_unavailable)

    def merge_projection(self, records: Iterable[DayRecord]) -> BatchResult:
        """Install projected records, overwriting only the dates they cover."""
        by_date = {record.date: record for record in records}
        return self._apply_each(by_date, lambda day: self.set_date(day, by_date[day]))

    def _apply_each(self, dates: Iterable[DateLike], command: Callable[[date], object]) -> BatchResult:
        """
        Run a single-date command for every date.

        All dates are parsed before the first command runs, so a malformed
        date raises ValueError with nothing applied.
        """
        days = [as_date(raw) for raw in dates]
        result = BatchResult()
        for day in days:
            try:
                command(day)
            except PastDateError as exc:
                result.failures[day] = exc
                continue
            result.applied.append(day)

        if result.failures:
            logger.debug(
                "Batch applied to %d date(s), rejected %d past date(s)",
                len(result.applied),
                len(result.failures),
            )
        return result

    def upcoming(self, from_date: DateLike, limit: int) -> Iterator[DayRecord]:
        """
        Lazily yield available records on or after ``from_date``, oldest first.

        The iterator is single-use and stops after ``limit`` records.
        """
        start = as_date(from_date)
        days = sorted(day for day in self._records if day >= start)

        def walk() -> Iterator[DayRecord]:
            for day in days:
                record = self._records.get(day)
                if record is not None and record.is_available:
                    yield record.copy()

        return itertools.islice(walk(), max(limit, 0))
