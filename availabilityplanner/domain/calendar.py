"""
Calendar date and time-of-day value helpers.

Calendar dates are ``datetime.date`` values and times of day are
``datetime.time`` values truncated to minutes. Both are always parsed and
formatted through the functions below so ordering and equality stay those of
real dates and times rather than of strings.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterator, Tuple, Union

from dateutil import tz
from dateutil.parser import isoparser
from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, rrule

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

DateLike = Union[date, str]
TimeLike = Union[time, str]

_ISO = isoparser()


def as_date(value: DateLike) -> date:
    """
    Normalise a date, datetime or ``YYYY-MM-DD`` string to a plain ``date``.

    Raises:
        ValueError: If a string cannot be parsed as a calendar date
    """
    if isinstance(value, str):
        return parse_date(value)
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string."""
    text = value.strip()
    if len(text) != 10:
        raise ValueError(f"Invalid calendar date '{value}', expected YYYY-MM-DD")
    try:
        return _ISO.parse_isodate(text)
    except ValueError as exc:
        raise ValueError(f"Invalid calendar date '{value}', expected YYYY-MM-DD") from exc


def format_date(value: date) -> str:
    return as_date(value).isoformat()


def today(timezone: str | None = None) -> date:
    """Return the current calendar date, local unless an IANA timezone is given."""
    zone = tz.gettz(timezone) if timezone else tz.tzlocal()
    return datetime.now(zone).date()


def weekday_index(value: date) -> int:
    """Day-of-week index with 0 = Sunday and 6 = Saturday."""
    return value.isoweekday() % 7


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """
    Return the first and last calendar date of a month.

    Raises:
        ValueError: If the month is outside 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    first = date(year, month, 1)
    return first, first + relativedelta(day=31)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end``, both inclusive."""
    first = as_date(start)
    last = as_date(end)
    if first > last:
        return
    for occurrence in rrule(DAILY, dtstart=first, until=last):
        yield occurrence.date()


def parse_time(value: TimeLike) -> time:
    """
    Parse ``HH:MM`` (or the ``HH:MM:SS`` form some backends return) to a time.

    Seconds are dropped; intervals work at minute granularity.

    Raises:
        ValueError: If the value is not a valid time of day
    """
    if isinstance(value, time):
        return time(hour=value.hour, minute=value.minute)

    text = value.strip()
    if len(text) not in (5, 8) or text[2] != ":":
        raise ValueError(f"Invalid time of day '{value}', expected HH:MM")
    try:
        parsed = _ISO.parse_isotime(text)
    except ValueError as exc:
        raise ValueError(f"Invalid time of day '{value}', expected HH:MM") from exc
    return time(hour=parsed.hour, minute=parsed.minute)


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def minutes_of(value: time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class TimeOptions:
    """
    Bounded, ordered enumeration of selectable times of day.

    Stepping through the options clamps at ``first`` and ``last`` instead of
    wrapping around, so a quick edit can never jump from late evening to early
    morning.
    """
    first: time = time(6, 0)
    last: time = time(22, 0)
    step_minutes: int = 30

    def __post_init__(self):
        if self.step_minutes <= 0:
            raise ValueError("step_minutes must be greater than zero")
        if self.first >= self.last:
            raise ValueError(f"First option {self.first} must be before last option {self.last}")

    @property
    def values(self) -> Tuple[time, ...]:
        start = minutes_of(self.first)
        stop = minutes_of(self.last)
        return tuple(
            time(hour=m // 60, minute=m % 60)
            for m in range(start, stop + 1, self.step_minutes)
        )

    def __iter__(self) -> Iterator[time]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, time):
            return False
        return parse_time(value) in self.values

    def step(self, value: TimeLike, steps: int) -> time:
        """
        Move ``steps`` options forward (or backward when negative) from ``value``.

        A value that is not itself an option snaps to the neighbouring option
        in the direction of travel.
        """
        current = parse_time(value)
        if steps == 0:
            return current

        options = self.values
        minutes = [minutes_of(option) for option in options]
        position = minutes_of(current)

        if steps > 0:
            index = bisect_right(minutes, position) - 1 + steps
        else:
            index = bisect_left(minutes, position) + steps

        index = max(0, min(len(options) - 1, index))
        return options[index]
