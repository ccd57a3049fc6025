"""
Recurring weekly default schedule, one slot per day of week.

Day-of-week indices follow the schedule store convention: 0 = Sunday through
6 = Saturday.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import time
from typing import Any, Dict, Iterable, List, Literal, Mapping, Tuple

from .calendar import WEEKDAY_NAMES, TimeLike, TimeOptions, format_time, parse_time
from .exceptions import InvalidInterval
from .models import Interval

DAYS_PER_WEEK = 7

DEFAULT_START = time(9, 0)
DEFAULT_END = time(17, 0)


@dataclass(frozen=True)
class TemplateSlot:
    """One weekday of the template. Times are kept even while disabled."""
    enabled: bool = False
    start: time = DEFAULT_START
    end: time = DEFAULT_END

    def __post_init__(self):
        if self.enabled and self.start >= self.end:
            raise InvalidInterval(
                f"Start time {format_time(self.start)} must be before end time {format_time(self.end)}"
            )

    def to_interval(self) -> Interval:
        """Copy the slot's range into a fresh interval with its own id."""
        return Interval(start=self.start, end=self.end)


def _check_day(day_of_week: int) -> int:
    if not 0 <= day_of_week < DAYS_PER_WEEK:
        raise ValueError(f"day_of_week must be between 0 and 6, got {day_of_week}")
    return day_of_week


class WeeklyTemplate:
    """
    Seven day-of-week slots, each disabled or enabled with one default interval.
    """

    def __init__(self, slots: Iterable[TemplateSlot] | None = None):
        slot_list = list(slots) if slots is not None else [TemplateSlot() for _ in range(DAYS_PER_WEEK)]
        if len(slot_list) != DAYS_PER_WEEK:
            raise ValueError(f"A weekly template needs exactly 7 slots, got {len(slot_list)}")
        self._slots: List[TemplateSlot] = slot_list

    def __getitem__(self, day_of_week: int) -> TemplateSlot:
        return self._slots[_check_day(day_of_week)]

    def __iter__(self):
        return iter(self._slots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeeklyTemplate):
            return NotImplemented
        return self._slots == other._slots

    def __repr__(self) -> str:
        return f"WeeklyTemplate({self._slots!r})"

    @property
    def slots(self) -> Tuple[TemplateSlot, ...]:
        return tuple(self._slots)

    def enabled_days(self) -> List[int]:
        return [dow for dow, slot in enumerate(self._slots) if slot.enabled]

    def copy(self) -> "WeeklyTemplate":
        return WeeklyTemplate(self._slots)

    def set_day(
        self,
        day_of_week: int,
        enabled: bool,
        start: TimeLike | None = None,
        end: TimeLike | None = None,
    ) -> TemplateSlot:
        """
        Enable or disable one weekday, optionally changing its times.

        Missing times keep the slot's current values.

        Raises:
            InvalidInterval: If enabling with a start that is not before the end
            ValueError: If the weekday index or a time is invalid
        """
        current = self[day_of_week]
        slot = TemplateSlot(
            enabled=enabled,
            start=parse_time(start) if start is not None else current.start,
            end=parse_time(end) if end is not None else current.end,
        )
        self._slots[day_of_week] = slot
        return slot

    def nudge_day(
        self,
        day_of_week: int,
        field: Literal["start", "end"],
        steps: int,
        options: TimeOptions,
    ) -> TemplateSlot:
        """
        Step a slot's start or end through the allowed time options.

        The result is validated like any other edit, so a nudge that would make
        the slot end before it starts raises ``InvalidInterval`` and leaves the
        slot unchanged.
        """
        current = self[day_of_week]
        if field == "start":
            candidate = replace(current, start=options.step(current.start, steps))
        elif field == "end":
            candidate = replace(current, end=options.step(current.end, steps))
        else:
            raise ValueError(f"field must be 'start' or 'end', got {field!r}")

        self._slots[day_of_week] = candidate
        return candidate

    def to_schedule_rows(self) -> List[Dict[str, Any]]:
        """Serialize to the schedule store's seven-row shape."""
        rows = []
        for day_of_week, slot in enumerate(self._slots):
            rows.append({
                "day_of_week": day_of_week,
                "is_available": slot.enabled,
                "start_time": format_time(slot.start) if slot.enabled else None,
                "end_time": format_time(slot.end) if slot.enabled else None,
            })
        return rows

    @classmethod
    def from_schedule_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "WeeklyTemplate":
        """
        Build a template from schedule store rows.

        Days without a row stay disabled. A disabled row's times, when present,
        are kept so re-enabling the day restores them.

        Raises:
            ValueError: If a row has an invalid weekday, a non-boolean
                ``is_available``, an invalid time, or is enabled without times
            InvalidInterval: If an enabled row does not start before it ends
        """
        slots = [TemplateSlot() for _ in range(DAYS_PER_WEEK)]
        for row in rows:
            day_of_week = _check_day(int(row["day_of_week"]))
            enabled = row.get("is_available", False)
            if not isinstance(enabled, bool):
                raise ValueError(f"is_available must be true or false, got {enabled!r} for day {day_of_week}")
            start = row.get("start_time")
            end = row.get("end_time")
            if enabled and not (start and end):
                raise ValueError(f"Day {day_of_week} is available but has no start or end time")
            slots[day_of_week] = TemplateSlot(
                enabled=enabled,
                start=parse_time(start) if start else DEFAULT_START,
                end=parse_time(end) if end else DEFAULT_END,
            )
        return cls(slots)

    def describe(self) -> List[str]:
        lines = []
        for day_of_week, slot in enumerate(self._slots):
            label = WEEKDAY_NAMES[day_of_week]
            if slot.enabled:
                lines.append(f"{label}: {format_time(slot.start)}-{format_time(slot.end)}")
            else:
                lines.append(f"{label}: off")
        return lines
