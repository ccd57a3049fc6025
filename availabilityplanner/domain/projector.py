"""
Projection of the weekly template onto concrete calendar dates.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List

from .calendar import as_date, iter_dates, month_bounds, weekday_index
from .models import DayRecord
from .weekly_template import WeeklyTemplate

logger = logging.getLogger(__name__)


class CalendarProjector:
    """
    Expands a weekly template into Day Records.

    Algorithm:
    1. Clip the requested window so it never starts before today
    2. Look up the template slot for each date's weekday
    3. Enabled slot: emit an available record holding a fresh copy of the
       slot's interval
    4. Disabled slot: emit nothing, the date stays unset

    The output is meant to be merged by overwriting exactly the dates it
    contains; dates it does not mention are never touched.
    """

    def project_range(
        self,
        template: WeeklyTemplate,
        start: date,
        end: date,
        today: date,
    ) -> List[DayRecord]:
        """
        Project the template onto every date in ``[max(start, today), end]``.

        Args:
            template: Weekly template to expand
            start: First date of the window
            end: Last date of the window (inclusive)
            today: Dates strictly before this are never emitted

        Returns:
            Available Day Records in ascending date order
        """
        first = max(as_date(start), as_date(today))
        records: List[DayRecord] = []

        for day in iter_dates(first, as_date(end)):
            slot = template[weekday_index(day)]
            if not slot.enabled:
                continue
            records.append(DayRecord.available(day, [slot.to_interval()]))

        logger.debug("Projected %d day(s) between %s and %s", len(records), first, end)
        return records

    def project_month(
        self,
        template: WeeklyTemplate,
        year: int,
        month: int,
        today: date,
    ) -> List[DayRecord]:
        first, last = month_bounds(year, month)
        return self.project_range(template, first, last, today)

    def project_days(
        self,
        template: WeeklyTemplate,
        today: date,
        days: int = 7,
    ) -> List[DayRecord]:
        """Project the template onto the next ``days`` dates, today included."""
        if days <= 0:
            return []
        start = as_date(today)
        return self.project_range(template, start, start + timedelta(days=days - 1), start)
