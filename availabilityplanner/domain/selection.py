"""
Transient multi-date selection used for batch edits.
"""

from __future__ import annotations

from datetime import date
from typing import Iterator, List, Set

from .calendar import DateLike, as_date


class SelectionSet:
    """
    Dates chosen for the next batch operation.

    Past dates are never selectable. The selection is cleared after each batch
    action or when the user cancels.
    """

    def __init__(self) -> None:
        self._dates: Set[date] = set()
        self.active = False

    def __contains__(self, value: object) -> bool:
        return value in self._dates

    def __iter__(self) -> Iterator[date]:
        return iter(self.dates())

    def __len__(self) -> int:
        return len(self._dates)

    def begin(self, day: DateLike, today: date) -> bool:
        """Enter multi-select mode with a single date (the long-press gesture)."""
        day = as_date(day)
        if day < today:
            return False
        self._dates = {day}
        self.active = True
        return True

    def toggle(self, day: DateLike, today: date) -> bool:
        """
        Add or remove a date.

        Returns:
            True if the date is selected afterwards
        """
        day = as_date(day)
        if day < today:
            return False
        self.active = True
        if day in self._dates:
            self._dates.discard(day)
            return False
        self._dates.add(day)
        return True

    def dates(self) -> List[date]:
        return sorted(self._dates)

    def clear(self) -> None:
        self._dates.clear()
        self.active = False
