"""
Tests for reconciling stored availability with job assignments.
"""

from datetime import date

from availabilityplanner.domain.models import DayRecord, Interval
from availabilityplanner.domain.reconciler import (
    DayStatus,
    JobAssignment,
    decorate,
    decorate_month,
    index_assignments,
)
from availabilityplanner.domain.selection import SelectionSet


TODAY = date(2025, 8, 1)


def _available(day: date) -> DayRecord:
    return DayRecord.available(day, [Interval.create("09:00", "17:00")])


class TestDecorate:
    """Tests for the per-date display status."""

    def test_busy_wins_over_available(self):
        """A job on an available date shows as busy but keeps its intervals."""
        day = date(2025, 8, 4)
        record = _available(day)
        assignments = index_assignments([JobAssignment(date=day, label="Warehouse")])

        view = decorate(day, record, assignments, TODAY)

        assert view.status is DayStatus.BUSY
        assert view.is_busy
        assert view.labels == ("Warehouse",)
        assert [str(i) for i in view.intervals] == ["09:00-17:00"]
        assert record.is_available

    def test_busy_wins_over_past(self):
        day = date(2025, 7, 20)
        assignments = index_assignments([JobAssignment(date=day)])

        assert decorate(day, None, assignments, TODAY).status is DayStatus.BUSY

    def test_past_wins_over_record(self):
        day = date(2025, 7, 31)

        view = decorate(day, _available(day), {}, TODAY)

        assert view.status is DayStatus.PAST
        assert len(view.intervals) == 1

    def test_available_unavailable_and_unset(self):
        day = date(2025, 8, 5)

        assert decorate(day, _available(day), {}, TODAY).status is DayStatus.AVAILABLE
        assert decorate(day, DayRecord.unavailable(day), {}, TODAY).status is DayStatus.UNAVAILABLE
        assert decorate(day, None, {}, TODAY).status is DayStatus.UNSET

    def test_today_is_not_past(self):
        assert decorate(TODAY, None, {}, TODAY).status is DayStatus.UNSET

    def test_index_groups_by_date(self):
        indexed = index_assignments([
            JobAssignment(date=date(2025, 8, 4), label="a"),
            JobAssignment(date=date(2025, 8, 4), label="b"),
            JobAssignment(date=date(2025, 8, 5)),
        ])

        assert [a.label for a in indexed[date(2025, 8, 4)]] == ["a", "b"]
        assert len(indexed[date(2025, 8, 5)]) == 1

    def test_decorate_month(self):
        records = {date(2025, 8, 4): _available(date(2025, 8, 4))}
        assignments = index_assignments([JobAssignment(date=date(2025, 8, 16))])

        views = decorate_month(2025, 8, records, assignments, TODAY)

        assert len(views) == 31
        assert views[0].status is DayStatus.UNSET
        assert views[3].status is DayStatus.AVAILABLE
        assert views[15].status is DayStatus.BUSY


class TestSelectionSet:
    """Tests for multi-date selection."""

    def test_toggle_adds_and_removes(self):
        selection = SelectionSet()

        assert selection.toggle("2025-08-05", TODAY) is True
        assert selection.toggle("2025-08-04", TODAY) is True
        assert selection.dates() == [date(2025, 8, 4), date(2025, 8, 5)]
        assert selection.active

        assert selection.toggle("2025-08-05", TODAY) is False
        assert list(selection) == [date(2025, 8, 4)]

    def test_past_dates_cannot_be_selected(self):
        selection = SelectionSet()

        assert selection.toggle("2025-07-31", TODAY) is False
        assert selection.begin("2025-07-31", TODAY) is False
        assert len(selection) == 0
        assert not selection.active

    def test_begin_starts_a_new_selection(self):
        selection = SelectionSet()
        selection.toggle("2025-08-10", TODAY)

        assert selection.begin("2025-08-05", TODAY) is True
        assert selection.dates() == [date(2025, 8, 5)]

    def test_clear(self):
        selection = SelectionSet()
        selection.begin("2025-08-05", TODAY)

        selection.clear()

        assert len(selection) == 0
        assert not selection.active
