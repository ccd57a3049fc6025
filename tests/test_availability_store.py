"""
Tests for the per-date availability store.
"""

from datetime import date

import pytest

from availabilityplanner.domain.exceptions import (
    IntervalNotFound,
    InvalidInterval,
    OverlapError,
    PastDateError,
)
from availabilityplanner.domain.models import DayRecord, Interval
from availabilityplanner.services.availability_store import AvailabilityStore


TODAY = date(2025, 8, 1)
YESTERDAY = date(2025, 7, 31)


@pytest.fixture
def store():
    return AvailabilityStore(today=lambda: TODAY)


class TestEditingSingleDates:
    """Single-date commands."""

    def test_first_edit_creates_record(self, store):
        record = store.add_interval("2025-08-04", "09:00", "12:00")

        assert record.is_available
        assert date(2025, 8, 4) in store
        assert store.get(date(2025, 8, 4)).summary() == "09:00-12:00"

    def test_overlap_is_rejected_and_touching_is_accepted(self, store):
        store.add_interval("2025-08-04", "09:00", "12:00")

        with pytest.raises(OverlapError):
            store.add_interval("2025-08-04", "10:00", "11:00")
        assert store.get("2025-08-04").summary() == "09:00-12:00"

        store.add_interval("2025-08-04", "12:00", "13:00")
        assert store.get("2025-08-04").summary() == "09:00-12:00, 12:00-13:00"

    def test_invalid_interval_leaves_date_unset(self, store):
        with pytest.raises(InvalidInterval):
            store.add_interval("2025-08-04", "12:00", "12:00")

        assert store.get("2025-08-04") is None

    def test_past_date_is_read_only(self, store):
        with pytest.raises(PastDateError) as excinfo:
            store.add_interval(YESTERDAY, "09:00", "12:00")

        assert excinfo.value.target == YESTERDAY
        assert excinfo.value.today == TODAY
        assert len(store) == 0

    def test_today_is_editable(self, store):
        store.mark_unavailable(TODAY)

        assert store.get(TODAY).is_available is False

    def test_get_returns_a_snapshot(self, store):
        store.add_interval("2025-08-04", "09:00", "12:00")

        snapshot = store.get("2025-08-04")
        snapshot.set_unavailable()

        assert store.get("2025-08-04").is_available

    def test_removing_last_interval_unsets_the_date(self, store):
        record = store.add_interval("2025-08-04", "09:00", "12:00")

        remaining = store.remove_interval("2025-08-04", record.intervals[0].id)

        assert remaining is None
        assert date(2025, 8, 4) not in store
        assert store.get("2025-08-04") is None

    def test_removing_one_of_two_intervals(self, store):
        store.add_interval("2025-08-04", "09:00", "12:00")
        record = store.add_interval("2025-08-04", "13:00", "15:00")

        remaining = store.remove_interval("2025-08-04", record.intervals[1].id)

        assert remaining.summary() == "09:00-12:00"

    def test_add_then_remove_restores_previous_state(self, store):
        store.add_interval("2025-08-04", "09:00", "12:00")
        before = store.get("2025-08-04")

        record = store.add_interval("2025-08-04", "14:00", "16:00")
        added = [i for i in record.intervals if str(i) == "14:00-16:00"][0]
        store.remove_interval("2025-08-04", added.id)

        assert store.get("2025-08-04") == before

    def test_remove_unknown_interval(self, store):
        with pytest.raises(IntervalNotFound):
            store.remove_interval("2025-08-04", "nope")

    def test_update_interval_keeps_id(self, store):
        record = store.add_interval("2025-08-04", "09:00", "12:00")
        interval_id = record.intervals[0].id

        updated = store.update_interval("2025-08-04", interval_id, "10:00", "13:00")

        assert updated.intervals[0].id == interval_id
        assert updated.summary() == "10:00-13:00"

    def test_mark_unavailable_replaces_intervals(self, store):
        store.add_interval("2025-08-04", "09:00", "12:00")

        store.mark_unavailable("2025-08-04")

        record = store.get("2025-08-04")
        assert record.is_available is False
        assert record.intervals == []

    def test_set_date_rejects_mismatched_or_empty_records(self, store):
        with pytest.raises(ValueError):
            store.set_date("2025-08-04", DayRecord.unavailable(date(2025, 8, 5)))
        with pytest.raises(ValueError):
            store.set_date("2025-08-04", DayRecord(date=date(2025, 8, 4), is_available=True))

    def test_clear_date(self, store):
        store.mark_unavailable("2025-08-04")

        assert store.clear_date("2025-08-04") is True
        assert store.clear_date("2025-08-04") is False
        assert store.get("2025-08-04") is None


class TestBatchCommands:
    """Commands applied to many dates."""

    def test_batch_available_skips_past_dates(self, store):
        """A past date in the batch fails alone; the others are applied."""
        result = store.batch_mark_available([date(2025, 8, 10), YESTERDAY], "09:00", "17:00")

        assert result.applied == [date(2025, 8, 10)]
        assert result.failed_dates() == [YESTERDAY]
        assert isinstance(result.failures[YESTERDAY], PastDateError)
        assert not result.ok
        assert store.get(date(2025, 8, 10)).summary() == "09:00-17:00"
        assert store.get(YESTERDAY) is None

    def test_batch_available_replaces_existing_intervals(self, store):
        store.add_interval("2025-08-05", "06:00", "07:00")
        store.add_interval("2025-08-05", "20:00", "21:00")

        store.batch_mark_available(["2025-08-05"], "09:00", "17:00")

        assert store.get("2025-08-05").summary() == "09:00-17:00"

    def test_batch_intervals_get_distinct_ids(self, store):
        store.batch_mark_available(["2025-08-05", "2025-08-06"], "09:00", "17:00")

        first = store.get("2025-08-05").intervals[0]
        second = store.get("2025-08-06").intervals[0]
        assert first.id != second.id

    def test_batch_with_invalid_interval_applies_nothing(self, store):
        with pytest.raises(InvalidInterval):
            store.batch_mark_available(["2025-08-05"], "17:00", "09:00")

        assert len(store) == 0

    def test_batch_with_malformed_date_applies_nothing(self, store):
        """Every date is parsed before the first one is written."""
        with pytest.raises(ValueError, match="2025-13-40"):
            store.batch_mark_unavailable(["2025-08-04", "2025-13-40", "2025-08-05"])

        assert len(store) == 0

    def test_batch_unavailable(self, store):
        result = store.batch_mark_unavailable(["2025-08-05", "2025-08-06"])

        assert result.ok
        assert all(not store.get(day).is_available for day in result.applied)

    def test_merge_projection_is_idempotent(self, store):
        records = [DayRecord.available(date(2025, 8, 4), [Interval.create("09:00", "17:00")])]

        store.merge_projection(records)
        first = store.snapshot()
        store.merge_projection(records)

        assert store.snapshot() == first

    def test_merge_projection_leaves_other_dates_alone(self, store):
        store.mark_unavailable("2025-08-05")
        records = [DayRecord.available(date(2025, 8, 4), [Interval.create("09:00", "17:00")])]

        store.merge_projection(records)

        assert store.get("2025-08-05").is_available is False

    def test_clear_all_keeps_past_dates(self):
        current = {"today": date(2025, 7, 30)}
        store = AvailabilityStore(today=lambda: current["today"])
        store.mark_unavailable(date(2025, 7, 30))
        store.mark_unavailable(date(2025, 8, 2))
        current["today"] = TODAY

        removed = store.clear_all()

        assert removed == 1
        assert date(2025, 7, 30) in store
        assert date(2025, 8, 2) not in store


class TestUpcoming:
    """Tests for the upcoming-dates iterator."""

    def test_upcoming_is_sorted_limited_and_available_only(self, store):
        store.add_interval("2025-08-20", "09:00", "10:00")
        store.add_interval("2025-08-03", "09:00", "10:00")
        store.mark_unavailable("2025-08-04")
        store.add_interval("2025-08-10", "09:00", "10:00")
        store.add_interval("2025-08-01", "09:00", "10:00")

        dates = [record.date for record in store.upcoming(TODAY, 3)]

        assert dates == [date(2025, 8, 1), date(2025, 8, 3), date(2025, 8, 10)]

    def test_upcoming_starts_at_from_date(self, store):
        store.add_interval("2025-08-03", "09:00", "10:00")
        store.add_interval("2025-08-10", "09:00", "10:00")

        dates = [record.date for record in store.upcoming("2025-08-04", 5)]

        assert dates == [date(2025, 8, 10)]

    def test_upcoming_with_zero_limit(self, store):
        store.add_interval("2025-08-03", "09:00", "10:00")

        assert list(store.upcoming(TODAY, 0)) == []

    def test_upcoming_is_single_use(self, store):
        store.add_interval("2025-08-03", "09:00", "10:00")

        iterator = store.upcoming(TODAY, 5)

        assert len(list(iterator)) == 1
        assert list(iterator) == []


def test_records_in_month(store):
    store.mark_unavailable("2025-08-31")
    store.mark_unavailable("2025-09-01")

    assert list(store.records_in_month(2025, 8)) == [date(2025, 8, 31)]
