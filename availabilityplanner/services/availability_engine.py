"""
Application service behind the availability calendar screen.

The engine owns one session's Availability Store and Weekly Template,
coordinates the schedule store and job-assignment source, and exposes the
narrow command/query surface the calendar picker talks to. Collaborators are
injected through protocols so tests can substitute simple stubs.
"""

from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Callable, Dict, Iterable, Iterator, List, Literal, Protocol, Sequence

from ..adapters.persistence import SchedulePersistenceAdapter
from ..domain import calendar
from ..domain.calendar import DateLike, TimeLike, TimeOptions, as_date, parse_time
from ..domain.exceptions import IntervalNotFound, PersistenceError
from ..domain.models import DayRecord
from ..domain.projector import CalendarProjector
from ..domain.reconciler import DayView, JobAssignment, decorate, decorate_month, index_assignments
from ..domain.selection import SelectionSet
from ..domain.weekly_template import DEFAULT_END, DEFAULT_START, TemplateSlot, WeeklyTemplate
from .availability_store import AvailabilityStore, BatchResult

logger = logging.getLogger(__name__)


class AssignmentSourceProtocol(Protocol):
    """Protocol describing the job-assignment source needed by the engine."""

    async def fetch_assignments(self) -> List[JobAssignment]:
        """Return the dates the worker is already committed to."""


class AvailabilityEngine:
    """
    Per-session availability scheduling engine.

    All commands are synchronous and run on the caller's thread; only
    ``load_template``, ``save_template`` and ``refresh_assignments`` await I/O.
    """

    def __init__(
        self,
        persistence: SchedulePersistenceAdapter,
        assignment_source: AssignmentSourceProtocol | None = None,
        *,
        today: Callable[[], date] | None = None,
        projector: CalendarProjector | None = None,
        time_options: TimeOptions | None = None,
        default_start: time = DEFAULT_START,
        default_end: time = DEFAULT_END,
        upcoming_limit: int = 5,
    ) -> None:
        self._persistence = persistence
        self._assignment_source = assignment_source
        self._today = today or calendar.today
        self._projector = projector or CalendarProjector()
        self.time_options = time_options or TimeOptions()
        self.default_start = default_start
        self.default_end = default_end
        self.upcoming_limit = upcoming_limit

        self.store = AvailabilityStore(today=self._today)
        self.selection = SelectionSet()
        self._template = WeeklyTemplate()
        self._assignments: Dict[date, List[JobAssignment]] = {}
        self._closed = False
        self.is_saving = False

    @classmethod
    def from_config(
        cls,
        config: Any,
        persistence: SchedulePersistenceAdapter,
        assignment_source: AssignmentSourceProtocol | None = None,
        today: Callable[[], date] | None = None,
    ) -> "AvailabilityEngine":
        """Build an engine from an ``AppConfig``."""
        return cls(
            persistence,
            assignment_source,
            today=today or (lambda: calendar.today(config.timezone)),
            time_options=config.time_options.build(),
            default_start=config.defaults.get_start_time(),
            default_end=config.defaults.get_end_time(),
            upcoming_limit=config.upcoming_limit,
        )

    @property
    def today(self) -> date:
        return self._today()

    @property
    def template(self) -> WeeklyTemplate:
        """A copy of the current in-memory weekly template."""
        return self._template.copy()

    def close(self) -> None:
        """Discard the session; results of loads still in flight are ignored."""
        self._closed = True
        self.selection.clear()

    # Weekly template

    async def load_template(self) -> WeeklyTemplate:
        """
        Replace the in-memory template with the stored one.

        Raises:
            PersistenceError: If loading fails; the previous template is kept
        """
        try:
            loaded = await self._persistence.load()
        except PersistenceError as exc:
            logger.warning("Keeping previous weekly template, load failed: %s", exc)
            raise

        if self._closed:
            logger.debug("Session closed while loading; discarding loaded template")
            return self._template.copy()

        self._template = loaded
        return loaded.copy()

    async def save_template(self, template: WeeklyTemplate | None = None) -> List[Dict[str, Any]]:
        """
        Persist the template (the given one replaces the in-memory copy first).

        The local change is kept even when saving fails, so the user can retry.

        Raises:
            PersistenceError: If the schedule store rejects the write
        """
        if template is not None:
            self._template = template.copy()

        self.is_saving = True
        try:
            return await self._persistence.save(self._template)
        except PersistenceError as exc:
            logger.warning("Weekly template kept locally, save failed: %s", exc)
            raise
        finally:
            self.is_saving = False

    def set_template_day(
        self,
        day_of_week: int,
        enabled: bool,
        start: TimeLike | None = None,
        end: TimeLike | None = None,
    ) -> TemplateSlot:
        return self._template.set_day(day_of_week, enabled, start, end)

    def nudge_template_day(self, day_of_week: int, field: Literal["start", "end"], steps: int) -> TemplateSlot:
        return self._template.nudge_day(day_of_week, field, steps, self.time_options)

    def apply_template_to_month(self, year: int, month: int) -> BatchResult:
        """Project the template onto a month, overwriting the dates it covers."""
        records = self._projector.project_month(self._template, year, month, self.today)
        return self.store.merge_projection(records)

    def apply_template_to_week(self) -> BatchResult:
        """Project the template onto today and the six following days."""
        records = self._projector.project_days(self._template, self.today, days=7)
        return self.store.merge_projection(records)

    # Job assignments

    async def refresh_assignments(self) -> List[JobAssignment]:
        """
        Re-read the job-assignment source.

        Raises:
            PersistenceError: If the source cannot be read; the previous
                assignments are kept
        """
        if self._assignment_source is None:
            return []
        try:
            assignments = await self._assignment_source.fetch_assignments()
        except PersistenceError as exc:
            logger.warning("Keeping previous job assignments, refresh failed: %s", exc)
            raise

        if not self._closed:
            self.set_assignments(assignments)
        return list(assignments)

    def set_assignments(self, assignments: Iterable[JobAssignment]) -> None:
        self._assignments = index_assignments(assignments)

    # Calendar picker queries

    def day_status(self, day: DateLike) -> DayView:
        day = as_date(day)
        return decorate(day, self.store.get(day), self._assignments, self.today)

    def month_view(self, year: int, month: int) -> List[DayView]:
        return decorate_month(year, month, self.store.records_in_month(year, month), self._assignments, self.today)

    def upcoming(self, limit: int | None = None) -> Iterator[DayRecord]:
        return self.store.upcoming(self.today, self.upcoming_limit if limit is None else limit)

    # Calendar picker commands

    def edit_day(
        self,
        day: DateLike,
        start: TimeLike | None = None,
        end: TimeLike | None = None,
        interval_id: str | None = None,
    ) -> DayView:
        """
        Add an interval to a date, or move an existing one when ``interval_id`` is given.

        A missing bound falls back to the configured default for a new
        interval, and to the interval's current value for a moved one.

        Raises:
            PastDateError, InvalidInterval, OverlapError, IntervalNotFound
        """
        day = as_date(day)

        if interval_id is None:
            self.store.add_interval(
                day,
                parse_time(start) if start is not None else self.default_start,
                parse_time(end) if end is not None else self.default_end,
            )
            return self.day_status(day)

        record = self.store.get(day)
        if record is None:
            raise IntervalNotFound(f"No interval '{interval_id}' on {day.isoformat()}")
        current = record.find_interval(interval_id)
        self.store.update_interval(
            day,
            interval_id,
            parse_time(start) if start is not None else current.start,
            parse_time(end) if end is not None else current.end,
        )
        return self.day_status(day)

    def remove_interval(self, day: DateLike, interval_id: str) -> DayView:
        self.store.remove_interval(day, interval_id)
        return self.day_status(day)

    def mark_unavailable(self, day: DateLike) -> DayView:
        self.store.mark_unavailable(day)
        return self.day_status(day)

    def clear_day(self, day: DateLike) -> DayView:
        self.store.clear_date(day)
        return self.day_status(day)

    def clear_all(self) -> int:
        return self.store.clear_all()

    def toggle_selection(self, day: DateLike) -> bool:
        return self.selection.toggle(day, self.today)

    def cancel_selection(self) -> None:
        self.selection.clear()

    def batch_edit(
        self,
        dates: Sequence[DateLike] | SelectionSet | None = None,
        *,
        available: bool,
        start: TimeLike | None = None,
        end: TimeLike | None = None,
    ) -> BatchResult:
        """
        Mark many dates available (one interval each) or unavailable.

        Without explicit dates the current selection is used. The selection is
        cleared afterwards whatever the outcome.
        """
        targets = list(self.selection if dates is None else dates)
        try:
            if available:
                return self.store.batch_mark_available(
                    targets,
                    parse_time(start) if start is not None else self.default_start,
                    parse_time(end) if end is not None else self.default_end,
                )
            return self.store.batch_mark_unavailable(targets)
        finally:
            self.selection.clear()
