"""
Translation between the weekly template and the schedule store.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, Sequence

from ..domain.exceptions import PersistenceError
from ..domain.weekly_template import WeeklyTemplate

logger = logging.getLogger(__name__)


class ScheduleStoreProtocol(Protocol):
    """Protocol describing the schedule store behaviour needed by the adapter."""

    async def fetch_schedule(self) -> List[Dict[str, Any]]:
        """Return the stored per-weekday rows."""

    async def replace_schedule(self, rows: Sequence[Dict[str, Any]]) -> None:
        """Persist all seven weekday rows at once."""


class SchedulePersistenceAdapter:
    """
    Loads and saves a WeeklyTemplate through a schedule store.

    Every failure, whether transport or malformed data, surfaces as
    ``PersistenceError`` so callers only handle one error type.
    """

    def __init__(self, store: ScheduleStoreProtocol) -> None:
        self._store = store

    async def load(self) -> WeeklyTemplate:
        """
        Fetch the stored rows and build a template; missing days are disabled.

        Raises:
            PersistenceError: If the store cannot be read or returns invalid rows
        """
        try:
            rows = await self._store.fetch_schedule()
        except OSError as exc:
            raise PersistenceError(f"Schedule could not be read: {exc}") from exc

        try:
            template = WeeklyTemplate.from_schedule_rows(rows)
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Stored schedule is invalid: {exc}") from exc

        logger.debug("Loaded weekly template with days %s enabled", template.enabled_days())
        return template

    async def save(self, template: WeeklyTemplate) -> List[Dict[str, Any]]:
        """
        Serialize the template to seven rows and write them.

        Returns:
            The rows that were sent

        Raises:
            PersistenceError: If the store rejects or cannot receive the rows
        """
        rows = template.to_schedule_rows()
        try:
            await self._store.replace_schedule(rows)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Schedule could not be saved: {exc}") from exc
        return rows
