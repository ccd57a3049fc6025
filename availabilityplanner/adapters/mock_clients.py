"""
In-memory stand-ins for the schedule store and the job-assignment source.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from ..domain.calendar import parse_date
from ..domain.reconciler import JobAssignment

logger = logging.getLogger(__name__)


def load_mock_data(data_file: Path) -> Dict[str, Any]:
    """
    Load mock rows from a JSON file shaped like::

        {"schedule": [{"day_of_week": 1, ...}], "assignments": [{"date": "...", "label": "..."}]}

    A missing file yields empty data.
    """
    if not data_file.exists():
        return {"schedule": [], "assignments": []}
    with open(data_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Mock data in {data_file} must be a JSON object")
    return data


class InMemoryScheduleStore:
    """
    Schedule store kept in memory, for tests and the CLI mock mode.

    Every saved payload is recorded in ``saved`` and becomes what the next
    fetch returns. When ``data_file`` is given, saves are written back to it.
    """

    def __init__(self, rows: Iterable[Dict[str, Any]] | None = None, data_file: Path | None = None):
        self.data_file = data_file
        if rows is None and data_file is not None:
            rows = load_mock_data(data_file).get("schedule", [])
        self._rows: List[Dict[str, Any]] = [dict(row) for row in rows or []]
        self.saved: List[List[Dict[str, Any]]] = []

    async def fetch_schedule(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._rows)

    async def replace_schedule(self, rows: Sequence[Dict[str, Any]]) -> None:
        new_rows = [dict(row) for row in rows]
        if self.data_file is not None:
            self._write_back(new_rows)
        self._rows = new_rows
        self.saved.append(copy.deepcopy(new_rows))

    def _write_back(self, rows: List[Dict[str, Any]]) -> None:
        data = load_mock_data(self.data_file)
        data["schedule"] = rows
        with open(self.data_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)


class StaticAssignmentSource:
    """Job-assignment source returning a fixed list."""

    def __init__(self, assignments: Iterable[JobAssignment] | None = None):
        self._assignments = list(assignments or [])

    @classmethod
    def from_file(cls, data_file: Path) -> "StaticAssignmentSource":
        """Read the "assignments" list; rows that cannot be parsed are skipped with a warning."""
        assignments = []
        for row in load_mock_data(data_file).get("assignments", []):
            try:
                assignments.append(
                    JobAssignment(date=parse_date(row["date"]), label=str(row.get("label") or ""))
                )
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                logger.warning("Skipping malformed mock assignment %r: %s", row, e)
                continue
        return cls(assignments)

    async def fetch_assignments(self) -> List[JobAssignment]:
        return list(self._assignments)
