"""
REST client for the worker's confirmed job assignments.
"""

from __future__ import annotations

import logging
from typing import List

import requests

from ..domain.calendar import parse_date
from ..domain.reconciler import JobAssignment
from .api_client import ApiClient, describe_row, unwrap_list

logger = logging.getLogger(__name__)


class AssignmentClient(ApiClient):
    """
    Fetches the dates the worker is already committed to.

    The source is read-only; rows that cannot be parsed are skipped with a
    warning rather than failing the whole screen.
    """

    ASSIGNMENTS_PATH = "/work/assignments/"

    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
        assignments_path: str | None = None,
    ):
        super().__init__(base_url, access_token=access_token, timeout=timeout, session=session)
        self.assignments_path = assignments_path or self.ASSIGNMENTS_PATH

    async def fetch_assignments(self) -> List[JobAssignment]:
        return await self.run(self.get_assignments)

    def get_assignments(self) -> List[JobAssignment]:
        """
        Raises:
            PersistenceError: If the request fails or the payload is not a list
        """
        data = self.request_json("GET", self.assignments_path)
        assignments: List[JobAssignment] = []

        for row in unwrap_list(data, "assignment"):
            try:
                assignments.append(
                    JobAssignment(date=parse_date(row["date"]), label=str(row.get("label") or ""))
                )
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                detail = describe_row(row) if isinstance(row, dict) else repr(row)
                logger.warning("Skipping malformed assignment (%s): %s", detail, e)
                continue

        return assignments
