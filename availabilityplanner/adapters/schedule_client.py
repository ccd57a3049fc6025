"""
REST client for the per-weekday schedule store.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import requests

from ..domain.exceptions import PersistenceError
from .api_client import ApiClient, unwrap_list


class ScheduleClient(ApiClient):
    """
    Reads and replaces the worker's weekly default schedule.

    The backend only supports whole-week replacement, so every write carries
    exactly seven rows. The write goes to the bulk-update endpoint with POST
    unless another method is configured.

    Response format of the read endpoint:
    [
        {
            "id": 12,
            "day_of_week": 1,
            "day_name": "Monday",
            "is_available": true,
            "start_time": "09:00:00",
            "end_time": "17:00:00"
        }
    ]
    """

    SCHEDULE_PATH = "/profile/availability/"
    UPDATE_PATH = "/profile/availability/bulk_update/"
    UPDATE_METHOD = "POST"

    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
        schedule_path: str | None = None,
        update_path: str | None = None,
        update_method: str | None = None,
    ):
        super().__init__(base_url, access_token=access_token, timeout=timeout, session=session)
        self.schedule_path = schedule_path or self.SCHEDULE_PATH
        self.update_path = update_path or self.UPDATE_PATH
        self.update_method = (update_method or self.UPDATE_METHOD).upper()

    async def fetch_schedule(self) -> List[Dict[str, Any]]:
        return await self.run(self.get_schedule)

    async def replace_schedule(self, rows: Sequence[Dict[str, Any]]) -> None:
        await self.run(self.write_schedule, list(rows))

    def get_schedule(self) -> List[Dict[str, Any]]:
        """
        Fetch the stored weekday rows.

        Raises:
            PersistenceError: If the request fails or the payload is not a list of rows
        """
        data = self.request_json("GET", self.schedule_path)
        rows = unwrap_list(data, "schedule")
        for row in rows:
            if not isinstance(row, dict) or "day_of_week" not in row:
                raise PersistenceError(f"Malformed schedule row: {row!r}")
        return rows

    def write_schedule(self, rows: List[Dict[str, Any]]) -> None:
        """
        Replace the whole weekly schedule.

        Raises:
            ValueError: If the payload does not hold one row per weekday
            PersistenceError: If the request fails
        """
        days = sorted(row["day_of_week"] for row in rows)
        if days != list(range(7)):
            raise ValueError(f"Schedule updates need one row per weekday, got days {days}")
        self.request_json(self.update_method, self.update_path, {"schedules": rows})
