"""
Shared plumbing for the backend REST clients.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, TypeVar

import requests

from ..domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiClient:
    """
    Thin JSON-over-HTTP client for the jobs backend.

    Calls are blocking ``requests`` calls; the async wrappers run them on a
    worker thread so the caller's event loop is never blocked.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend API root, e.g. ``https://api.example.com/api``
            access_token: Optional bearer token
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request_json(self, method: str, path: str, payload: Any = None) -> Any:
        """
        Perform a request and decode the JSON body.

        Raises:
            PersistenceError: On transport errors, HTTP errors or invalid JSON
        """
        url = self.url_for(path)
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise PersistenceError(f"{method} {url} failed: {e}") from e

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise PersistenceError(f"{method} {url} returned invalid JSON: {e}") from e

    async def run(self, call: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(call, *args)


def unwrap_list(data: Any, what: str) -> list:
    """
    Accept either a bare JSON list or a paginated ``{"results": [...]}`` page.

    Raises:
        PersistenceError: If the payload is neither
    """
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        return data["results"]
    if isinstance(data, list):
        return data
    raise PersistenceError(f"Unexpected {what} payload: expected a list, got {type(data).__name__}")


def describe_row(row: Dict[str, Any]) -> str:
    return ", ".join(f"{key}={value!r}" for key, value in sorted(row.items()))
