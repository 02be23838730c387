"""
Operations REST API client for fetching scheduler data.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests
from pendulum import Date

from ..domain.exceptions import DataSourceError
from ..domain.models import DayRange, Resource
from ..domain.records import aircraft_label, display_name_for_member

logger = logging.getLogger(__name__)


class ApiSchedulerSource:
    """
    Client for the operations API endpoints the scheduler reads from.

    Requests are blocking; the async methods run them in a worker thread so
    the four fetches of a day view can proceed concurrently.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout_seconds: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Root URL of the operations app, e.g. ``https://ops.example.com``
            token: Optional bearer token
            timeout_seconds: Per-request timeout
            session: Optional preconfigured session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)

        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as exc:
            raise DataSourceError(f"Failed to fetch {path}: {exc}") from exc
        except ValueError as exc:
            raise DataSourceError(f"Invalid JSON from {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataSourceError(f"Unexpected response shape from {path}")
        return data

    def get_bookings(self, day_range: DayRange) -> List[Dict[str, Any]]:
        data = self._get(
            "/api/bookings",
            {"start_date": day_range.start_utc_iso, "end_date": day_range.end_utc_iso},
        )
        return data.get("bookings", [])

    def get_roster_rules(self, day: Date) -> List[Dict[str, Any]]:
        data = self._get("/api/roster-rules", {"date": day.to_date_string()})
        return data.get("roster_rules", [])

    def get_instructors(self) -> List[Resource]:
        """Active members with an instructor profile, as timeline rows."""
        data = self._get("/api/members", {"person_type": "instructor", "is_active": "true"})

        resources: List[Resource] = []
        for member in data.get("members", []):
            instructor = member.get("instructor") or {}
            if not instructor.get("id"):
                continue
            resources.append(
                Resource(
                    kind="instructor",
                    id=str(instructor["id"]),
                    label=display_name_for_member(member),
                )
            )
        return resources

    def get_aircraft(self) -> List[Resource]:
        data = self._get("/api/aircraft")
        return [
            Resource(
                kind="aircraft",
                id=str(item["id"]),
                label=aircraft_label(item),
            )
            for item in data.get("aircraft", [])
        ]

    async def fetch_bookings(self, day_range: DayRange) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.get_bookings, day_range)

    async def fetch_roster_rules(self, day: Date) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.get_roster_rules, day)

    async def fetch_instructors(self) -> List[Resource]:
        return await asyncio.to_thread(self.get_instructors)

    async def fetch_aircraft(self) -> List[Resource]:
        return await asyncio.to_thread(self.get_aircraft)
