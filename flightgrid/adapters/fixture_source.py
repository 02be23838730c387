"""
Scheduler data source backed by a JSON fixture file.

Useful for demos and tests without a running operations API. The file holds
one document::

    {
        "instructors": [{"id": "...", "name": "..."}],
        "aircraft": [{"id": "...", "registration": "...", "type": "..."}],
        "roster_rules": [{"instructor_id": "...", "start_time": "09:00", ...}],
        "bookings": [{"id": "...", "start_time": "...", "end_time": "...", ...}]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import Date

from ..domain.day_boundary import parse_stored_timestamp
from ..domain.exceptions import DataSourceError, TimestampParseError
from ..domain.models import DayRange, Resource
from ..domain.records import aircraft_label

logger = logging.getLogger(__name__)


class FixtureSchedulerSource:
    """
    Serves bookings, roster rules and resources from a JSON document.

    Roster rules are narrowed to the requested day the same way the API does
    it: by explicit ``date``, or by ``day_of_week`` within the rule's
    effective range.
    """

    def __init__(self, path: Path):
        self.path = path
        self._data = self._load(path)

    @staticmethod
    def _load(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Fixture file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"Invalid JSON in {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataSourceError("Fixture file must contain an object at the root level.")
        return data

    async def fetch_bookings(self, day_range: DayRange) -> List[Dict[str, Any]]:
        """Bookings overlapping the UTC range."""
        range_start = pendulum.parse(day_range.start_utc_iso)
        range_end = pendulum.parse(day_range.end_utc_iso)

        found: List[Dict[str, Any]] = []
        for record in self._data.get("bookings", []):
            try:
                starts_at = parse_stored_timestamp(record["start_time"], "UTC")
                ends_at = parse_stored_timestamp(record["end_time"], "UTC")
            except (KeyError, TypeError, TimestampParseError) as exc:
                logger.warning("Skipping fixture booking %s: %s", record.get("id"), exc)
                continue

            if starts_at < range_end and ends_at > range_start:
                found.append(record)

        return found

    async def fetch_roster_rules(self, day: Date) -> List[Dict[str, Any]]:
        """Live roster rules that apply on ``day``."""
        date_key = day.to_date_string()
        weekday = day.isoweekday() % 7

        return [
            record
            for record in self._data.get("roster_rules", [])
            if _rule_applies_on(record, date_key, weekday)
            and record.get("is_active", True)
            and not record.get("voided_at")
        ]

    async def fetch_instructors(self) -> List[Resource]:
        return [
            Resource(kind="instructor", id=str(item["id"]), label=item.get("name") or str(item["id"]))
            for item in self._data.get("instructors", [])
        ]

    async def fetch_aircraft(self) -> List[Resource]:
        return [
            Resource(kind="aircraft", id=str(item["id"]), label=aircraft_label(item))
            for item in self._data.get("aircraft", [])
        ]


def _rule_applies_on(record: Dict[str, Any], date_key: str, weekday: int) -> bool:
    if record.get("date"):
        return record["date"] == date_key

    if record.get("day_of_week") is not None and int(record["day_of_week"]) != weekday:
        return False

    # Dates are YYYY-MM-DD strings, so lexical order is calendar order.
    effective_from = record.get("effective_from")
    if effective_from and effective_from > date_key:
        return False

    effective_until = record.get("effective_until")
    if effective_until and effective_until < date_key:
        return False

    return True
