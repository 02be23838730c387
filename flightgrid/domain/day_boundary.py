"""
Translation between local calendar days and UTC-stored instants.

Bookings are stored as UTC instants while the scheduler works on one local
calendar day at a time. Roster rules are wall-clock times on local dates.

Timezone policy for stored values: a timestamp without an explicit offset is
taken to be UTC, never local time.
"""

import re
from typing import Tuple

import pendulum
from pendulum import Date, DateTime

from .availability import parse_time_to_minutes
from .exceptions import TimestampParseError
from .models import DayRange
from .time_grid import TimezoneLike, resolve_timezone, with_time

# Offset or Z designator directly after the time-of-day component.
_EXPLICIT_OFFSET = re.compile(
    r"[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:[zZ]|[+-]\d{2}(?::?\d{2})?)$"
)
# Postgres renders a whole-hour UTC offset as "+00".
_HOUR_ONLY_OFFSET = re.compile(r":\d{2}(?:\.\d+)?[+-]\d{2}$")


def to_utc_iso(instant: DateTime) -> str:
    """Format an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    utc = instant.in_timezone("UTC")
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"


def has_explicit_offset(ts: str) -> bool:
    return _EXPLICIT_OFFSET.search(ts.strip()) is not None


def get_selected_day_range_utc(day: Date, tz: TimezoneLike = None) -> DayRange:
    """
    UTC range ``[day 00:00, next day 00:00)`` in local time.

    The upper bound is found by calendar-day arithmetic, so days that are 23
    or 25 hours long around DST changes are covered exactly.
    """
    zone = resolve_timezone(tz)
    start = with_time(day, 0, 0, zone)
    end = with_time(day.add(days=1), 0, 0, zone)
    return DayRange(start_utc_iso=to_utc_iso(start), end_utc_iso=to_utc_iso(end))


def parse_stored_timestamp(ts: str, tz: TimezoneLike = None) -> DateTime:
    """
    Parse a stored timestamp and return it in local time.

    Timestamps carrying ``Z`` or a numeric offset are parsed as-is; anything
    else is assumed to be UTC.

    Raises:
        TimestampParseError: If the value is not a date-time string
    """
    if not isinstance(ts, str):
        raise TimestampParseError(f"Timestamp must be a string, got {ts!r}")

    text = ts.strip()
    if not has_explicit_offset(text):
        text = f"{text}Z"
    elif text.endswith("z"):
        text = f"{text[:-1]}Z"
    elif _HOUR_ONLY_OFFSET.search(text):
        text = f"{text}:00"

    try:
        parsed = pendulum.parse(text)
    except ValueError as exc:
        raise TimestampParseError(f"Could not parse timestamp {ts!r}: {exc}") from exc

    if not isinstance(parsed, DateTime):
        raise TimestampParseError(f"Timestamp {ts!r} is not a date-time")

    return parsed.in_timezone(resolve_timezone(tz))


def parse_date_key(date_str: str) -> Date:
    """Parse a ``YYYY-MM-DD`` calendar date key."""
    try:
        return pendulum.from_format(date_str, "YYYY-MM-DD").date()
    except ValueError as exc:
        raise TimestampParseError(f"Invalid date {date_str!r}, expected YYYY-MM-DD") from exc


def add_days(date_str: str, days: int) -> str:
    return parse_date_key(date_str).add(days=days).to_date_string()


def day_of_week(date_str: str) -> int:
    """Day of week for a calendar date, 0=Sunday through 6=Saturday."""
    return parse_date_key(date_str).isoweekday() % 7


def zoned_date_time_to_utc(date_str: str, time_hhmm: str, tz: TimezoneLike) -> DateTime:
    """
    Convert a local wall-clock date and time into a UTC instant.

    Times inside a DST gap move forward to the next representable instant;
    ambiguous times resolve to the earlier occurrence.
    """
    date = parse_date_key(date_str)
    minutes = parse_time_to_minutes(time_hhmm)
    if minutes is None:
        raise TimestampParseError(f"Invalid time {time_hhmm!r}, expected HH:mm")

    hour, minute = divmod(minutes, 60)
    local = pendulum.datetime(
        date.year,
        date.month,
        date.day,
        hour,
        minute,
        tz=resolve_timezone(tz),
        fold=0,
    )
    return local.in_timezone("UTC")


def zoned_day_range_utc_iso(date_str: str, tz: TimezoneLike) -> DayRange:
    """UTC range for a local calendar day given as ``YYYY-MM-DD``."""
    start = zoned_date_time_to_utc(date_str, "00:00", tz)
    end = zoned_date_time_to_utc(add_days(date_str, 1), "00:00", tz)
    return DayRange(start_utc_iso=to_utc_iso(start), end_utc_iso=to_utc_iso(end))


def zoned_date_and_time(instant: DateTime, tz: TimezoneLike) -> Tuple[str, str]:
    """Local ``(YYYY-MM-DD, HH:mm)`` of an instant in the given zone."""
    local = instant.in_timezone(resolve_timezone(tz))
    return local.to_date_string(), local.format("HH:mm")


def local_today(tz: TimezoneLike = None) -> Date:
    return pendulum.today(resolve_timezone(tz)).date()
