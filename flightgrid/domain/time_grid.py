"""
Slot generation for a single calendar day.

Pure functions only: the grid for a (day, config, timezone) triple never
changes, so callers are free to cache it.
"""

from typing import Union

import pendulum
from pendulum import Date, DateTime
from pendulum.tz.timezone import FixedTimezone, Timezone

from .models import TimeGrid, TimelineConfig

TimezoneLike = Union[str, Timezone, FixedTimezone, None]


def resolve_timezone(tz: TimezoneLike = None) -> Union[Timezone, FixedTimezone]:
    """Return a pendulum timezone, falling back to the machine's local zone."""
    if tz is None:
        return pendulum.local_timezone()
    if isinstance(tz, str):
        return pendulum.timezone(tz)
    return tz


def clamp(n: float, low: float, high: float) -> float:
    return min(max(n, low), high)


def with_time(day: Date, hour: int, minute: int = 0, tz: TimezoneLike = None) -> DateTime:
    """
    Return ``day`` at ``hour:minute`` local time as a new instant.

    Hours past 23 roll into the following calendar day, so ``hour=24`` is the
    next local midnight.
    """
    extra_days, hour = divmod(hour, 24)
    target = day.add(days=extra_days) if extra_days else day
    return pendulum.datetime(
        target.year,
        target.month,
        target.day,
        hour,
        minute,
        tz=resolve_timezone(tz),
    )


def minutes_from_midnight(dt: DateTime) -> int:
    """Wall-clock minutes since midnight in the instant's own timezone."""
    return dt.hour * 60 + dt.minute


def build_time_slots(day: Date, config: TimelineConfig, tz: TimezoneLike = None) -> TimeGrid:
    """
    Build the slot boundaries for ``day``.

    Slots run from ``start_hour:00`` up to, but excluding, ``end_hour:00``,
    spaced ``interval_minutes`` apart.
    """
    zone = resolve_timezone(tz)
    start = with_time(day, config.start_hour, 0, zone)
    end = with_time(day, config.end_hour, 0, zone)

    slots = []
    current = start
    while current < end:
        slots.append(current)
        current = current.add(minutes=config.interval_minutes)

    return TimeGrid(slots=tuple(slots), start=start, end=end)


def format_time_label(dt: DateTime) -> str:
    """24h ``HH:mm`` label."""
    return dt.format("HH:mm")


def format_time_range_label(start: DateTime, end: DateTime) -> str:
    return f"{format_time_label(start)}–{format_time_label(end)}"
