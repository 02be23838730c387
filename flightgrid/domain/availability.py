"""
Instructor availability derived from roster rules.

Roster rules arrive already resolved for the selected day. Each surviving
rule becomes a half-open ``MinutesWindow``; an instructor without any window
is treated as unavailable for the whole day.
"""

import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from pendulum import DateTime

from .models import MinutesWindow, Resource, RosterRule
from .time_grid import minutes_from_midnight

logger = logging.getLogger(__name__)

AvailabilityIndex = Mapping[str, Tuple[MinutesWindow, ...]]


def parse_time_to_minutes(value: str) -> Optional[int]:
    """
    Parse ``HH:MM`` or ``HH:MM:SS`` into minutes since midnight.

    Returns None for anything that is not a valid wall-clock time; seconds
    are ignored.
    """
    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        return None
    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        return None
    return hours * 60 + minutes


def rule_to_window(rule: RosterRule) -> Optional[MinutesWindow]:
    """Convert a rule's wall-clock bounds into a window, or None if unusable."""
    start_min = parse_time_to_minutes(rule.start_time)
    end_min = parse_time_to_minutes(rule.end_time)
    if start_min is None or end_min is None:
        return None
    if end_min <= start_min:
        return None
    return MinutesWindow(start_min=start_min, end_min=end_min)


def _is_live(rule: RosterRule) -> bool:
    return rule.is_active and not rule.voided_at


def build_availability(rules: Iterable[RosterRule]) -> AvailabilityIndex:
    """
    Build a read-only map of instructor id to rostered windows.

    Inactive or voided rules are ignored even if the caller already filtered
    them. Malformed rules are dropped so one bad row cannot break the day.
    """
    windows: Dict[str, List[MinutesWindow]] = {}

    for rule in rules:
        if not _is_live(rule):
            continue
        window = rule_to_window(rule)
        if window is None:
            logger.debug(
                "Skipping roster rule %s for instructor %s: unusable window %r-%r",
                rule.id,
                rule.instructor_id,
                rule.start_time,
                rule.end_time,
            )
            continue
        windows.setdefault(rule.instructor_id, []).append(window)

    return MappingProxyType(
        {instructor_id: tuple(found) for instructor_id, found in windows.items()}
    )


def is_minute_within_window(minutes: int, window: MinutesWindow) -> bool:
    """Point check: start inclusive, end exclusive."""
    return window.start_min <= minutes < window.end_min


def is_within_any_window(minutes: int, windows: Sequence[MinutesWindow]) -> bool:
    return any(is_minute_within_window(minutes, window) for window in windows)


def does_window_contain_interval(window: MinutesWindow, start_min: int, end_min: int) -> bool:
    """
    Interval check used for booking eligibility.

    Both ends are inclusive, so a booking ending at 22:00 fits a rule that
    ends at 22:00.
    """
    return window.start_min <= start_min and window.end_min >= end_min


def is_resource_available_at(
    resource: Resource,
    slot: DateTime,
    availability: AvailabilityIndex,
) -> bool:
    """
    Whether ``resource`` can take a booking starting at ``slot``.

    Aircraft are never gated by rosters. Instructors need a window covering
    the slot's local minute.
    """
    if not resource.is_instructor:
        return True
    windows = availability.get(resource.id, ())
    return is_within_any_window(minutes_from_midnight(slot), windows)


def build_rostered_instructor_ids_for_interval(
    rules: Iterable[RosterRule],
    start_hhmm: str,
    end_hhmm: str,
) -> FrozenSet[str]:
    """Instructors with a single live window that fully covers the interval."""
    start_min = parse_time_to_minutes(start_hhmm)
    end_min = parse_time_to_minutes(end_hhmm)
    if start_min is None or end_min is None:
        return frozenset()

    eligible = set()
    for rule in rules:
        if not _is_live(rule):
            continue
        window = rule_to_window(rule)
        if window is None:
            continue
        if does_window_contain_interval(window, start_min, end_min):
            eligible.add(rule.instructor_id)

    return frozenset(eligible)
