"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .availability import build_availability, is_resource_available_at, is_within_any_window
from .day_boundary import get_selected_day_range_utc, parse_stored_timestamp
from .layout import booking_matches_resource, get_booking_layout
from .models import (
    BookingLayout,
    BookingStatus,
    DayRange,
    MinutesWindow,
    Resource,
    RosterRule,
    SchedulerBooking,
    SlotSelection,
    TimeGrid,
    TimelineConfig,
)
from .pointer import resolve_slot, resolve_slot_index
from .time_grid import build_time_slots

__all__ = [
    "BookingLayout",
    "BookingStatus",
    "DayRange",
    "MinutesWindow",
    "Resource",
    "RosterRule",
    "SchedulerBooking",
    "SlotSelection",
    "TimeGrid",
    "TimelineConfig",
    "booking_matches_resource",
    "build_availability",
    "build_time_slots",
    "get_booking_layout",
    "get_selected_day_range_utc",
    "is_resource_available_at",
    "is_within_any_window",
    "parse_stored_timestamp",
    "resolve_slot",
    "resolve_slot_index",
]
