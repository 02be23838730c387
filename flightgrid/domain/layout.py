"""
Projection of bookings onto the visible timeline window.
"""

from typing import Optional

from pendulum import DateTime

from .exceptions import InvalidTimelineError
from .models import BookingLayout, Resource, SchedulerBooking
from .time_grid import clamp


def get_booking_layout(
    *,
    booking_start: DateTime,
    booking_end: DateTime,
    timeline_start: DateTime,
    timeline_end: DateTime,
) -> Optional[BookingLayout]:
    """
    Place a booking within ``[timeline_start, timeline_end)``.

    Returns None when the booking does not intersect the window at all.
    Otherwise the booking is clamped into the window and its offset and width
    are expressed as percentages of the window.

    Raises:
        InvalidTimelineError: If the window is empty or inverted
    """
    start = timeline_start.timestamp()
    end = timeline_end.timestamp()
    span = end - start
    if span <= 0:
        raise InvalidTimelineError(
            f"Timeline end {timeline_end} must be after timeline start {timeline_start}"
        )

    b_start = booking_start.timestamp()
    b_end = booking_end.timestamp()

    if b_end <= start or b_start >= end:
        return None

    visible_start = clamp(b_start, start, end)
    visible_end = clamp(b_end, start, end)

    return BookingLayout(
        left_pct=(visible_start - start) / span * 100,
        width_pct=(visible_end - visible_start) / span * 100,
        is_clipped_start=b_start < start,
        is_clipped_end=b_end > end,
    )


def booking_matches_resource(booking: SchedulerBooking, resource: Resource) -> bool:
    if resource.is_instructor:
        return booking.instructor_id == resource.id
    return booking.aircraft_id == resource.id
