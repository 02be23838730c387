"""
Tests for the booking layout projector.
"""

import pendulum
import pytest

from flightgrid.domain.exceptions import InvalidTimelineError
from flightgrid.domain.layout import booking_matches_resource, get_booking_layout
from flightgrid.domain.models import BookingStatus, Resource, SchedulerBooking

TZ = "Europe/Berlin"
TIMELINE_START = pendulum.parse("2024-11-25 07:00", tz=TZ)
TIMELINE_END = pendulum.parse("2024-11-25 19:00", tz=TZ)


def _layout(start: str, end: str):
    return get_booking_layout(
        booking_start=pendulum.parse(start, tz=TZ),
        booking_end=pendulum.parse(end, tz=TZ),
        timeline_start=TIMELINE_START,
        timeline_end=TIMELINE_END,
    )


class TestGetBookingLayout:
    """Tests for get_booking_layout."""

    def test_booking_inside_window(self):
        """09:15-10:05 within 07:00-19:00 is 135/720 in and 50/720 wide."""
        layout = _layout("2024-11-25 09:15", "2024-11-25 10:05")

        assert layout is not None
        assert layout.left_pct == pytest.approx(135 / 720 * 100)
        assert layout.width_pct == pytest.approx(50 / 720 * 100)
        assert not layout.is_clipped_start
        assert not layout.is_clipped_end

    def test_full_window(self):
        layout = _layout("2024-11-25 07:00", "2024-11-25 19:00")

        assert layout.left_pct == pytest.approx(0)
        assert layout.width_pct == pytest.approx(100)
        assert not layout.is_clipped_start
        assert not layout.is_clipped_end

    def test_booking_starting_before_window_is_clipped(self):
        layout = _layout("2024-11-25 05:00", "2024-11-25 08:00")

        assert layout.is_clipped_start
        assert not layout.is_clipped_end
        assert layout.left_pct == 0
        assert layout.width_pct == pytest.approx(60 / 720 * 100)

    def test_booking_ending_after_window_is_clipped(self):
        layout = _layout("2024-11-25 18:00", "2024-11-25 21:00")

        assert layout.is_clipped_end
        assert not layout.is_clipped_start
        assert layout.left_pct + layout.width_pct == pytest.approx(100)

    def test_booking_covering_whole_window_is_clipped_both_ends(self):
        layout = _layout("2024-11-25 00:00", "2024-11-26 00:00")

        assert layout.is_clipped_start
        assert layout.is_clipped_end
        assert layout.left_pct == 0
        assert layout.width_pct == pytest.approx(100)

    @pytest.mark.parametrize(
        "start, end",
        [
            ("2024-11-25 05:00", "2024-11-25 07:00"),  # ends exactly at window start
            ("2024-11-25 19:00", "2024-11-25 20:00"),  # starts exactly at window end
            ("2024-11-24 09:00", "2024-11-24 10:00"),  # previous day
        ],
    )
    def test_disjoint_booking_returns_none(self, start, end):
        assert _layout(start, end) is None

    @pytest.mark.parametrize(
        "start, end",
        [
            ("2024-11-25 06:59", "2024-11-25 07:01"),
            ("2024-11-25 12:00", "2024-11-25 12:01"),
            ("2024-11-25 18:59", "2024-11-25 23:00"),
        ],
    )
    def test_intersecting_booking_stays_within_bounds(self, start, end):
        layout = _layout(start, end)

        assert layout is not None
        assert 0 <= layout.left_pct <= 100
        assert 0 < layout.width_pct <= 100
        assert layout.left_pct + layout.width_pct <= 100 + 1e-9

    def test_layout_is_timezone_independent(self):
        """The same instants expressed in UTC project identically."""
        layout = get_booking_layout(
            booking_start=pendulum.parse("2024-11-25 09:15", tz=TZ).in_timezone("UTC"),
            booking_end=pendulum.parse("2024-11-25 10:05", tz=TZ).in_timezone("UTC"),
            timeline_start=TIMELINE_START,
            timeline_end=TIMELINE_END,
        )

        assert layout.left_pct == pytest.approx(18.75)

    def test_empty_timeline_raises(self):
        with pytest.raises(InvalidTimelineError):
            get_booking_layout(
                booking_start=TIMELINE_START,
                booking_end=TIMELINE_END,
                timeline_start=TIMELINE_START,
                timeline_end=TIMELINE_START,
            )


class TestBookingMatchesResource:
    """Tests for booking_matches_resource."""

    booking = SchedulerBooking(
        id="bk-1",
        starts_at=pendulum.parse("2024-11-25 09:00", tz=TZ),
        ends_at=pendulum.parse("2024-11-25 10:00", tz=TZ),
        aircraft_id="ac-1",
        instructor_id="inst-1",
        status=BookingStatus.CONFIRMED,
    )

    def test_instructor_row(self):
        assert booking_matches_resource(self.booking, Resource("instructor", "inst-1", "Ava"))
        assert not booking_matches_resource(self.booking, Resource("instructor", "inst-2", "Liam"))

    def test_aircraft_row(self):
        assert booking_matches_resource(self.booking, Resource("aircraft", "ac-1", "ZK-KZC"))
        assert not booking_matches_resource(self.booking, Resource("aircraft", "inst-1", "ZK-PA2"))
