"""
Tests for roster-rule availability.
"""

import logging
from types import MappingProxyType

import pendulum
import pytest

from flightgrid.domain.availability import (
    build_availability,
    build_rostered_instructor_ids_for_interval,
    does_window_contain_interval,
    is_minute_within_window,
    is_resource_available_at,
    is_within_any_window,
    parse_time_to_minutes,
    rule_to_window,
)
from flightgrid.domain.models import MinutesWindow, Resource, RosterRule

TZ = "Europe/Berlin"


def _rule(instructor_id="inst-1", start="09:00", end="12:00", **kwargs) -> RosterRule:
    return RosterRule(instructor_id=instructor_id, start_time=start, end_time=end, **kwargs)


class TestParseTimeToMinutes:
    """Tests for parse_time_to_minutes."""

    @pytest.mark.parametrize(
        "value, expected",
        [("00:00", 0), ("09:00", 540), ("07:30:00", 450), ("23:59", 1439), ("17:45:30", 1065)],
    )
    def test_valid_times(self, value, expected):
        assert parse_time_to_minutes(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "12:60", "-1:00", "noon", "9", "", "ab:cd"])
    def test_invalid_times(self, value):
        assert parse_time_to_minutes(value) is None


class TestRuleToWindow:
    """Tests for rule_to_window."""

    def test_valid_rule(self):
        assert rule_to_window(_rule(start="07:30:00", end="22:00:00")) == MinutesWindow(450, 1320)

    def test_end_before_start_is_rejected(self):
        assert rule_to_window(_rule(start="12:00", end="09:00")) is None

    def test_zero_length_is_rejected(self):
        assert rule_to_window(_rule(start="09:00", end="09:00")) is None

    def test_unparseable_is_rejected(self):
        assert rule_to_window(_rule(start="25:00", end="26:00")) is None


class TestBuildAvailability:
    """Tests for build_availability."""

    def test_windows_accumulate_per_instructor(self):
        index = build_availability(
            [
                _rule("inst-1", "08:00", "12:00"),
                _rule("inst-1", "13:00", "17:00"),
                _rule("inst-2", "09:00", "18:00"),
            ]
        )

        assert index["inst-1"] == (MinutesWindow(480, 720), MinutesWindow(780, 1020))
        assert index["inst-2"] == (MinutesWindow(540, 1080),)

    def test_inactive_and_voided_rules_are_skipped(self):
        index = build_availability(
            [
                _rule("inst-1", is_active=False),
                _rule("inst-2", voided_at="2024-11-20T10:00:00Z"),
                _rule("inst-3"),
            ]
        )

        assert set(index) == {"inst-3"}

    def test_malformed_rule_is_skipped_without_breaking_others(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="flightgrid.domain.availability"):
            index = build_availability(
                [
                    _rule("inst-1", "17:00", "09:00", id="bad"),
                    _rule("inst-1", "09:00", "10:00"),
                ]
            )

        assert index["inst-1"] == (MinutesWindow(540, 600),)
        assert "bad" in caplog.text

    def test_instructor_without_rules_has_no_entry(self):
        index = build_availability([_rule("inst-1")])

        assert "inst-2" not in index

    def test_index_is_read_only(self):
        index = build_availability([_rule("inst-1")])

        assert isinstance(index, MappingProxyType)
        with pytest.raises(TypeError):
            index["inst-2"] = ()  # type: ignore[index]


class TestWindowMembership:
    """Tests for point and interval checks."""

    def test_start_inclusive_end_exclusive(self):
        """09:00-10:00: 09:00 and 09:59 are in, 10:00 is out."""
        window = MinutesWindow(start_min=540, end_min=600)

        assert is_minute_within_window(540, window)
        assert is_minute_within_window(599, window)
        assert not is_minute_within_window(600, window)
        assert not is_minute_within_window(539, window)

    def test_any_window(self):
        windows = [MinutesWindow(480, 720), MinutesWindow(780, 1020)]

        assert is_within_any_window(700, windows)
        assert not is_within_any_window(750, windows)
        assert is_within_any_window(780, windows)
        assert not is_within_any_window(1020, windows)

    def test_no_windows_means_unavailable(self):
        assert not is_within_any_window(600, [])

    def test_interval_containment_is_inclusive_at_both_ends(self):
        window = MinutesWindow(450, 1320)

        assert does_window_contain_interval(window, 450, 1320)
        assert does_window_contain_interval(window, 660, 720)
        assert not does_window_contain_interval(window, 440, 500)
        assert not does_window_contain_interval(window, 1300, 1330)


class TestResourceAvailability:
    """Tests for is_resource_available_at."""

    def test_click_before_roster_start_is_rejected(self):
        """Rostered 09:00-12:00: 08:30 is unavailable, 09:00 is available."""
        index = build_availability([_rule("inst-1", "09:00", "12:00")])
        instructor = Resource(kind="instructor", id="inst-1", label="Ava")

        assert not is_resource_available_at(instructor, pendulum.datetime(2024, 11, 25, 8, 30, tz=TZ), index)
        assert is_resource_available_at(instructor, pendulum.datetime(2024, 11, 25, 9, 0, tz=TZ), index)

    def test_slot_at_roster_end_is_unavailable(self):
        index = build_availability([_rule("inst-1", "09:00", "17:00")])
        instructor = Resource(kind="instructor", id="inst-1", label="Ava")

        assert is_resource_available_at(instructor, pendulum.datetime(2024, 11, 25, 16, 30, tz=TZ), index)
        assert not is_resource_available_at(instructor, pendulum.datetime(2024, 11, 25, 17, 0, tz=TZ), index)

    def test_unrostered_instructor_is_unavailable(self):
        index = build_availability([])
        instructor = Resource(kind="instructor", id="inst-9", label="Liam")

        assert not is_resource_available_at(instructor, pendulum.datetime(2024, 11, 25, 10, 0, tz=TZ), index)

    def test_aircraft_are_never_gated(self):
        index = build_availability([])
        aircraft = Resource(kind="aircraft", id="inst-1", label="ZK-KZC (C172)")

        assert is_resource_available_at(aircraft, pendulum.datetime(2024, 11, 25, 6, 0, tz=TZ), index)


class TestRosteredInstructorsForInterval:
    """Tests for build_rostered_instructor_ids_for_interval."""

    def test_includes_instructor_when_interval_is_within_window(self):
        rules = [_rule("inst-1", "07:30:00", "22:00:00")]

        assert build_rostered_instructor_ids_for_interval(rules, "11:00", "12:00") == {"inst-1"}

    def test_booking_ending_at_roster_end_is_allowed(self):
        rules = [_rule("inst-1", "07:30:00", "22:00:00")]

        assert "inst-1" in build_rostered_instructor_ids_for_interval(rules, "21:00", "22:00")

    def test_interval_spanning_two_windows_is_not_covered(self):
        rules = [_rule("inst-1", "08:00", "12:00"), _rule("inst-1", "12:00", "16:00")]

        assert build_rostered_instructor_ids_for_interval(rules, "11:00", "13:00") == frozenset()

    def test_voided_rules_do_not_count(self):
        rules = [_rule("inst-1", "08:00", "18:00", voided_at="2024-11-01T00:00:00Z")]

        assert build_rostered_instructor_ids_for_interval(rules, "09:00", "10:00") == frozenset()

    def test_unparseable_interval_gives_empty_set(self):
        rules = [_rule("inst-1", "08:00", "18:00")]

        assert build_rostered_instructor_ids_for_interval(rules, "9am", "10:00") == frozenset()
