"""
Mapping of raw booking and member records onto timeline models.
"""

from typing import Any, Dict, Optional

from .day_boundary import parse_stored_timestamp
from .models import BookingStatus, SchedulerBooking
from .time_grid import TimezoneLike


def _join_name(person: Optional[Dict[str, Any]]) -> str:
    if not person:
        return ""
    parts = [person.get("first_name"), person.get("last_name")]
    return " ".join(p for p in parts if p).strip()


def display_name_for_member(member: Dict[str, Any]) -> str:
    """Full name of a member, or their email when no name is on file."""
    return _join_name(member) or member.get("email") or ""


def aircraft_label(aircraft: Dict[str, Any]) -> str:
    """``REGISTRATION (TYPE)``, dropping whatever parts are missing."""
    registration = aircraft.get("registration") or str(aircraft.get("id") or "")
    if aircraft.get("type"):
        return f"{registration} ({aircraft['type']})".strip()
    return registration


def booking_from_record(record: Dict[str, Any], tz: TimezoneLike = None) -> Optional[SchedulerBooking]:
    """
    Project a booking record (with optional joined student, instructor and
    aircraft objects) onto the timeline.

    Returns None for records without a start or end time.

    Raises:
        TimestampParseError: If a timestamp is present but unreadable
        ValueError: If the status is unknown or the booking ends before it starts
    """
    if not record.get("start_time") or not record.get("end_time"):
        return None

    starts_at = parse_stored_timestamp(record["start_time"], tz)
    ends_at = parse_stored_timestamp(record["end_time"], tz)

    student = record.get("student")
    student_name = (_join_name(student) or student.get("email")) if student else "Unassigned"

    aircraft = record.get("aircraft")
    label = aircraft_label(aircraft) if aircraft else None

    instructor = record.get("instructor")
    instructor_label = None
    if instructor:
        user = instructor.get("user") or {}
        instructor_label = _join_name(instructor) or user.get("email") or None

    return SchedulerBooking(
        id=str(record["id"]),
        starts_at=starts_at,
        ends_at=ends_at,
        aircraft_id=str(record["aircraft_id"]),
        status=BookingStatus(record.get("status", BookingStatus.UNCONFIRMED.value)),
        instructor_id=record.get("instructor_id"),
        student_name=student_name or "Unassigned",
        aircraft_label=label or None,
        instructor_label=instructor_label,
    )
