"""
Domain models for the resource timeline.

Everything here is an immutable value. Instants are timezone-aware pendulum
``DateTime`` objects; the engine never mutates one in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple

from pendulum import DateTime

from .exceptions import InvalidTimelineError


@dataclass(frozen=True)
class TimelineConfig:
    """
    Visible hours and grid resolution of a timeline.

    Invariant: end_hour must be later than start_hour.
    """
    start_hour: int = 7
    end_hour: int = 19
    interval_minutes: int = 30

    def __post_init__(self):
        if not 0 <= self.start_hour <= 23:
            raise InvalidTimelineError(f"start_hour must be between 0 and 23, got {self.start_hour}")
        if not 1 <= self.end_hour <= 24:
            raise InvalidTimelineError(f"end_hour must be between 1 and 24, got {self.end_hour}")
        if self.end_hour <= self.start_hour:
            raise InvalidTimelineError(
                f"end_hour ({self.end_hour}) must be later than start_hour ({self.start_hour})"
            )
        if self.interval_minutes <= 0:
            raise InvalidTimelineError(
                f"interval_minutes must be greater than zero, got {self.interval_minutes}"
            )


@dataclass(frozen=True)
class TimeGrid:
    """Slot boundaries of one day and the visible window they cover."""
    slots: Tuple[DateTime, ...]
    start: DateTime
    end: DateTime

    @property
    def span_minutes(self) -> float:
        return (self.end.timestamp() - self.start.timestamp()) / 60

    @property
    def slot_count(self) -> int:
        return len(self.slots)


@dataclass(frozen=True)
class MinutesWindow:
    """
    Half-open interval of minutes since local midnight.

    Invariant: 0 <= start_min < end_min <= 1440.
    """
    start_min: int
    end_min: int

    def __post_init__(self):
        if not 0 <= self.start_min <= 1439:
            raise ValueError(f"start_min must be between 0 and 1439, got {self.start_min}")
        if not 0 <= self.end_min <= 1440:
            raise ValueError(f"end_min must be between 0 and 1440, got {self.end_min}")
        if self.end_min <= self.start_min:
            raise ValueError(f"Window end {self.end_min} must be after start {self.start_min}")


@dataclass(frozen=True)
class RosterRule:
    """An instructor's rostered wall-clock window, already resolved for one day."""
    instructor_id: str
    start_time: str
    end_time: str
    is_active: bool = True
    voided_at: Optional[str] = None
    id: Optional[str] = None
    day_of_week: Optional[int] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "RosterRule":
        """Build a rule from a roster_rules row."""
        return cls(
            instructor_id=str(record["instructor_id"]),
            start_time=str(record["start_time"]),
            end_time=str(record["end_time"]),
            is_active=bool(record.get("is_active", True)),
            voided_at=record.get("voided_at"),
            id=record.get("id"),
            day_of_week=record.get("day_of_week"),
        )


class BookingStatus(str, Enum):
    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"
    BRIEFING = "briefing"
    FLYING = "flying"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SchedulerBooking:
    """
    Read-only projection of a booking record onto the timeline.

    Invariant: ends_at must be after starts_at.
    """
    id: str
    starts_at: DateTime
    ends_at: DateTime
    aircraft_id: str
    status: BookingStatus
    instructor_id: Optional[str] = None
    student_name: str = "Unassigned"
    aircraft_label: Optional[str] = None
    instructor_label: Optional[str] = None

    def __post_init__(self):
        if self.starts_at >= self.ends_at:
            raise ValueError(
                f"Booking {self.id}: start {self.starts_at} must be before end {self.ends_at}"
            )


@dataclass(frozen=True)
class BookingLayout:
    """Horizontal placement of a booking, as percentages of the visible window."""
    left_pct: float
    width_pct: float
    is_clipped_start: bool
    is_clipped_end: bool


ResourceKind = Literal["instructor", "aircraft"]


@dataclass(frozen=True)
class Resource:
    """One timeline row: an instructor or an aircraft."""
    kind: ResourceKind
    id: str
    label: str

    @property
    def is_instructor(self) -> bool:
        return self.kind == "instructor"


@dataclass(frozen=True)
class DayRange:
    """UTC query range covering one local calendar day, end exclusive."""
    start_utc_iso: str
    end_utc_iso: str


@dataclass(frozen=True)
class SlotSelection:
    """The grid cell a pointer resolved to."""
    index: int
    start: DateTime
    end: DateTime
