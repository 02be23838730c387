"""
Application service that assembles a scheduler day view.

The service fetches bookings, roster rules and resources for one selected day
through a data-source protocol and hands them to the pure domain functions:
slot generation, availability, booking layout and pointer resolution. Keeping
the fetching behind a protocol lets tests and the CLI plug in the fixture or
API adapter without touching the engine.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Optional, Protocol, Sequence, Tuple

from pendulum import Date

from ..domain.availability import AvailabilityIndex, build_availability, is_resource_available_at
from ..domain.day_boundary import get_selected_day_range_utc
from ..domain.layout import booking_matches_resource, get_booking_layout
from ..domain.models import (
    BookingLayout,
    DayRange,
    Resource,
    RosterRule,
    SchedulerBooking,
    SlotSelection,
    TimeGrid,
    TimelineConfig,
)
from ..domain.pointer import resolve_slot
from ..domain.records import booking_from_record
from ..domain.time_grid import TimezoneLike, build_time_slots, resolve_timezone

logger = logging.getLogger(__name__)

CellState = Literal["booked", "available", "unavailable"]


class SchedulerSourceProtocol(Protocol):
    """Protocol describing the data a day view needs."""

    async def fetch_bookings(self, day_range: DayRange) -> List[Dict[str, Any]]:
        """Return booking records overlapping the UTC range."""

    async def fetch_roster_rules(self, day: Date) -> List[Dict[str, Any]]:
        """Return roster rule records resolved for the local day."""

    async def fetch_instructors(self) -> List[Resource]:
        """Return instructor rows."""

    async def fetch_aircraft(self) -> List[Resource]:
        """Return aircraft rows."""


@dataclass(frozen=True)
class PlacedBooking:
    """A booking with its layout and the width it should be drawn at."""
    booking: SchedulerBooking
    layout: BookingLayout
    rendered_width_pct: float


@dataclass(frozen=True)
class ResourceRow:
    resource: Resource
    bookings: Tuple[PlacedBooking, ...]
    slot_availability: Tuple[bool, ...]

    def cell_state(self, grid: TimeGrid, index: int) -> CellState:
        """Booked if any booking overlaps the cell, else the slot's availability."""
        cell_start = grid.slots[index]
        cell_end = grid.slots[index + 1] if index + 1 < grid.slot_count else grid.end

        for placed in self.bookings:
            if placed.booking.starts_at < cell_end and placed.booking.ends_at > cell_start:
                return "booked"

        return "available" if self.slot_availability[index] else "unavailable"


@dataclass(frozen=True)
class DayView:
    """Everything needed to draw one day of the resource timeline."""
    day: Date
    grid: TimeGrid
    day_range: DayRange
    availability: AvailabilityIndex
    instructor_rows: Tuple[ResourceRow, ...]
    aircraft_rows: Tuple[ResourceRow, ...]

    @property
    def rows(self) -> Tuple[ResourceRow, ...]:
        return self.instructor_rows + self.aircraft_rows

    def find_row(self, resource_id: str) -> Optional[ResourceRow]:
        for row in self.rows:
            if row.resource.id == resource_id:
                return row
        return None


class SchedulerViewService:
    """
    Orchestrates data retrieval and the timeline engine for one day at a time.
    """

    def __init__(
        self,
        source: SchedulerSourceProtocol,
        config: TimelineConfig,
        tz: TimezoneLike = None,
        min_width_pct: float = 2.0,
    ) -> None:
        self._source = source
        self.config = config
        self.tz = resolve_timezone(tz)
        self.min_width_pct = min_width_pct

    async def load_day(self, day: Date) -> DayView:
        """
        Fetch and assemble the view for ``day``.

        Bookings and roster rules are always requested for the same day so
        layout and availability agree with each other.
        """
        day_range = get_selected_day_range_utc(day, self.tz)

        booking_records, rule_records, instructors, aircraft = await asyncio.gather(
            self._source.fetch_bookings(day_range),
            self._source.fetch_roster_rules(day),
            self._source.fetch_instructors(),
            self._source.fetch_aircraft(),
        )

        return self.build_view(
            day=day,
            day_range=day_range,
            booking_records=booking_records,
            rule_records=rule_records,
            instructors=instructors,
            aircraft=aircraft,
        )

    def build_view(
        self,
        *,
        day: Date,
        day_range: DayRange,
        booking_records: Iterable[Dict[str, Any]],
        rule_records: Iterable[Dict[str, Any]],
        instructors: Sequence[Resource],
        aircraft: Sequence[Resource],
    ) -> DayView:
        """Assemble a view from already-fetched records."""
        grid = build_time_slots(day, self.config, self.tz)
        availability = build_availability(RosterRule.from_record(r) for r in rule_records)
        bookings = self.map_bookings(booking_records)

        def build_rows(resources: Sequence[Resource]) -> Tuple[ResourceRow, ...]:
            ordered = sorted(resources, key=lambda r: r.label.lower())
            return tuple(self._build_row(r, grid, availability, bookings) for r in ordered)

        return DayView(
            day=day,
            grid=grid,
            day_range=day_range,
            availability=availability,
            instructor_rows=build_rows(instructors),
            aircraft_rows=build_rows(aircraft),
        )

    def map_bookings(self, records: Iterable[Dict[str, Any]]) -> List[SchedulerBooking]:
        """Project booking records, skipping any that cannot be placed."""
        bookings: List[SchedulerBooking] = []
        for record in records:
            try:
                booking = booking_from_record(record, self.tz)
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping booking %s: %s", record.get("id"), exc)
                continue
            if booking is not None:
                bookings.append(booking)
        return bookings

    def _build_row(
        self,
        resource: Resource,
        grid: TimeGrid,
        availability: AvailabilityIndex,
        bookings: Sequence[SchedulerBooking],
    ) -> ResourceRow:
        placed: List[PlacedBooking] = []
        for booking in bookings:
            if not booking_matches_resource(booking, resource):
                continue
            layout = get_booking_layout(
                booking_start=booking.starts_at,
                booking_end=booking.ends_at,
                timeline_start=grid.start,
                timeline_end=grid.end,
            )
            if layout is None:
                continue
            placed.append(
                PlacedBooking(
                    booking=booking,
                    layout=layout,
                    rendered_width_pct=max(layout.width_pct, self.min_width_pct),
                )
            )

        return ResourceRow(
            resource=resource,
            bookings=tuple(sorted(placed, key=lambda p: p.booking.starts_at)),
            slot_availability=tuple(
                is_resource_available_at(resource, slot, availability) for slot in grid.slots
            ),
        )

    def handle_row_click(
        self,
        view: DayView,
        resource: Resource,
        pointer_x: float,
        container_width: float,
    ) -> Optional[SlotSelection]:
        """
        Resolve a click on an empty part of a row.

        Returns None when the row is an instructor who is not rostered for the
        slot under the pointer; such cells do not respond to clicks.
        """
        selection = resolve_slot(pointer_x, container_width, view.grid, self.config.interval_minutes)

        if not is_resource_available_at(resource, selection.start, view.availability):
            logger.debug(
                "Ignoring click on %s %s at %s: not rostered",
                resource.kind,
                resource.id,
                selection.start,
            )
            return None

        return selection

    @staticmethod
    def navigate(day: Date, delta_days: int) -> Date:
        """Move the selected day by whole calendar days."""
        return day.add(days=delta_days)
