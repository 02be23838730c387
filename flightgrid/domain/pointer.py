"""
Pointer position to grid cell resolution.

Columns are equal width, so a click is bucketed proportionally: anywhere
inside a cell's pixel span resolves to that cell.
"""

import math

from .exceptions import InvalidContainerError
from .models import SlotSelection, TimeGrid


def resolve_slot_index(pointer_x: float, container_width: float, slot_count: int) -> int:
    """
    Return the index of the slot under ``pointer_x``.

    Args:
        pointer_x: Horizontal offset from the row's left edge, in pixels
        container_width: Row width in pixels
        slot_count: Number of equal-width slots in the row

    Returns:
        Slot index in ``[0, slot_count - 1]``; pointers outside the row clamp
        to the first or last slot

    Raises:
        InvalidContainerError: If the row has no width or no slots
    """
    if container_width <= 0:
        raise InvalidContainerError(f"Container width must be positive, got {container_width}")
    if slot_count <= 0:
        raise InvalidContainerError(f"Slot count must be positive, got {slot_count}")

    index = math.floor(pointer_x / container_width * slot_count)
    return min(max(index, 0), slot_count - 1)


def resolve_slot(
    pointer_x: float,
    container_width: float,
    grid: TimeGrid,
    interval_minutes: int,
) -> SlotSelection:
    """Resolve a pointer to a slot and the draft interval it would start."""
    index = resolve_slot_index(pointer_x, container_width, grid.slot_count)
    start = grid.slots[index]
    end = start.add(minutes=interval_minutes)
    if end > grid.end:
        end = grid.end
    return SlotSelection(index=index, start=start, end=end)
