"""
Slot generation.

Splits a doctor's working windows into fixed-length bookable slots.
"""

from typing import Iterable, List

from .domain import SLOT_MINUTES, Slot, WorkingWindow, minutes_of, time_of


def generate_slots(
    windows: Iterable[WorkingWindow],
    slot_minutes: int = SLOT_MINUTES
) -> List[Slot]:
    """
    Generate candidate slots for the given working windows.

    Args:
        windows: working windows, usually of one doctor on one date
        slot_minutes: length of each slot

    Returns:
        Slots of exactly ``slot_minutes``, window by window in iteration order.
        A trailing period shorter than ``slot_minutes`` is dropped, so a
        09:00-10:45 window yields 09:00, 09:30 and 10:00.
    """
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be positive")

    slots: List[Slot] = []

    for window in windows:
        current_start = minutes_of(window.start_time)
        window_end = minutes_of(window.end_time)

        while current_start + slot_minutes <= window_end:
            current_end = current_start + slot_minutes
            slots.append(Slot(start_time=time_of(current_start), end_time=time_of(current_end)))
            current_start = current_end

    return slots
