"""
Conflict filtering for generated slots.
"""

from datetime import date, datetime, time
from typing import Iterable, List

from .domain import Slot, minutes_of


def filter_available(
    slots: Iterable[Slot],
    booked_times: Iterable[time],
    reference_date: date,
    now: datetime
) -> List[Slot]:
    """
    Drop slots that are already booked or, on the current day, already started.

    A slot counts as booked when an active appointment starts exactly at the
    slot start. Slots on dates other than ``now``'s date are never treated as
    past. Order of ``slots`` is preserved.
    """
    booked = {minutes_of(value) for value in booked_times}
    is_today = reference_date == now.date()

    available: List[Slot] = []
    for slot in slots:
        if minutes_of(slot.start_time) in booked:
            continue

        if is_today:
            slot_start = datetime.combine(reference_date, slot.start_time, tzinfo=now.tzinfo)
            if slot_start <= now:
                continue

        available.append(slot)

    return available
