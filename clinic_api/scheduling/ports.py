"""
Store interfaces consumed by the scheduling engine.
"""

from datetime import date, time
from typing import List, Optional, Protocol, Set

from .domain import AppointmentRecord, WorkingWindow


class StoreError(Exception):
    """Base class for store adapter failures."""


class StoreUnavailableError(StoreError):
    """Raised when the backing store cannot be reached. Never retried."""


class SlotTakenError(StoreError):
    """Raised when the store rejects a second active booking of a slot."""


class ScheduleStore(Protocol):
    def get_windows(self, doctor_id: int, on_date: date) -> List[WorkingWindow]:
        ...


class AppointmentStore(Protocol):
    def get_active_appointments(
        self,
        doctor_id: int,
        on_date: date,
        exclude_id: Optional[int] = None
    ) -> List[AppointmentRecord]:
        ...

    def get_booked_times(self, doctor_id: int, on_date: date) -> Set[time]:
        ...
