"""
Value types shared by the scheduling engine and the store adapters.

Nothing here touches the database; store adapters convert their rows into
these types before handing them to the engine.
"""

from dataclasses import dataclass, fields
import datetime
from enum import Enum
from typing import Any, Dict, Optional

SLOT_MINUTES = 30


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses that occupy a slot
ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})


class BookingType(str, Enum):
    IN_PERSON = "in_person"


def minutes_of(value: datetime.time) -> int:
    """Minutes elapsed since midnight, ignoring seconds."""
    return value.hour * 60 + value.minute


def time_of(minutes: int) -> datetime.time:
    """Inverse of :func:`minutes_of` for values inside a single day."""
    hours, mins = divmod(minutes, 60)
    return datetime.time(hours, mins)


@dataclass(frozen=True)
class WorkingWindow:
    """A doctor's configured availability interval for one date."""

    doctor_id: int
    date: datetime.date
    start_time: datetime.time
    end_time: datetime.time

    def __post_init__(self):
        if minutes_of(self.start_time) >= minutes_of(self.end_time):
            raise ValueError(
                f"Start time {self.start_time} must be before end time {self.end_time}"
            )

    def contains(self, value: datetime.time) -> bool:
        """Half-open membership test: start inclusive, end exclusive."""
        return minutes_of(self.start_time) <= minutes_of(value) < minutes_of(self.end_time)

    def overlaps(self, start_time: datetime.time, end_time: datetime.time) -> bool:
        return (
            minutes_of(self.start_time) < minutes_of(end_time)
            and minutes_of(self.end_time) > minutes_of(start_time)
        )


@dataclass(frozen=True)
class Slot:
    start_time: datetime.time
    end_time: datetime.time

    def label(self) -> str:
        return self.start_time.strftime("%H:%M")


@dataclass(frozen=True)
class AppointmentRecord:
    id: int
    doctor_id: int
    patient_id: int
    date: datetime.date
    time: datetime.time
    status: AppointmentStatus

    @property
    def is_active(self) -> bool:
        return AppointmentStatus(self.status) in ACTIVE_STATUSES


@dataclass(frozen=True)
class ProposedAppointment:
    doctor_id: int
    date: datetime.date
    time: datetime.time
    exclude_appointment_id: Optional[int] = None


@dataclass
class AppointmentPatch:
    """
    Fields changed by an appointment update.

    A field left as ``None`` is not part of the update. Store adapters turn
    :meth:`changes` into a parameterized UPDATE; the scheduling engine only
    looks at ``doctor_id``, ``date`` and ``time``.
    """

    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    date: Optional[datetime.date] = None
    time: Optional[datetime.time] = None
    service: Optional[str] = None
    booking_type: Optional[BookingType] = None
    status: Optional[AppointmentStatus] = None

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()

    def reschedules(self, existing: AppointmentRecord) -> bool:
        """True when doctor, date or time differ from the stored record."""
        return (
            (self.doctor_id is not None and self.doctor_id != existing.doctor_id)
            or (self.date is not None and self.date != existing.date)
            or (self.time is not None and minutes_of(self.time) != minutes_of(existing.time))
        )

    def proposed_for(self, existing: AppointmentRecord) -> ProposedAppointment:
        """The appointment as it would look after applying this patch."""
        return ProposedAppointment(
            doctor_id=self.doctor_id if self.doctor_id is not None else existing.doctor_id,
            date=self.date if self.date is not None else existing.date,
            time=self.time if self.time is not None else existing.time,
            exclude_appointment_id=existing.id,
        )
