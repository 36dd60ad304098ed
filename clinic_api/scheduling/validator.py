"""
Appointment validation.

Checks a proposed appointment against the doctor's working windows and the
appointments already booked. Failures are returned as values, not raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .domain import (
    SLOT_MINUTES, AppointmentRecord, ProposedAppointment, WorkingWindow, minutes_of
)


class ValidationErrorKind(str, Enum):
    NO_SCHEDULE_CONFIGURED = "no_schedule_configured"
    OUTSIDE_WORKING_HOURS = "outside_working_hours"
    SLOT_ALREADY_BOOKED = "slot_already_booked"
    INVALID_SLOT_ALIGNMENT = "invalid_slot_alignment"


@dataclass(frozen=True)
class ValidationResult:
    error: Optional[ValidationErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None


VALID = ValidationResult()


def validate(
    proposed: ProposedAppointment,
    windows: Iterable[WorkingWindow],
    active_appointments: Iterable[AppointmentRecord],
    enforce_alignment: bool = True,
    slot_minutes: int = SLOT_MINUTES
) -> ValidationResult:
    """
    Validate a proposed appointment.

    Checks run in order and stop at the first failure:

    1. the doctor has at least one window on the date
    2. the time falls inside ``[start_time, end_time)`` of one of them
    3. no other active appointment holds the same doctor, date and time
       (``proposed.exclude_appointment_id`` is ignored, for reschedules)
    4. the time sits on the slot grid, only when ``enforce_alignment`` is set
    """
    matching = [
        window for window in windows
        if window.doctor_id == proposed.doctor_id and window.date == proposed.date
    ]
    if not matching:
        return ValidationResult(ValidationErrorKind.NO_SCHEDULE_CONFIGURED)

    if not any(window.contains(proposed.time) for window in matching):
        return ValidationResult(ValidationErrorKind.OUTSIDE_WORKING_HOURS)

    requested = minutes_of(proposed.time)
    for appointment in active_appointments:
        if appointment.id == proposed.exclude_appointment_id:
            continue
        if (
            appointment.is_active
            and appointment.doctor_id == proposed.doctor_id
            and appointment.date == proposed.date
            and minutes_of(appointment.time) == requested
        ):
            return ValidationResult(ValidationErrorKind.SLOT_ALREADY_BOOKED)

    if enforce_alignment and requested % slot_minutes != 0:
        return ValidationResult(ValidationErrorKind.INVALID_SLOT_ALIGNMENT)

    return VALID
