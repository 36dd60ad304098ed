"""
Slot availability and appointment conflict checks.
"""

from .conflicts import filter_available
from .domain import (
    ACTIVE_STATUSES, SLOT_MINUTES, AppointmentPatch, AppointmentRecord,
    AppointmentStatus, BookingType, ProposedAppointment, Slot, WorkingWindow
)
from .policy import can_access_user, can_book_appointments, can_manage_appointment
from .ports import (
    AppointmentStore, ScheduleStore, SlotTakenError, StoreError, StoreUnavailableError
)
from .service import AvailabilityService
from .slots import generate_slots
from .validator import VALID, ValidationErrorKind, ValidationResult, validate

__all__ = [
    "ACTIVE_STATUSES",
    "SLOT_MINUTES",
    "AppointmentPatch",
    "AppointmentRecord",
    "AppointmentStatus",
    "AppointmentStore",
    "AvailabilityService",
    "BookingType",
    "ProposedAppointment",
    "ScheduleStore",
    "Slot",
    "SlotTakenError",
    "StoreError",
    "StoreUnavailableError",
    "VALID",
    "ValidationErrorKind",
    "ValidationResult",
    "WorkingWindow",
    "can_access_user",
    "can_book_appointments",
    "can_manage_appointment",
    "filter_available",
    "generate_slots",
    "validate",
]
