from datetime import date, datetime
from typing import List, Optional
import logging

from .conflicts import filter_available
from .domain import (
    SLOT_MINUTES, AppointmentPatch, AppointmentRecord, ProposedAppointment, Slot
)
from .ports import AppointmentStore, ScheduleStore
from .slots import generate_slots
from .validator import VALID, ValidationResult, validate

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Connects the stores to slot generation, filtering and validation."""

    def __init__(
        self,
        schedule_store: ScheduleStore,
        appointment_store: AppointmentStore,
        slot_minutes: int = SLOT_MINUTES
    ):
        self.schedule_store = schedule_store
        self.appointment_store = appointment_store
        self.slot_minutes = slot_minutes

    def list_available_slots(
        self,
        doctor_id: int,
        on_date: date,
        now: Optional[datetime] = None
    ) -> List[Slot]:
        """Free slots of a doctor on a date; empty when no schedule exists."""
        windows = self.schedule_store.get_windows(doctor_id, on_date)
        if not windows:
            logger.info(f"No schedule configured for doctor {doctor_id} on {on_date}")
            return []

        booked_times = self.appointment_store.get_booked_times(doctor_id, on_date)
        candidates = generate_slots(windows, self.slot_minutes)

        return filter_available(
            candidates,
            booked_times,
            on_date,
            now or datetime.now()
        )

    def validate_appointment(
        self,
        proposed: ProposedAppointment,
        enforce_alignment: bool = True
    ) -> ValidationResult:
        """Validate a new or moved appointment against the stored state."""
        windows = self.schedule_store.get_windows(proposed.doctor_id, proposed.date)
        active = self.appointment_store.get_active_appointments(
            proposed.doctor_id,
            proposed.date,
            exclude_id=proposed.exclude_appointment_id
        )

        result = validate(
            proposed,
            windows,
            active,
            enforce_alignment=enforce_alignment,
            slot_minutes=self.slot_minutes
        )
        if not result.ok:
            logger.info(
                f"Rejected appointment for doctor {proposed.doctor_id} on "
                f"{proposed.date} at {proposed.time}: {result.error.value}"
            )
        return result

    def validate_reschedule(
        self,
        existing: AppointmentRecord,
        patch: AppointmentPatch
    ) -> ValidationResult:
        """
        Validate an update that may move an appointment.

        Only doctor/date/time changes are checked, and grid alignment is not
        enforced on updates.
        """
        if not patch.reschedules(existing):
            return VALID

        return self.validate_appointment(
            patch.proposed_for(existing),
            enforce_alignment=False
        )
