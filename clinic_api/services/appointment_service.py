from datetime import date, datetime
from typing import List, Optional
import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from ..core.config import settings
from ..core.security import AuthorizationError, UserRole
from ..models.appointment import Appointment
from ..models.user import User
from ..repositories import AppointmentRepository, ScheduleRepository
from ..repositories.appointment_repository import to_record
from ..scheduling import (
    AvailabilityService, ProposedAppointment, Slot, SlotTakenError,
    ValidationErrorKind, ValidationResult, can_book_appointments, can_manage_appointment
)
from ..scheduling.policy import is_admin
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate
from .doctor_service import DoctorService

logger = logging.getLogger(__name__)

# HTTP status and message for each rejected booking
VALIDATION_RESPONSES = {
    ValidationErrorKind.NO_SCHEDULE_CONFIGURED: (
        status.HTTP_400_BAD_REQUEST,
        "The doctor has no schedule configured for this date"
    ),
    ValidationErrorKind.OUTSIDE_WORKING_HOURS: (
        status.HTTP_400_BAD_REQUEST,
        "The appointment time is outside the doctor's working hours for this date"
    ),
    ValidationErrorKind.SLOT_ALREADY_BOOKED: (
        status.HTTP_409_CONFLICT,
        "The doctor already has an appointment at the selected date and time"
    ),
    ValidationErrorKind.INVALID_SLOT_ALIGNMENT: (
        status.HTTP_400_BAD_REQUEST,
        f"The appointment time must start a {settings.SLOT_MINUTES}-minute slot (e.g. 10:00, 10:30)"
    ),
}

class SchedulingConflictError(HTTPException):
    def __init__(self, kind: ValidationErrorKind):
        status_code, message = VALIDATION_RESPONSES[kind]
        super().__init__(
            status_code=status_code,
            detail={"code": kind.value, "message": message},
        )

def _raise_for(result: ValidationResult) -> None:
    if not result.ok:
        raise SchedulingConflictError(result.error)

class AppointmentService:
    def __init__(self, db: Session, availability: Optional[AvailabilityService] = None):
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.availability = availability or AvailabilityService(
            ScheduleRepository(db),
            self.appointments,
            slot_minutes=settings.SLOT_MINUTES
        )

    def list_appointments(self, actor: User) -> List[Appointment]:
        """Admins see every appointment, other users only their own."""
        if is_admin(actor):
            logger.info(f"All appointments requested by admin {actor.username}")
            return self.appointments.list_all()

        logger.info(f"Appointments of {actor.username} (ID: {actor.id}) requested")
        return self.appointments.list_all(patient_id=actor.id)

    def list_for_doctor(self, doctor_id: int, on_date: Optional[date] = None) -> List[Appointment]:
        return self.appointments.list_for_doctor(doctor_id, on_date)

    def available_slots(self, doctor_id: int, on_date: date, now: Optional[datetime] = None) -> List[Slot]:
        return self.availability.list_available_slots(doctor_id, on_date, now)

    def create_appointment(self, actor: User, data: AppointmentCreate) -> Appointment:
        if not can_book_appointments(actor):
            logger.warning(f"Role {actor.role.value} of {actor.username} may not book appointments")
            raise AuthorizationError("Your role is not allowed to create appointments")

        # Patients always book for themselves
        if actor.role == UserRole.PATIENT:
            patient_id = actor.id
        elif data.patient_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Administrators must provide patient_id"
            )
        else:
            patient_id = data.patient_id

        self._ensure_patient_exists(patient_id)
        DoctorService(self.db).get_doctor(data.doctor_id)

        _raise_for(self.availability.validate_appointment(
            ProposedAppointment(doctor_id=data.doctor_id, date=data.date, time=data.time)
        ))

        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=data.doctor_id,
            date=data.date,
            time=data.time,
            service=data.service,
            booking_type=data.booking_type,
            status=data.status,
        )
        try:
            appointment = self.appointments.add(appointment)
        except SlotTakenError:
            logger.warning(
                f"Concurrent booking rejected for doctor {data.doctor_id} on {data.date} at {data.time}"
            )
            raise SchedulingConflictError(ValidationErrorKind.SLOT_ALREADY_BOOKED)

        logger.info(
            f"New appointment created: ID {appointment.id} for user {patient_id} with doctor "
            f"{data.doctor_id} on {data.date} {data.time} by {actor.username}"
        )
        return self.appointments.get(appointment.id)

    def update_appointment(self, actor: User, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        """
        Apply a partial update.

        A change of doctor, date or time is validated against the schedule and
        the other bookings before anything is written.
        """
        appointment = self._get_managed(actor, appointment_id, "update")

        patch = data.to_patch(allow_patient_change=is_admin(actor))
        if patch.is_empty():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No data to update"
            )

        if patch.patient_id is not None:
            self._ensure_patient_exists(patch.patient_id)
        if patch.doctor_id is not None and patch.doctor_id != appointment.doctor_id:
            DoctorService(self.db).get_doctor(patch.doctor_id)

        _raise_for(self.availability.validate_reschedule(to_record(appointment), patch))

        try:
            affected = self.appointments.apply_patch(appointment_id, patch)
        except SlotTakenError:
            raise SchedulingConflictError(ValidationErrorKind.SLOT_ALREADY_BOOKED)

        if affected == 0:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )

        logger.info(f"Appointment updated: ID {appointment_id} by {actor.username}")
        return self.appointments.get(appointment_id)

    def delete_appointment(self, actor: User, appointment_id: int) -> None:
        appointment = self._get_managed(actor, appointment_id, "delete")
        self.appointments.delete(appointment)
        logger.info(f"Appointment deleted: ID {appointment_id} by {actor.username}")

    def _get_managed(self, actor: User, appointment_id: int, action: str) -> Appointment:
        appointment = self.appointments.get(appointment_id)
        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )

        if not can_manage_appointment(actor, appointment):
            logger.warning(
                f"Access denied: {actor.username} (ID: {actor.id}) tried to {action} "
                f"appointment {appointment_id}"
            )
            raise AuthorizationError(f"You do not have permission to {action} this appointment")

        return appointment

    def _ensure_patient_exists(self, patient_id: int) -> None:
        if not self.db.query(User.id).filter(User.id == patient_id).first():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Patient not found"
            )
