import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models.appointment import Appointment
from ..scheduling.domain import AppointmentPatch, AppointmentStatus, BookingType
from .base import PatchModel

class AppointmentCreate(BaseModel):
    patient_id: Optional[int] = None
    doctor_id: int
    date: datetime.date
    time: datetime.time
    service: str = Field(min_length=1, max_length=255)
    booking_type: BookingType = BookingType.IN_PERSON
    status: AppointmentStatus = AppointmentStatus.PENDING

class AppointmentUpdate(PatchModel):
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    date: Optional[datetime.date] = None
    time: Optional[datetime.time] = None
    service: Optional[str] = Field(default=None, max_length=255)
    booking_type: Optional[BookingType] = None
    status: Optional[AppointmentStatus] = None

    def to_patch(self, allow_patient_change: bool) -> AppointmentPatch:
        """Build the store patch; patient changes are dropped unless allowed."""
        changes = self.changes()
        if not allow_patient_change:
            changes.pop("patient_id", None)
        return AppointmentPatch(**changes)

class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    date: datetime.date
    time: datetime.time
    service: str
    booking_type: BookingType
    status: AppointmentStatus
    patient_first_name: Optional[str] = None
    patient_last_name: Optional[str] = None
    doctor_first_name: Optional[str] = None
    doctor_last_name: Optional[str] = None

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentResponse":
        patient = appointment.patient
        doctor = appointment.doctor
        return cls(
            id=appointment.id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            date=appointment.date,
            time=appointment.time,
            service=appointment.service,
            booking_type=appointment.booking_type,
            status=appointment.status,
            patient_first_name=patient.first_name if patient else None,
            patient_last_name=patient.last_name if patient else None,
            doctor_first_name=doctor.first_name if doctor else None,
            doctor_last_name=doctor.last_name if doctor else None,
        )
