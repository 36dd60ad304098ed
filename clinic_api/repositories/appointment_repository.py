from datetime import date, time
from typing import List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql import func

from ..models.appointment import Appointment
from ..scheduling.domain import (
    ACTIVE_STATUSES, AppointmentPatch, AppointmentRecord, AppointmentStatus
)
from ..scheduling.ports import SlotTakenError
from .base import store_errors

def to_record(appointment: Appointment) -> AppointmentRecord:
    return AppointmentRecord(
        id=appointment.id,
        doctor_id=appointment.doctor_id,
        patient_id=appointment.patient_id,
        date=appointment.date,
        time=appointment.time,
        status=AppointmentStatus(appointment.status),
    )

class AppointmentRepository:
    """SQL-backed appointment store."""

    def __init__(self, db: Session):
        self.db = db

    def get_active_appointments(
        self,
        doctor_id: int,
        on_date: date,
        exclude_id: Optional[int] = None
    ) -> List[AppointmentRecord]:
        with store_errors("appointment lookup"):
            query = self.db.query(Appointment).filter(
                Appointment.doctor_id == doctor_id,
                Appointment.date == on_date,
                Appointment.status.in_(list(ACTIVE_STATUSES))
            )
            if exclude_id is not None:
                query = query.filter(Appointment.id != exclude_id)
            return [to_record(row) for row in query.all()]

    def get_booked_times(self, doctor_id: int, on_date: date) -> Set[time]:
        with store_errors("booked times lookup"):
            rows = self.db.query(Appointment.time).filter(
                Appointment.doctor_id == doctor_id,
                Appointment.date == on_date,
                Appointment.status.in_(list(ACTIVE_STATUSES))
            ).all()
            return {row.time.replace(second=0, microsecond=0) for row in rows}

    def get(self, appointment_id: int) -> Optional[Appointment]:
        with store_errors("appointment lookup"):
            return self.db.query(Appointment).options(
                joinedload(Appointment.patient),
                joinedload(Appointment.doctor)
            ).filter(Appointment.id == appointment_id).first()

    def list_all(self, patient_id: Optional[int] = None) -> List[Appointment]:
        """All appointments, or those of one patient."""
        with store_errors("appointment listing"):
            query = self.db.query(Appointment).options(
                joinedload(Appointment.patient),
                joinedload(Appointment.doctor)
            )
            if patient_id is not None:
                query = query.filter(Appointment.patient_id == patient_id)
            return query.order_by(Appointment.date, Appointment.time).all()

    def list_for_doctor(self, doctor_id: int, on_date: Optional[date] = None) -> List[Appointment]:
        with store_errors("appointment listing"):
            query = self.db.query(Appointment).options(
                joinedload(Appointment.patient),
                joinedload(Appointment.doctor)
            ).filter(Appointment.doctor_id == doctor_id)
            if on_date is not None:
                query = query.filter(Appointment.date == on_date)
            return query.order_by(Appointment.date, Appointment.time).all()

    def exists_for_doctor(self, doctor_id: int) -> bool:
        with store_errors("appointment lookup"):
            return self.db.query(Appointment.id).filter(
                Appointment.doctor_id == doctor_id
            ).first() is not None

    def add(self, appointment: Appointment) -> Appointment:
        """Insert an appointment; a second active booking of the slot raises SlotTakenError."""
        with store_errors("appointment insert"):
            self.db.add(appointment)
            try:
                self.db.commit()
            except IntegrityError as e:
                # The only unique constraint on the table is the active-slot index
                self.db.rollback()
                raise SlotTakenError("Slot already booked") from e
            self.db.refresh(appointment)
            return appointment

    def apply_patch(self, appointment_id: int, patch: AppointmentPatch) -> int:
        """Apply the changed fields as one parameterized UPDATE; returns affected rows."""
        values = patch.changes()
        values["updated_at"] = func.now()

        with store_errors("appointment update"):
            try:
                affected = self.db.query(Appointment).filter(
                    Appointment.id == appointment_id
                ).update(values, synchronize_session=False)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise SlotTakenError("Slot already booked") from e
            # Drop stale identity-map state so reads see the new row
            self.db.expire_all()
            return affected

    def delete(self, appointment: Appointment) -> None:
        with store_errors("appointment delete"):
            self.db.delete(appointment)
            self.db.commit()
