from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List
import logging

from ..models.doctor import Doctor
from ..models.user import User
from ..repositories import AppointmentRepository
from ..schemas.doctor import DoctorCreate, DoctorUpdate

logger = logging.getLogger(__name__)

class DoctorService:
    def __init__(self, db: Session):
        self.db = db

    def list_doctors(self) -> List[Doctor]:
        return self.db.query(Doctor).order_by(Doctor.id).all()

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found"
            )
        return doctor

    def create_doctor(self, actor: User, data: DoctorCreate) -> Doctor:
        doctor = Doctor(**data.model_dump())
        self.db.add(doctor)
        self.db.commit()
        self.db.refresh(doctor)

        logger.info(
            f"New doctor added: {doctor.first_name} {doctor.last_name} "
            f"(ID: {doctor.id}) by {actor.username}"
        )
        return doctor

    def update_doctor(self, actor: User, doctor_id: int, data: DoctorUpdate) -> Doctor:
        changes = data.changes()
        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No data to update"
            )

        doctor = self.get_doctor(doctor_id)
        for field, value in changes.items():
            setattr(doctor, field, value)

        self.db.commit()
        self.db.refresh(doctor)

        logger.info(f"Doctor updated: ID {doctor_id} by {actor.username}")
        return doctor

    def delete_doctor(self, actor: User, doctor_id: int) -> None:
        """Delete a doctor and their schedules. Refused while appointments reference them."""
        doctor = self.get_doctor(doctor_id)

        if AppointmentRepository(self.db).exists_for_doctor(doctor_id):
            logger.warning(f"Refused to delete doctor {doctor_id}: appointments exist")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete a doctor with associated appointments"
            )

        self.db.delete(doctor)
        self.db.commit()

        logger.info(f"Doctor deleted: ID {doctor_id} by {actor.username}")
