from datetime import date, time
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.schedule import DoctorSchedule
from ..scheduling.domain import WorkingWindow
from .base import store_errors

class ScheduleRepository:
    """SQL-backed schedule store."""

    def __init__(self, db: Session):
        self.db = db

    def get_windows(self, doctor_id: int, on_date: date) -> List[WorkingWindow]:
        """Working windows of a doctor on one date."""
        return [
            WorkingWindow(
                doctor_id=row.doctor_id,
                date=row.date,
                start_time=row.start_time,
                end_time=row.end_time,
            )
            for row in self.list_for_doctor(doctor_id, on_date)
        ]

    def list_for_doctor(self, doctor_id: int, on_date: Optional[date] = None) -> List[DoctorSchedule]:
        with store_errors("schedule lookup"):
            query = self.db.query(DoctorSchedule).filter(DoctorSchedule.doctor_id == doctor_id)
            if on_date is not None:
                query = query.filter(DoctorSchedule.date == on_date)
            return query.order_by(DoctorSchedule.date, DoctorSchedule.start_time).all()

    def get(self, schedule_id: int) -> Optional[DoctorSchedule]:
        with store_errors("schedule lookup"):
            return self.db.query(DoctorSchedule).filter(DoctorSchedule.id == schedule_id).first()

    def find_overlapping(
        self,
        doctor_id: int,
        on_date: date,
        start_time: time,
        end_time: time,
        exclude_id: Optional[int] = None
    ) -> Optional[DoctorSchedule]:
        """First window of the doctor on that date intersecting [start_time, end_time)."""
        with store_errors("schedule overlap check"):
            query = self.db.query(DoctorSchedule).filter(
                DoctorSchedule.doctor_id == doctor_id,
                DoctorSchedule.date == on_date,
                DoctorSchedule.start_time < end_time,
                DoctorSchedule.end_time > start_time
            )
            if exclude_id is not None:
                query = query.filter(DoctorSchedule.id != exclude_id)
            return query.first()

    def add(self, schedule: DoctorSchedule) -> DoctorSchedule:
        with store_errors("schedule insert"):
            self.db.add(schedule)
            self.db.commit()
            self.db.refresh(schedule)
            return schedule

    def save(self, schedule: DoctorSchedule) -> DoctorSchedule:
        with store_errors("schedule update"):
            self.db.commit()
            self.db.refresh(schedule)
            return schedule

    def delete(self, schedule: DoctorSchedule) -> None:
        with store_errors("schedule delete"):
            self.db.delete(schedule)
            self.db.commit()
