from datetime import date
from typing import List, Optional
import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from ..models.schedule import DoctorSchedule
from ..models.user import User
from ..repositories import ScheduleRepository
from ..schemas.schedule import ScheduleCreate, ScheduleUpdate
from ..scheduling.domain import minutes_of
from .doctor_service import DoctorService

logger = logging.getLogger(__name__)

class ScheduleService:
    """Working-window management. Keeps windows of one doctor/date disjoint."""

    def __init__(self, db: Session):
        self.db = db
        self.schedules = ScheduleRepository(db)
        self.doctors = DoctorService(db)

    def list_schedules(self, doctor_id: int, on_date: Optional[date] = None) -> List[DoctorSchedule]:
        return self.schedules.list_for_doctor(doctor_id, on_date)

    def create_schedule(self, actor: User, data: ScheduleCreate) -> DoctorSchedule:
        # Raises 404 for unknown doctors
        self.doctors.get_doctor(data.doctor_id)

        self._ensure_no_overlap(data.doctor_id, data.date, data.start_time, data.end_time)

        schedule = self.schedules.add(DoctorSchedule(**data.model_dump()))
        logger.info(
            f"Schedule added: ID {schedule.id} for doctor {schedule.doctor_id} "
            f"on {schedule.date} by {actor.username}"
        )
        return schedule

    def update_schedule(self, actor: User, schedule_id: int, data: ScheduleUpdate) -> DoctorSchedule:
        changes = data.changes()
        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No data to update"
            )

        schedule = self._get_or_404(schedule_id)

        new_date = changes.get("date", schedule.date)
        new_start = changes.get("start_time", schedule.start_time)
        new_end = changes.get("end_time", schedule.end_time)
        if minutes_of(new_start) >= minutes_of(new_end):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="start_time must be before end_time"
            )

        self._ensure_no_overlap(schedule.doctor_id, new_date, new_start, new_end, exclude_id=schedule.id)

        for field, value in changes.items():
            setattr(schedule, field, value)
        schedule = self.schedules.save(schedule)

        logger.info(f"Schedule updated: ID {schedule_id} by {actor.username}")
        return schedule

    def delete_schedule(self, actor: User, schedule_id: int) -> None:
        schedule = self._get_or_404(schedule_id)
        self.schedules.delete(schedule)
        logger.info(f"Schedule deleted: ID {schedule_id} by {actor.username}")

    def _get_or_404(self, schedule_id: int) -> DoctorSchedule:
        schedule = self.schedules.get(schedule_id)
        if not schedule:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Schedule not found"
            )
        return schedule

    def _ensure_no_overlap(self, doctor_id, on_date, start_time, end_time, exclude_id=None) -> None:
        clash = self.schedules.find_overlapping(
            doctor_id, on_date, start_time, end_time, exclude_id=exclude_id
        )
        if clash:
            logger.warning(f"Overlapping schedule for doctor {doctor_id} on {on_date}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An overlapping schedule already exists for this doctor and date"
            )
