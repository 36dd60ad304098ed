from .schedule_repository import ScheduleRepository
from .appointment_repository import AppointmentRepository

__all__ = ["ScheduleRepository", "AppointmentRepository"]
