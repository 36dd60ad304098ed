from .user import User
from .doctor import Doctor
from .schedule import DoctorSchedule
from .appointment import Appointment

__all__ = ["User", "Doctor", "DoctorSchedule", "Appointment"]
