from sqlalchemy import Column, Integer, ForeignKey, Date, Time, Index
from sqlalchemy.orm import relationship

from ..core.database import Base

class DoctorSchedule(Base):
    """One working window of a doctor on a given date."""
    __tablename__ = "doctor_schedules"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # Relationships
    doctor = relationship("Doctor", back_populates="schedules")

    __table_args__ = (
        Index("ix_doctor_schedules_doctor_date", "doctor_id", "date"),
    )

    def __repr__(self):
        return f"<DoctorSchedule(id={self.id}, doctor_id={self.doctor_id}, date='{self.date}', {self.start_time}-{self.end_time})>"
