from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Time, Index, Enum as SQLEnum, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..scheduling.domain import AppointmentStatus, BookingType

# Matches ACTIVE_STATUSES in the scheduling domain
ACTIVE_STATUS_CLAUSE = "status IN ('pending', 'confirmed')"

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)

    # Appointment details
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    service = Column(String(255), nullable=False)
    booking_type = Column(
        SQLEnum(BookingType, name="booking_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BookingType.IN_PERSON
    )
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AppointmentStatus.PENDING
    )

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("User", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")

    __table_args__ = (
        # One active booking per doctor and start time
        Index(
            "uq_appointments_active_slot",
            "doctor_id", "date", "time",
            unique=True,
            postgresql_where=text(ACTIVE_STATUS_CLAUSE),
            sqlite_where=text(ACTIVE_STATUS_CLAUSE),
        ),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, date='{self.date}', time='{self.time}')>"
