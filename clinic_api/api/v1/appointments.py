import datetime
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_availability_service, get_current_user, get_staff_user
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import AppointmentCreate, AppointmentUpdate, AppointmentResponse
from ...scheduling import AvailabilityService
from ...models.user import User

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List appointments (all for admins, own for everyone else)."""
    appointments = AppointmentService(db).list_appointments(current_user)
    return [AppointmentResponse.from_appointment(a) for a in appointments]

@router.get("/doctor/{doctor_id}", response_model=List[AppointmentResponse])
async def list_doctor_appointments(
    doctor_id: int,
    date: Optional[datetime.date] = None,
    db: Session = Depends(get_db),
    _: User = Depends(get_staff_user)
):
    """Appointments of one doctor, optionally for one date (doctors and admins)."""
    appointments = AppointmentService(db).list_for_doctor(doctor_id, date)
    return [AppointmentResponse.from_appointment(a) for a in appointments]

@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db),
    availability: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_user)
):
    """Book an appointment in a free slot."""
    service = AppointmentService(db, availability)
    return AppointmentResponse.from_appointment(
        service.create_appointment(current_user, appointment_data)
    )

@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    appointment_data: AppointmentUpdate,
    db: Session = Depends(get_db),
    availability: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_user)
):
    """Update or reschedule an appointment (owner or admin)."""
    service = AppointmentService(db, availability)
    return AppointmentResponse.from_appointment(
        service.update_appointment(current_user, appointment_id, appointment_data)
    )

@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete an appointment (owner or admin)."""
    AppointmentService(db).delete_appointment(current_user, appointment_id)
    return {"message": "Appointment deleted successfully"}
