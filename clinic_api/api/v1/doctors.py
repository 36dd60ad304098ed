import datetime
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_admin_user, get_current_user
from ...services.doctor_service import DoctorService
from ...services.schedule_service import ScheduleService
from ...services.appointment_service import AppointmentService
from ...schemas.doctor import DoctorCreate, DoctorUpdate, DoctorResponse
from ...schemas.schedule import ScheduleResponse, SlotResponse
from ...models.user import User

router = APIRouter(prefix="/doctors", tags=["Doctors"])

@router.get("", response_model=List[DoctorResponse])
async def list_doctors(db: Session = Depends(get_db)):
    """List all doctors."""
    return DoctorService(db).list_doctors()

@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(doctor_id: int, db: Session = Depends(get_db)):
    """Get a doctor by ID."""
    return DoctorService(db).get_doctor(doctor_id)

@router.post("", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def create_doctor(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin_user)
):
    """Add a doctor (admin only)."""
    return DoctorService(db).create_doctor(current_user, doctor_data)

@router.put("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: int,
    doctor_data: DoctorUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin_user)
):
    """Update a doctor (admin only)."""
    return DoctorService(db).update_doctor(current_user, doctor_id, doctor_data)

@router.delete("/{doctor_id}")
async def delete_doctor(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin_user)
):
    """Delete a doctor without appointments (admin only)."""
    DoctorService(db).delete_doctor(current_user, doctor_id)
    return {"message": "Doctor deleted successfully"}

@router.get("/{doctor_id}/schedules", response_model=List[ScheduleResponse])
async def list_doctor_schedules(
    doctor_id: int,
    date: Optional[datetime.date] = None,
    db: Session = Depends(get_db)
):
    """Working windows of a doctor, optionally for one date."""
    return ScheduleService(db).list_schedules(doctor_id, date)

@router.get("/{doctor_id}/available-slots", response_model=List[SlotResponse])
async def list_available_slots(
    doctor_id: int,
    date: datetime.date = Query(...),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user)
):
    """Free slots of a doctor on a date. Empty when no schedule is configured."""
    slots = AppointmentService(db).available_slots(doctor_id, date)
    return [SlotResponse.from_slot(slot) for slot in slots]
