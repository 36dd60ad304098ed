from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...services.schedule_service import ScheduleService
from ...schemas.schedule import ScheduleCreate, ScheduleUpdate, ScheduleResponse
from ...models.user import User

router = APIRouter(prefix="/schedules", tags=["Schedules"])

@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule_data: ScheduleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin_user)
):
    """Add a working window for a doctor (admin only)."""
    return ScheduleService(db).create_schedule(current_user, schedule_data)

@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    schedule_data: ScheduleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin_user)
):
    """Update a working window (admin only)."""
    return ScheduleService(db).update_schedule(current_user, schedule_id, schedule_data)

@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin_user)
):
    """Delete a working window (admin only)."""
    ScheduleService(db).delete_schedule(current_user, schedule_id)
    return {"message": "Schedule deleted successfully"}
