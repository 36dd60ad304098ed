from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_admin_user, get_current_user
from ...services.user_service import UserService
from ...schemas.auth import UserResponse, UserUpdate
from ...models.user import User

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("", response_model=List[UserResponse])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    _: User = Depends(get_admin_user)
):
    """List all users (admin only)."""
    return UserService(db).list_users(skip, limit)

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a user by ID (own profile or admin)."""
    return UserService(db).get_user(current_user, user_id)

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a user (own profile or admin). Only admins may change roles."""
    return UserService(db).update_user(current_user, user_id, user_data)
