from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List
import logging

from ..models.user import User
from ..core.security import AuthorizationError, get_password_hash
from ..scheduling.policy import can_access_user, is_admin
from ..schemas.auth import UserUpdate

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def list_users(self, skip: int = 0, limit: int = 100) -> List[User]:
        return self.db.query(User).order_by(User.id).offset(skip).limit(limit).all()

    def get_user(self, actor: User, user_id: int) -> User:
        """Fetch a user; only the user themself or an admin may look."""
        if not can_access_user(actor, user_id):
            logger.warning(
                f"Access denied: {actor.username} (ID: {actor.id}) tried to read user {user_id}"
            )
            raise AuthorizationError("You do not have permission to view this user")

        return self._get_or_404(user_id)

    def update_user(self, actor: User, user_id: int, data: UserUpdate) -> User:
        if not can_access_user(actor, user_id):
            logger.warning(
                f"Access denied: {actor.username} (ID: {actor.id}) tried to update user {user_id}"
            )
            raise AuthorizationError("You do not have permission to update this user")

        changes = data.changes()
        # Only administrators can change roles
        if not is_admin(actor):
            changes.pop("role", None)

        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No data to update"
            )

        user = self._get_or_404(user_id)
        self._ensure_unique(user, changes)

        password = changes.pop("password", None)
        if password:
            user.password_hash = get_password_hash(password)
        for field, value in changes.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User updated: ID {user_id} by {actor.username}")
        return user

    def _get_or_404(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
        return user

    def _ensure_unique(self, user: User, changes: dict) -> None:
        conditions = []
        if "username" in changes:
            conditions.append(User.username == changes["username"])
        if "email" in changes:
            conditions.append(User.email == changes["email"])
        if not conditions:
            return

        clash = self.db.query(User).filter(or_(*conditions), User.id != user.id).first()
        if clash:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username or email already registered"
            )
