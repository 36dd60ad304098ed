from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from datetime import datetime
import logging

from ..models.user import User
from ..core.security import UserRole, verify_password, get_password_hash, create_user_token
from ..schemas.auth import UserLogin, UserRegister, TokenResponse, UserResponse

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> TokenResponse:
        """Register a new patient and issue a token. Other roles are granted by admins."""
        # Check if username or email already exist
        existing_user = self.db.query(User).filter(
            or_(User.username == user_data.username, User.email == user_data.email)
        ).first()

        if existing_user:
            logger.warning(f"Registration rejected: username or email taken ({user_data.username})")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username or email already registered"
            )

        fields = user_data.model_dump(exclude={"password"})
        new_user = User(
            **fields,
            password_hash=get_password_hash(user_data.password),
            role=UserRole.PATIENT,
            is_active=True
        )

        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)

        logger.info(
            f"New user registered: {new_user.username} "
            f"(ID: {new_user.id}, Role: {new_user.role.value})"
        )
        return self._token_response(new_user)

    def authenticate_user(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate user and return an access token."""
        user = self.db.query(User).filter(
            User.username == login_data.username
        ).first()

        if not user or not verify_password(login_data.password, user.password_hash):
            logger.warning(f"Failed login for username: {login_data.username}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account is deactivated"
            )

        user.last_login = datetime.utcnow()
        self.db.commit()

        logger.info(f"Successful login: {user.username} (ID: {user.id}, Role: {user.role.value})")
        return self._token_response(user)

    def _token_response(self, user: User) -> TokenResponse:
        token = create_user_token(user.id, user.username, user.role)
        return TokenResponse(
            access_token=token.access_token,
            token_type=token.token_type,
            expires_in=token.expires_in,
            user=UserResponse.model_validate(user)
        )
