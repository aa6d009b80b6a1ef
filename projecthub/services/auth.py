from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from projecthub.errors import AuthenticationError, ConflictError
from projecthub.logging import get_logger
from projecthub.models.user import User
from projecthub.schemas.auth import LoginRequest, RegisterRequest
from projecthub.services.common import commit_or_conflict
from projecthub.services.security import PasswordHasher, create_access_token

if TYPE_CHECKING:
    from projecthub.config import Settings

logger = get_logger(__name__)

EMAIL_TAKEN = "User with this email already exists"
INVALID_CREDENTIALS = "Invalid credentials"


class Auth:
    def __init__(self, hasher: PasswordHasher):
        self.hasher = hasher

    def register(self, db: Session, payload: RegisterRequest) -> User:
        email = payload.email.lower()
        if db.query(User.id).filter(func.lower(User.email) == email).first():
            raise ConflictError(EMAIL_TAKEN)
        user = User(
            name=payload.name,
            email=email,
            password=self.hasher.hash(payload.password),
            role=payload.role,
        )
        db.add(user)
        commit_or_conflict(db, EMAIL_TAKEN)
        db.refresh(user)
        logger.info("user_registered user_id=%s", user.id)
        return user

    def login(self, db: Session, settings: Settings, payload: LoginRequest) -> tuple[User, str, int]:
        """Check credentials and sign a token; returns ``(user, token, expires_at)``."""
        user = db.query(User).filter(func.lower(User.email) == payload.email.lower()).first()
        if user is None or not self.hasher.verify(payload.password, user.password):
            logger.info("login_failed email=%s", payload.email)
            raise AuthenticationError(INVALID_CREDENTIALS)
        token, expires_at = create_access_token(settings, user)
        logger.info("login_succeeded user_id=%s", user.id)
        return user, token, expires_at

    @staticmethod
    def login_payload(user_data: dict[str, Any], token: str, expires_at: int) -> dict[str, Any]:
        return {"user": user_data, "token": token, "expiresAt": expires_at}
