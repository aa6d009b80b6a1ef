from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from projecthub.errors import AuthenticationError, ServerConfigurationError
from projecthub.logging import get_logger
from projecthub.models.user import UserRole

if TYPE_CHECKING:
    from projecthub.config import Settings
    from projecthub.models.user import User

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller attached to the request by the auth dependency."""

    id: uuid.UUID
    role: UserRole | None = None


class PasswordHasher:
    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError):
            return False


def _require_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        logger.error("jwt_secret_missing")
        raise ServerConfigurationError()
    return settings.jwt_secret


def create_access_token(settings: Settings, user: User, now: datetime | None = None) -> tuple[str, int]:
    """Sign a token for ``user``; returns the token and its ``exp`` timestamp."""
    secret = _require_secret(settings)
    issued = now or datetime.now(UTC)
    expires_at = issued + timedelta(hours=settings.jwt_expire_hours)
    claims: dict[str, Any] = {
        "id": str(user.id),
        "role": user.role.value if user.role else None,
        "iat": int(issued.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(claims, secret, algorithm=settings.jwt_algorithm)
    return token, claims["exp"]


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    secret = _require_secret(settings)
    try:
        return jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        logger.info("token_rejected reason=expired")
        raise AuthenticationError("Invalid or expired token") from None
    except JWTError as exc:
        logger.info("token_rejected reason=%s", exc)
        raise AuthenticationError("Invalid or expired token") from None


def identity_from_claims(claims: dict[str, Any]) -> Identity:
    try:
        user_id = uuid.UUID(str(claims.get("id")))
    except ValueError:
        raise AuthenticationError("Invalid or expired token") from None
    role_claim = claims.get("role")
    role = None
    if isinstance(role_claim, str):
        try:
            role = UserRole(role_claim.lower())
        except ValueError:
            role = None
    return Identity(id=user_id, role=role)
