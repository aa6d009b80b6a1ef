from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from projecthub.api.deps import TOKEN_COOKIE, get_auth_service, get_settings
from projecthub.config import Settings
from projecthub.db import get_db
from projecthub.schemas.auth import LoginRequest, RegisterRequest
from projecthub.schemas.users import UserRead
from projecthub.services.auth import Auth
from projecthub.services.response import serialize, success_response
from projecthub.validators.accounts import login_rules, register_rules
from projecthub.validators.body import validated_body

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest = Depends(validated_body(RegisterRequest, register_rules)),
    db: Session = Depends(get_db),
    service: Auth = Depends(get_auth_service),
):
    user = service.register(db, payload)
    return success_response("User registered successfully", serialize(UserRead, user), status_code=201)


@router.post("/login")
def login(
    payload: LoginRequest = Depends(validated_body(LoginRequest, login_rules)),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    service: Auth = Depends(get_auth_service),
):
    user, token, expires_at = service.login(db, settings, payload)
    response = success_response("Login successful", service.login_payload(serialize(UserRead, user), token, expires_at))
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.jwt_expire_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return response


@router.post("/logout")
def logout():
    response = success_response("Logout successful")
    response.delete_cookie(TOKEN_COOKIE)
    return response
