from pydantic import BaseModel

from projecthub.models.user import UserRole


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    role: UserRole = UserRole.admin


class LoginRequest(BaseModel):
    email: str
    password: str
