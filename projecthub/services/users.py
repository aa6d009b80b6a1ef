from __future__ import annotations

import builtins

from sqlalchemy import func
from sqlalchemy.orm import Session

from projecthub.errors import ConflictError
from projecthub.logging import get_logger
from projecthub.models.task import Task
from projecthub.models.team import Team
from projecthub.models.user import User, UserRole
from projecthub.schemas.users import UserCreate, UserUpdate
from projecthub.services.common import apply_pagination, apply_search, commit_or_conflict, get_or_404
from projecthub.services.security import PasswordHasher

logger = get_logger(__name__)

USER_NOT_FOUND = "User not found"


class Users:
    def __init__(self, hasher: PasswordHasher):
        self.hasher = hasher

    def create(self, db: Session, payload: UserCreate) -> User:
        email = payload.email.lower()
        if db.query(User.id).filter(func.lower(User.email) == email).first():
            raise ConflictError("Email already exists.")
        user = User(
            name=payload.name,
            email=email,
            password=self.hasher.hash(payload.password),
            role=payload.role,
            avatar_url=payload.avatar_url,
        )
        db.add(user)
        commit_or_conflict(db, "Email already exists.")
        db.refresh(user)
        logger.info("user_created user_id=%s role=%s", user.id, user.role.value)
        return user

    @staticmethod
    def get(db: Session, user_id: str) -> User:
        return get_or_404(db, User, user_id, USER_NOT_FOUND)

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        role: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[builtins.list[User], int]:
        query = apply_search(db.query(User), search, (User.name, User.email))
        if role:
            try:
                query = query.filter(User.role == UserRole(role))
            except ValueError:
                return [], 0
        total = query.count()
        items = apply_pagination(query.order_by(User.created_at.desc()), limit, offset).all()
        return items, total

    def update(self, db: Session, user_id: str, payload: UserUpdate) -> User:
        user = get_or_404(db, User, user_id, USER_NOT_FOUND)
        data = payload.model_dump(exclude_unset=True)
        if "email" in data:
            data["email"] = data["email"].lower()
            clash = (
                db.query(User.id)
                .filter(func.lower(User.email) == data["email"], User.id != user.id)
                .first()
            )
            if clash:
                raise ConflictError("Email already in use by another user.")
        if "password" in data:
            data["password"] = self.hasher.hash(data["password"])
        for field, value in data.items():
            setattr(user, field, value)
        commit_or_conflict(db, "Email already in use by another user.")
        db.refresh(user)
        return user

    @staticmethod
    def delete(db: Session, user_id: str) -> None:
        user = get_or_404(db, User, user_id, USER_NOT_FOUND)
        owns_teams = db.query(Team.id).filter(Team.created_by == user.id).first()
        owns_tasks = db.query(Task.id).filter(Task.assign_to == user.id).first()
        if owns_teams or owns_tasks:
            raise ConflictError("User still owns teams or tasks.")
        db.delete(user)
        db.commit()
        logger.info("user_deleted user_id=%s", user.id)

    @staticmethod
    def role_counts(db: Session) -> dict[str, int]:
        counts = {role.value: 0 for role in UserRole}
        rows = db.query(User.role, func.count(User.id)).group_by(User.role).all()
        for role, count in rows:
            counts[role.value] = count
        return counts
