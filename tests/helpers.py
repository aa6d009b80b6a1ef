"""Factories shared by the API and service tests."""

import uuid
from datetime import UTC, datetime, timedelta

from projecthub.config import Settings
from projecthub.container import container
from projecthub.models.project import Project, ProjectStatus
from projecthub.models.task import Task, TaskPriority, TaskStatus
from projecthub.models.team import Team, TeamMember, TeamMemberRole
from projecthub.models.user import User, UserRole
from projecthub.services.security import create_access_token

TEST_SECRET = "test-secret"
DEFAULT_PASSWORD = "Secret123!"


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "test",
        "database_url": "sqlite://",
        "auto_create_schema": False,
        "jwt_secret": TEST_SECRET,
        "bcrypt_rounds": 4,
        "rate_limit_enabled": True,
        "rate_limit_redis_url": None,
        "api_rate_limit": 10_000,
        "login_rate_limit": 10_000,
        "register_rate_limit": 10_000,
        "otel_enabled": False,
        "cors_origins": ("*",),
    }
    values.update(overrides)
    return Settings(**values)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:12]}@example.com"


def make_user(db, *, name="Test User", role=UserRole.member, email=None, password=DEFAULT_PASSWORD) -> User:
    user = User(
        name=name,
        email=email or _unique_email(),
        password=container.password_hasher().hash(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_team(db, creator: User, *, name=None, members=()) -> Team:
    team = Team(name=name or f"Team {uuid.uuid4().hex[:8]}", created_by=creator.id)
    db.add(team)
    db.flush()
    for user in members:
        db.add(TeamMember(team_id=team.id, user_id=user.id, role=TeamMemberRole.member))
    db.commit()
    db.refresh(team)
    return team


def make_project(db, team: Team, *, name="Launch", status=ProjectStatus.planning) -> Project:
    project = Project(
        team_id=team.id,
        name=name,
        status=status,
        deadline=datetime.now(UTC) + timedelta(days=30),
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def make_task(db, project: Project, assignee: User, *, title="Write docs", status=TaskStatus.todo) -> Task:
    task = Task(
        project_id=project.id,
        assign_to=assignee.id,
        title=title,
        priority=TaskPriority.medium,
        status=status,
        due_date=datetime.now(UTC) + timedelta(days=7),
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def bearer(settings: Settings, user) -> dict[str, str]:
    token, _ = create_access_token(settings, user)
    return {"Authorization": f"Bearer {token}"}
