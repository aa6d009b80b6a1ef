"""Read-only aggregates for the dashboard widgets."""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from datetime import UTC, date, datetime, timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from projecthub.errors import BadRequestError
from projecthub.models.activity import ActivityLog
from projecthub.models.project import Project
from projecthub.models.task import OPEN_TASK_STATUSES, Task, TaskPriority, TaskStatus
from projecthub.models.team import Team
from projecthub.models.user import User

ACTIVITY_RANGES = ("day", "week", "month", "year")


def _percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


def _month_start(day: date, months_back: int) -> date:
    index = day.year * 12 + (day.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def activity_periods(range_name: str, today: date) -> tuple[list[str], datetime]:
    """Return the period labels for ``range_name`` and the instant the window opens."""
    if range_name == "day":
        days = 1
    elif range_name == "week":
        days = 7
    elif range_name == "month":
        days = 30
    elif range_name == "year":
        first = _month_start(today, 11)
        labels = [_month_start(today, back).strftime("%Y-%m") for back in range(11, -1, -1)]
        return labels, datetime(first.year, first.month, first.day, tzinfo=UTC)
    else:
        raise BadRequestError("Invalid range parameter")
    start = today - timedelta(days=days - 1)
    labels = [(start + timedelta(days=offset)).isoformat() for offset in range(days)]
    return labels, datetime(start.year, start.month, start.day, tzinfo=UTC)


class Dashboards:
    @staticmethod
    def task_status_counts(db: Session) -> list[dict[str, Any]]:
        counts = dict(db.query(Task.status, func.count(Task.id)).group_by(Task.status).all())
        return [{"status": status.value, "count": counts.get(status, 0)} for status in TaskStatus]

    @staticmethod
    def task_priority_counts(db: Session) -> list[dict[str, Any]]:
        counts = dict(db.query(Task.priority, func.count(Task.id)).group_by(Task.priority).all())
        return [{"priority": priority.value, "count": counts.get(priority, 0)} for priority in TaskPriority]

    @staticmethod
    def task_workload(db: Session) -> list[dict[str, Any]]:
        open_counts = dict(
            db.query(Task.assign_to, func.count(Task.id))
            .filter(Task.status.in_(OPEN_TASK_STATUSES))
            .group_by(Task.assign_to)
            .all()
        )
        users = db.query(User.id, User.name).order_by(User.name).all()
        return [{"user_id": str(user.id), "name": user.name, "workload": open_counts.get(user.id, 0)} for user in users]

    @staticmethod
    def project_progress(db: Session) -> list[dict[str, Any]]:
        projects = db.query(Project).options(selectinload(Project.tasks)).order_by(Project.created_at).all()
        data = []
        for project in projects:
            total = len(project.tasks)
            done = sum(1 for task in project.tasks if task.status == TaskStatus.done)
            data.append(
                {
                    "project_id": str(project.id),
                    "project_name": project.name,
                    "total_tasks": total,
                    "done_tasks": done,
                    "progress": _percent(done, total),
                }
            )
        return data

    @staticmethod
    def activity_counts(db: Session, range_name: str = "week", now: datetime | None = None) -> list[dict[str, Any]]:
        current = _as_utc(now or datetime.now(UTC))
        periods, start = activity_periods(range_name, current.date())
        rows = db.query(ActivityLog.action, ActivityLog.created_at).filter(ActivityLog.created_at >= start).all()

        buckets: dict[str, Counter] = defaultdict(Counter)
        for action, created_at in rows:
            stamp = _as_utc(created_at)
            key = stamp.strftime("%Y-%m") if range_name == "year" else stamp.date().isoformat()
            buckets[key][action] += 1

        data = []
        for period in periods:
            counts = buckets.get(period, Counter())
            data.append({"period": period, "total": sum(counts.values()), "actions": dict(counts)})
        return data

    @staticmethod
    def tasks_by_team(db: Session) -> list[dict[str, Any]]:
        counts = dict(
            db.query(Project.team_id, func.count(Task.id))
            .join(Task, Task.project_id == Project.id)
            .group_by(Project.team_id)
            .all()
        )
        teams = db.query(Team.id, Team.name).order_by(Team.name).all()
        return [
            {"team_id": str(team.id), "team_name": team.name, "task_count": counts.get(team.id, 0)} for team in teams
        ]
