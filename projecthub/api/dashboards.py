from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from projecthub.api.deps import get_dashboards_service, require_auth
from projecthub.db import get_db
from projecthub.services.dashboards import Dashboards
from projecthub.services.response import success_response

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_auth)])


@router.get("/tasks/status")
def task_status_stats(db: Session = Depends(get_db), service: Dashboards = Depends(get_dashboards_service)):
    return success_response("Task status stats retrieved successfully", service.task_status_counts(db))


@router.get("/tasks/priority")
def task_priority_stats(db: Session = Depends(get_db), service: Dashboards = Depends(get_dashboards_service)):
    return success_response("Task priority stats retrieved successfully", service.task_priority_counts(db))


@router.get("/tasks/workload")
def task_workload_stats(db: Session = Depends(get_db), service: Dashboards = Depends(get_dashboards_service)):
    return success_response("Task workload stats retrieved successfully", service.task_workload(db))


@router.get("/projects/progress")
def project_progress_stats(db: Session = Depends(get_db), service: Dashboards = Depends(get_dashboards_service)):
    return success_response("Project progress retrieved successfully", service.project_progress(db))


@router.get("/activities/counts")
def activity_counts(
    range_name: str = Query(default="week", alias="range"),
    db: Session = Depends(get_db),
    service: Dashboards = Depends(get_dashboards_service),
):
    return success_response("Activity counts retrieved successfully", service.activity_counts(db, range_name))


@router.get("/teams/teams")
def tasks_by_team(db: Session = Depends(get_db), service: Dashboards = Depends(get_dashboards_service)):
    return success_response("Tasks by team retrieved successfully", service.tasks_by_team(db))
