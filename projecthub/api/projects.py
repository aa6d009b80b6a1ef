from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from projecthub.api.deps import get_projects_service, require_auth
from projecthub.db import get_db
from projecthub.schemas.projects import ProjectCreate, ProjectRead, ProjectUpdate
from projecthub.services.common import coerce_uuid
from projecthub.services.projects import Projects
from projecthub.services.response import PageParams, page_params, paginated_response, serialize, success_response
from projecthub.services.security import Identity
from projecthub.validators.body import validated_body
from projecthub.validators.work import project_create_rules, project_update_rules

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/all")
def list_projects(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    status: str | None = Query(default=None),
    team_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    service: Projects = Depends(get_projects_service),
):
    items, total = service.list(
        db,
        search=params.search,
        status=status,
        team_id=coerce_uuid(team_id),
        limit=params.limit,
        offset=params.offset,
    )
    return paginated_response("Projects retrieved successfully", [serialize(ProjectRead, p) for p in items], params, total)


@router.get("/{project_id}")
def get_project(
    project_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Projects = Depends(get_projects_service),
):
    return success_response("Project retrieved successfully", serialize(ProjectRead, service.get(db, project_id)))


@router.post("/create", status_code=201)
def create_project(
    identity: Identity = Depends(require_auth),
    payload: ProjectCreate = Depends(validated_body(ProjectCreate, project_create_rules)),
    db: Session = Depends(get_db),
    service: Projects = Depends(get_projects_service),
):
    project = service.create(db, payload, identity.id)
    return success_response("Project created successfully", serialize(ProjectRead, project), status_code=201)


@router.put("/update/{project_id}")
def update_project(
    project_id: str,
    identity: Identity = Depends(require_auth),
    payload: ProjectUpdate = Depends(validated_body(ProjectUpdate, project_update_rules)),
    db: Session = Depends(get_db),
    service: Projects = Depends(get_projects_service),
):
    project = service.update(db, project_id, payload, identity.id)
    return success_response("Project updated successfully", serialize(ProjectRead, project))


@router.delete("/delete/{project_id}")
def delete_project(
    project_id: str,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Projects = Depends(get_projects_service),
):
    service.delete(db, project_id, identity.id)
    return success_response("Project deleted successfully")
