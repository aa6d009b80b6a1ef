from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from projecthub.api.deps import get_comments_service, get_tasks_service, require_auth
from projecthub.db import get_db
from projecthub.schemas.projects import CommentCreate, CommentRead, CommentUpdate, TaskCreate, TaskRead, TaskUpdate
from projecthub.services.comments import Comments
from projecthub.services.common import coerce_uuid
from projecthub.services.response import PageParams, page_params, paginated_response, serialize, success_response
from projecthub.services.security import Identity
from projecthub.services.tasks import Tasks
from projecthub.validators.body import validated_body
from projecthub.validators.work import (
    comment_create_rules,
    comment_update_rules,
    task_create_rules,
    task_update_rules,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])
comments_router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/all")
def list_tasks(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    status: str | None = Query(default=None),
    priority: str | None = Query(default=None),
    project_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    service: Tasks = Depends(get_tasks_service),
):
    items, total = service.list(
        db,
        search=params.search,
        status=status,
        priority=priority,
        project_id=coerce_uuid(project_id),
        limit=params.limit,
        offset=params.offset,
    )
    return paginated_response("Tasks retrieved successfully", [serialize(TaskRead, t) for t in items], params, total)


@router.get("/{task_id}")
def get_task(
    task_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Tasks = Depends(get_tasks_service),
):
    return success_response("Task retrieved successfully", serialize(TaskRead, service.get(db, task_id)))


@router.post("/create", status_code=201)
def create_task(
    identity: Identity = Depends(require_auth),
    payload: TaskCreate = Depends(validated_body(TaskCreate, task_create_rules)),
    db: Session = Depends(get_db),
    service: Tasks = Depends(get_tasks_service),
):
    task = service.create(db, payload, identity.id)
    return success_response("Task created successfully", serialize(TaskRead, task), status_code=201)


@router.put("/update/{task_id}")
def update_task(
    task_id: str,
    identity: Identity = Depends(require_auth),
    payload: TaskUpdate = Depends(validated_body(TaskUpdate, task_update_rules)),
    db: Session = Depends(get_db),
    service: Tasks = Depends(get_tasks_service),
):
    task = service.update(db, task_id, payload, identity.id)
    return success_response("Task updated successfully", serialize(TaskRead, task))


@router.delete("/delete/{task_id}")
def delete_task(
    task_id: str,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Tasks = Depends(get_tasks_service),
):
    service.delete(db, task_id, identity.id)
    return success_response("Task deleted successfully")


# ── Comments ─────────────────────────────────────────────────────


@comments_router.get("/all")
def list_comments(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    task_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
    service: Comments = Depends(get_comments_service),
):
    items, total = service.list(
        db,
        search=params.search,
        task_id=coerce_uuid(task_id),
        limit=params.limit,
        offset=params.offset,
    )
    return paginated_response("Comments retrieved successfully", [serialize(CommentRead, c) for c in items], params, total)


@comments_router.get("/{comment_id}")
def get_comment(
    comment_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Comments = Depends(get_comments_service),
):
    return success_response("Comment retrieved successfully", serialize(CommentRead, service.get(db, comment_id)))


@comments_router.post("/create", status_code=201)
def create_comment(
    _: Identity = Depends(require_auth),
    payload: CommentCreate = Depends(validated_body(CommentCreate, comment_create_rules)),
    db: Session = Depends(get_db),
    service: Comments = Depends(get_comments_service),
):
    comment = service.create(db, payload)
    return success_response("Comment added successfully", serialize(CommentRead, comment), status_code=201)


@comments_router.put("/update/{comment_id}")
def update_comment(
    comment_id: str,
    _: Identity = Depends(require_auth),
    payload: CommentUpdate = Depends(validated_body(CommentUpdate, comment_update_rules)),
    db: Session = Depends(get_db),
    service: Comments = Depends(get_comments_service),
):
    comment = service.update(db, comment_id, payload)
    return success_response("Comment updated successfully", serialize(CommentRead, comment))


@comments_router.delete("/delete/{comment_id}")
def delete_comment(
    comment_id: str,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Comments = Depends(get_comments_service),
):
    service.delete(db, comment_id, identity.id)
    return success_response("Comment deleted successfully")
