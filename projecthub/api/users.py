from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from projecthub.api.deps import get_users_service, require_auth, route_guard
from projecthub.db import get_db
from projecthub.schemas.users import UserCreate, UserRead, UserUpdate
from projecthub.services.response import PageParams, page_params, paginated_response, serialize, success_response
from projecthub.services.security import Identity
from projecthub.services.users import Users
from projecthub.validators.accounts import user_create_rules, user_update_rules
from projecthub.validators.body import validated_body

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/all")
def list_users(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    role: str | None = Query(default=None),
    db: Session = Depends(get_db),
    service: Users = Depends(get_users_service),
):
    items, total = service.list(db, search=params.search, role=role, limit=params.limit, offset=params.offset)
    return paginated_response("Get all users successfully", [serialize(UserRead, u) for u in items], params, total)


@router.get("/roles/count")
def role_counts(
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Users = Depends(get_users_service),
):
    return success_response("Get role counts successfully", service.role_counts(db))


@router.get("/{user_id}")
def get_user(
    user_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Users = Depends(get_users_service),
):
    return success_response("Get user successfully", serialize(UserRead, service.get(db, user_id)))


@router.post("/create", status_code=201)
def create_user(
    _: Identity = Depends(route_guard("users.create")),
    payload: UserCreate = Depends(validated_body(UserCreate, user_create_rules)),
    db: Session = Depends(get_db),
    service: Users = Depends(get_users_service),
):
    user = service.create(db, payload)
    return success_response("User created successfully", serialize(UserRead, user), status_code=201)


@router.put("/update/{user_id}")
def update_user(
    user_id: str,
    _: Identity = Depends(require_auth),
    payload: UserUpdate = Depends(validated_body(UserUpdate, user_update_rules)),
    db: Session = Depends(get_db),
    service: Users = Depends(get_users_service),
):
    return success_response("User updated successfully", serialize(UserRead, service.update(db, user_id, payload)))


@router.delete("/delete/{user_id}")
def delete_user(
    user_id: str,
    _: Identity = Depends(route_guard("users.delete")),
    db: Session = Depends(get_db),
    service: Users = Depends(get_users_service),
):
    service.delete(db, user_id)
    return success_response("User deleted successfully")
