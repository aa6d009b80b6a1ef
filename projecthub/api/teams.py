from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from projecthub.api.deps import get_members_service, get_teams_service, require_auth, route_guard
from projecthub.db import get_db
from projecthub.schemas.teams import (
    TeamCreate,
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberUpdate,
    TeamRead,
    TeamUpdate,
)
from projecthub.services.common import coerce_uuid
from projecthub.services.members import Members
from projecthub.services.response import PageParams, page_params, paginated_response, serialize, success_response
from projecthub.services.security import Identity
from projecthub.services.teams import Teams
from projecthub.validators.body import validated_body
from projecthub.validators.teams import (
    member_create_rules,
    member_update_rules,
    team_create_rules,
    team_update_rules,
)

router = APIRouter(prefix="/teams", tags=["teams"])
members_router = APIRouter(prefix="/members", tags=["members"])


@router.get("/all")
def list_teams(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    service: Teams = Depends(get_teams_service),
):
    items, total = service.list(db, search=params.search, limit=params.limit, offset=params.offset)
    return paginated_response("Get All Teams successfully", [serialize(TeamRead, t) for t in items], params, total)


@router.get("/{team_id}")
def get_team(
    team_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Teams = Depends(get_teams_service),
):
    return success_response("Get Team by ID successfully", serialize(TeamRead, service.get(db, team_id)))


@router.post("/create", status_code=201)
def create_team(
    identity: Identity = Depends(require_auth),
    payload: TeamCreate = Depends(validated_body(TeamCreate, team_create_rules)),
    db: Session = Depends(get_db),
    service: Teams = Depends(get_teams_service),
):
    team = service.create(db, payload, identity.id)
    return success_response("Team created successfully", serialize(TeamRead, team), status_code=201)


@router.put("/update/{team_id}")
def update_team(
    team_id: str,
    _: Identity = Depends(require_auth),
    payload: TeamUpdate = Depends(validated_body(TeamUpdate, team_update_rules)),
    db: Session = Depends(get_db),
    service: Teams = Depends(get_teams_service),
):
    return success_response("Team updated successfully", serialize(TeamRead, service.update(db, team_id, payload)))


@router.delete("/delete/{team_id}")
def delete_team(
    team_id: str,
    _: Identity = Depends(route_guard("teams.delete")),
    db: Session = Depends(get_db),
    service: Teams = Depends(get_teams_service),
):
    service.delete(db, team_id)
    return success_response("Team deleted successfully")


# ── Member management ────────────────────────────────────────────


@members_router.get("/all")
def list_members(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    team_id: str | None = None,
    db: Session = Depends(get_db),
    service: Members = Depends(get_members_service),
):
    items, total = service.list(
        db,
        search=params.search,
        team_id=coerce_uuid(team_id),
        limit=params.limit,
        offset=params.offset,
    )
    return paginated_response(
        "Members retrieved successfully", [serialize(TeamMemberRead, m) for m in items], params, total
    )


@members_router.get("/{member_id}")
def get_member(
    member_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Members = Depends(get_members_service),
):
    return success_response("Member retrieved successfully", serialize(TeamMemberRead, service.get(db, member_id)))


@members_router.post("/create", status_code=201)
def add_member(
    identity: Identity = Depends(require_auth),
    payload: TeamMemberCreate = Depends(validated_body(TeamMemberCreate, member_create_rules)),
    db: Session = Depends(get_db),
    service: Members = Depends(get_members_service),
):
    member = service.create(db, payload, identity.id)
    return success_response("Member added to team successfully", serialize(TeamMemberRead, member), status_code=201)


@members_router.put("/update/{member_id}")
def update_member(
    member_id: str,
    identity: Identity = Depends(require_auth),
    payload: TeamMemberUpdate = Depends(validated_body(TeamMemberUpdate, member_update_rules)),
    db: Session = Depends(get_db),
    service: Members = Depends(get_members_service),
):
    member = service.update(db, member_id, payload, identity.id)
    return success_response("Member updated successfully", serialize(TeamMemberRead, member))


@members_router.delete("/delete/{member_id}")
def remove_member(
    member_id: str,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Members = Depends(get_members_service),
):
    service.delete(db, member_id, identity.id)
    return success_response("Member deleted successfully")
