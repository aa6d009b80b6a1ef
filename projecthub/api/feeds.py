from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from projecthub.api.deps import get_activity_service, get_notifications_service, require_auth
from projecthub.db import get_db
from projecthub.schemas.feeds import ActivityLogCreate, ActivityLogRead, NotificationCreate, NotificationRead
from projecthub.services.activity import ActivityLogs
from projecthub.services.common import coerce_uuid
from projecthub.services.notifications import Notifications
from projecthub.services.response import PageParams, page_params, paginated_response, serialize, success_response
from projecthub.services.security import Identity
from projecthub.validators.body import validated_body
from projecthub.validators.feeds import activity_create_rules, notification_create_rules

activities_router = APIRouter(prefix="/activities", tags=["activities"])
notifications_router = APIRouter(prefix="/notifications", tags=["notifications"])


def _parse_flag(raw: str | None) -> bool | None:
    if raw is None:
        return None
    lowered = raw.strip().lower()
    if lowered in {"true", "1"}:
        return True
    if lowered in {"false", "0"}:
        return False
    return None


@activities_router.get("/all")
def list_activities(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    user_id: str | None = Query(default=None),
    entity_type: str | None = Query(default=None),
    db: Session = Depends(get_db),
    service: ActivityLogs = Depends(get_activity_service),
):
    items, total = service.list(
        db,
        search=params.search,
        user_id=coerce_uuid(user_id),
        entity_type=entity_type,
        limit=params.limit,
        offset=params.offset,
    )
    return paginated_response(
        "Activity logs retrieved successfully", [serialize(ActivityLogRead, a) for a in items], params, total
    )


@activities_router.get("/{activity_id}")
def get_activity(
    activity_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: ActivityLogs = Depends(get_activity_service),
):
    entry = service.get(db, activity_id)
    return success_response("Activity log retrieved successfully", serialize(ActivityLogRead, entry))


@activities_router.post("/create", status_code=201)
def create_activity(
    _: Identity = Depends(require_auth),
    payload: ActivityLogCreate = Depends(validated_body(ActivityLogCreate, activity_create_rules)),
    db: Session = Depends(get_db),
    service: ActivityLogs = Depends(get_activity_service),
):
    entry = service.create(db, payload)
    return success_response("Activity log created successfully", serialize(ActivityLogRead, entry), status_code=201)


@activities_router.delete("/delete/{activity_id}")
def delete_activity(
    activity_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: ActivityLogs = Depends(get_activity_service),
):
    service.delete(db, activity_id)
    return success_response("Activity log deleted successfully")


@notifications_router.get("/all")
def list_notifications(
    _: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    service: Notifications = Depends(get_notifications_service),
):
    items, total = service.list(db, search=params.search, limit=params.limit, offset=params.offset)
    return paginated_response(
        "Notifications retrieved successfully", [serialize(NotificationRead, n) for n in items], params, total
    )


@notifications_router.get("/me")
def list_my_notifications(
    identity: Identity = Depends(require_auth),
    params: PageParams = Depends(page_params),
    is_read: str | None = Query(default=None),
    db: Session = Depends(get_db),
    service: Notifications = Depends(get_notifications_service),
):
    items, total = service.list(
        db,
        search=params.search,
        user_id=identity.id,
        is_read=_parse_flag(is_read),
        limit=params.limit,
        offset=params.offset,
    )
    return paginated_response(
        "Notifications retrieved successfully", [serialize(NotificationRead, n) for n in items], params, total
    )


@notifications_router.get("/{notification_id}")
def get_notification(
    notification_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Notifications = Depends(get_notifications_service),
):
    notification = service.get(db, notification_id)
    return success_response("Notification retrieved successfully", serialize(NotificationRead, notification))


@notifications_router.post("/create", status_code=201)
def create_notification(
    _: Identity = Depends(require_auth),
    payload: NotificationCreate = Depends(validated_body(NotificationCreate, notification_create_rules)),
    db: Session = Depends(get_db),
    service: Notifications = Depends(get_notifications_service),
):
    notification = service.create(db, payload)
    return success_response(
        "Notification created successfully", serialize(NotificationRead, notification), status_code=201
    )


@notifications_router.patch("/{notification_id}/read")
def mark_notification_read(
    notification_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Notifications = Depends(get_notifications_service),
):
    notification = service.mark_read(db, notification_id)
    return success_response("Notification marked as read", serialize(NotificationRead, notification))


@notifications_router.delete("/delete/{notification_id}")
def delete_notification(
    notification_id: str,
    _: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    service: Notifications = Depends(get_notifications_service),
):
    service.delete(db, notification_id)
    return success_response("Notification deleted successfully")
