"""Request-scoped dependencies: identity, role gates and service lookup."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from projecthub.container import container
from projecthub.db import get_db
from projecthub.errors import AuthenticationError, AuthorizationError
from projecthub.logging import get_logger
from projecthub.models.user import User, UserRole
from projecthub.services.security import Identity, decode_access_token, identity_from_claims

logger = get_logger(__name__)

TOKEN_COOKIE = "token"

# Roles allowed per gated route; routes not listed only need a valid token.
ROUTE_ROLES: dict[str, tuple[UserRole, ...]] = {
    "users.create": (UserRole.admin,),
    "users.delete": (UserRole.admin,),
    "teams.delete": (UserRole.admin, UserRole.manager),
}


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip() or None
    return None


def require_auth(
    request: Request,
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> Identity:
    token = _extract_bearer_token(authorization) or request.cookies.get(TOKEN_COOKIE)
    if not token:
        logger.info("auth_rejected reason=missing_token path=%s", request.url.path)
        raise AuthenticationError("Access token required")
    claims = decode_access_token(request.app.state.settings, token)
    identity = identity_from_claims(claims)

    user = db.get(User, identity.id)
    if user is None:
        logger.info("auth_rejected reason=unknown_user user_id=%s", identity.id)
        raise AuthenticationError("Invalid or expired token")
    if identity.role is None:
        identity = Identity(id=user.id, role=user.role)

    request.state.identity = identity
    return identity


def require_role(*roles: UserRole) -> Callable[..., Identity]:
    """Gate a route on the caller's role. No roles means nobody gets through."""
    allowed = frozenset(roles)

    def _require_role(request: Request, _auth: Identity = Depends(require_auth)) -> Identity:
        identity: Identity | None = getattr(request.state, "identity", None)
        if identity is None:
            raise AuthenticationError("Authentication required")
        if identity.role is None:
            raise AuthorizationError("Access denied: No role assigned")
        if identity.role not in allowed:
            logger.info(
                "role_rejected user_id=%s role=%s allowed=%s",
                identity.id,
                identity.role.value,
                ",".join(sorted(role.value for role in allowed)),
            )
            raise AuthorizationError("Access denied: Insufficient permissions")
        return identity

    return _require_role


def route_guard(route_name: str) -> Callable[..., Identity]:
    roles = ROUTE_ROLES.get(route_name)
    if roles is None:
        return require_auth
    return require_role(*roles)


# -------------------------------------------------------------------------
# Container-based Dependencies
# -------------------------------------------------------------------------


def get_settings(request: Request):
    return request.app.state.settings


def get_auth_service():
    return container.auth_service()


def get_users_service():
    return container.users_service()


def get_teams_service():
    return container.teams_service()


def get_members_service():
    return container.members_service()


def get_projects_service():
    return container.projects_service()


def get_tasks_service():
    return container.tasks_service()


def get_comments_service():
    return container.comments_service()


def get_activity_service():
    return container.activity_service()


def get_notifications_service():
    return container.notifications_service()


def get_dashboards_service():
    return container.dashboards_service()
