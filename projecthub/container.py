"""Dependency injection container.

Holds the password hasher, the notification dispatcher and one instance of
each entity service. Route handlers reach services through the getters in
``projecthub.api.deps`` so tests can override any provider:

    with container.projects_service.override(FakeProjects()):
        client.post("/projects/create", json=...)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dependency_injector import containers, providers  # type: ignore[import-not-found]

from projecthub.services.activity import ActivityLogs
from projecthub.services.auth import Auth
from projecthub.services.comments import Comments
from projecthub.services.dashboards import Dashboards
from projecthub.services.fanout import NotificationFanout
from projecthub.services.members import Members
from projecthub.services.notifications import Notifications
from projecthub.services.projects import Projects
from projecthub.services.security import PasswordHasher
from projecthub.services.tasks import Tasks
from projecthub.services.teams import Teams
from projecthub.services.users import Users

if TYPE_CHECKING:
    from projecthub.config import Settings


class Container(containers.DeclarativeContainer):
    config = providers.Configuration(default={"bcrypt_rounds": 10})

    password_hasher = providers.Singleton(PasswordHasher, rounds=config.bcrypt_rounds)
    notification_fanout = providers.Singleton(NotificationFanout)

    auth_service = providers.Singleton(Auth, hasher=password_hasher)
    users_service = providers.Singleton(Users, hasher=password_hasher)
    teams_service = providers.Singleton(Teams, notifier=notification_fanout)
    members_service = providers.Singleton(Members, notifier=notification_fanout)
    projects_service = providers.Singleton(Projects, notifier=notification_fanout)
    tasks_service = providers.Singleton(Tasks, notifier=notification_fanout)
    comments_service = providers.Singleton(Comments, notifier=notification_fanout)
    activity_service = providers.Singleton(ActivityLogs)
    notifications_service = providers.Singleton(Notifications)
    dashboards_service = providers.Singleton(Dashboards)


# Global container instance
container = Container()


def configure_container(settings: Settings) -> Container:
    """Apply runtime settings and drop any services built with the old ones."""
    container.config.from_dict({"bcrypt_rounds": settings.bcrypt_rounds})
    container.reset_singletons()
    return container
