from fastapi import APIRouter

from projecthub.api import auth, dashboards, feeds, projects, tasks, teams, users

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(teams.router)
api_router.include_router(teams.members_router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)
api_router.include_router(tasks.comments_router)
api_router.include_router(feeds.activities_router)
api_router.include_router(feeds.notifications_router)
api_router.include_router(dashboards.router)
