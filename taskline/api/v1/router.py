"""API v1 router aggregation."""

from fastapi import APIRouter

from taskline.api.v1.endpoints import health, projects, rules, tasks

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(projects.router, prefix="/projects", tags=["tasks"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(rules.router, prefix="/rules", tags=["rules"])
