"""Project-scoped task routes: create, list and release-all."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from taskline.api.v1.dependencies import (
    get_current_user_id,
    get_lifecycle_service,
    get_query_service,
)
from taskline.application.dtos.task import TaskCreate, TaskListFilters
from taskline.application.use_cases.tasks import TaskLifecycleService, TaskQueryService
from taskline.core.limiter import limit_writes
from taskline.schemas.task import TaskCreateRequest, TaskResponse

router = APIRouter()


@router.post("/{project_id}/tasks", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    project_id: int,
    body: TaskCreateRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    """Create an available task (version 1) in the project."""
    task = await lifecycle.create_task(
        TaskCreate(
            project_id=project_id,
            type_id=body.type_id,
            title=body.title,
            priority=body.priority,
            created_by=user_id,
            description=body.description,
            card_id=body.card_id,
        )
    )
    return TaskResponse.from_entity(task)


@router.get("/{project_id}/tasks", response_model=list[TaskResponse])
async def list_tasks(
    project_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    queries: Annotated[TaskQueryService, Depends(get_query_service)],
    status: str | None = Query(None, description="available, claimed, ongoing or completed"),
    type_id: int | None = None,
    capability_id: int | None = None,
    q: str | None = Query(None, max_length=255, description="Title/description search"),
    blocked: bool | None = None,
    mine: bool = Query(False, description="Only tasks claimed by the caller"),
):
    """List the project's tasks, newest first."""
    tasks = await queries.list_tasks(
        project_id,
        user_id,
        TaskListFilters(
            status=status,
            type_id=type_id,
            capability_id=capability_id,
            text_query=q,
            blocked=blocked,
            claimed_by_me=mine,
        ),
    )
    return [TaskResponse.from_entity(t) for t in tasks]


@router.post("/{project_id}/tasks/release-all", response_model=list[TaskResponse])
@limit_writes
async def release_all_tasks(
    request: Request,
    project_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    """Release every task the caller holds in the project."""
    tasks = await lifecycle.release_all(project_id, user_id)
    return [TaskResponse.from_entity(t) for t in tasks]
