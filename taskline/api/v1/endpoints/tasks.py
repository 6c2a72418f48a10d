"""Task routes: read, edit, lifecycle transitions, heartbeat, dependencies.

Transitions take {"version": n}. A stale version answers 409; an operation
the current state does not allow answers 422.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from taskline.api.v1.dependencies import (
    get_current_user_id,
    get_dependency_service,
    get_lifecycle_service,
    get_query_service,
)
from taskline.application.dtos.task import TaskUpdate
from taskline.application.use_cases.tasks import (
    TaskDependencyService,
    TaskLifecycleService,
    TaskQueryService,
)
from taskline.core.limiter import limit_writes
from taskline.schemas.task import (
    DependencyCreateRequest,
    HeartbeatResponse,
    TaskDependencyResponse,
    TaskResponse,
    TaskUpdateRequest,
    VersionRequest,
)

router = APIRouter()


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    _user_id: Annotated[int, Depends(get_current_user_id)],
    queries: Annotated[TaskQueryService, Depends(get_query_service)],
):
    return TaskResponse.from_entity(await queries.get_task(task_id))


@router.post("/{task_id}/claim", response_model=TaskResponse)
@limit_writes
async def claim_task(
    request: Request,
    task_id: int,
    body: VersionRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    task = await lifecycle.claim_task(task_id, user_id, body.version)
    return TaskResponse.from_entity(task)


@router.post("/{task_id}/release", response_model=TaskResponse)
@limit_writes
async def release_task(
    request: Request,
    task_id: int,
    body: VersionRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    task = await lifecycle.release_task(task_id, user_id, body.version)
    return TaskResponse.from_entity(task)


@router.post("/{task_id}/complete", response_model=TaskResponse)
@limit_writes
async def complete_task(
    request: Request,
    task_id: int,
    body: VersionRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    """Complete the task; matching 'completed' rules create derived tasks atomically."""
    task = await lifecycle.complete_task(task_id, user_id, body.version)
    return TaskResponse.from_entity(task)


@router.post("/{task_id}/start", response_model=TaskResponse)
@limit_writes
async def start_work(
    request: Request,
    task_id: int,
    body: VersionRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    task = await lifecycle.start_work(task_id, user_id, body.version)
    return TaskResponse.from_entity(task)


@router.post("/{task_id}/pause", response_model=TaskResponse)
@limit_writes
async def pause_work(
    request: Request,
    task_id: int,
    body: VersionRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    task = await lifecycle.pause_work(task_id, user_id, body.version)
    return TaskResponse.from_entity(task)


@router.post("/{task_id}/heartbeat", response_model=HeartbeatResponse)
@limit_writes
async def heartbeat(
    request: Request,
    task_id: int,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    return HeartbeatResponse(touched=await lifecycle.heartbeat(task_id, user_id))


@router.get("/{task_id}/dependencies", response_model=list[TaskDependencyResponse])
async def list_dependencies(
    task_id: int,
    _user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[TaskDependencyService, Depends(get_dependency_service)],
):
    deps = await service.list_dependencies(task_id)
    return [TaskDependencyResponse.from_result(d) for d in deps]


@router.post(
    "/{task_id}/dependencies", response_model=TaskDependencyResponse, status_code=201
)
@limit_writes
async def add_dependency(
    request: Request,
    task_id: int,
    body: DependencyCreateRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    service: Annotated[TaskDependencyService, Depends(get_dependency_service)],
):
    dep = await service.add_dependency(task_id, body.depends_on_task_id, user_id)
    return TaskDependencyResponse.from_result(dep)


@router.patch("/{task_id}", response_model=TaskResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: int,
    body: TaskUpdateRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    lifecycle: Annotated[TaskLifecycleService, Depends(get_lifecycle_service)],
):
    """Edit a task the caller has claimed."""
    task = await lifecycle.update_task(
        task_id,
        user_id,
        body.version,
        TaskUpdate(
            title=body.title,
            description=body.description,
            priority=body.priority,
            type_id=body.type_id,
        ),
    )
    return TaskResponse.from_entity(task)
