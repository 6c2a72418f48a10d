"""Task event recorder: appends lifecycle audit records (implements IEventRecorder)."""

from __future__ import annotations

from taskline.application.dtos.task_event import TaskEventResult
from taskline.application.interfaces.repositories import ITaskEventRepository
from taskline.domain.entities.task import TaskEntity
from taskline.domain.enums import TaskEventKind


class TaskEventRecorder:
    """Writes one TaskEvent per accepted lifecycle transition, in the caller's transaction."""

    def __init__(self, event_repo: ITaskEventRepository) -> None:
        self.event_repo = event_repo

    async def record(
        self, org_id: int, task: TaskEntity, actor_user_id: int, kind: TaskEventKind
    ) -> TaskEventResult:
        return await self.event_repo.append(
            org_id=org_id,
            project_id=task.project_id,
            task_id=task.id,
            actor_user_id=actor_user_id,
            kind=kind.value,
        )
