"""Task event repository: append-only lifecycle audit."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.application.dtos.task_event import TaskEventResult
from taskline.infrastructure.persistence.models.task_event import TaskEvent
from taskline.infrastructure.persistence.repositories.base import BaseRepository
from taskline.shared.utils.datetime import ensure_utc


def _event_to_result(e: TaskEvent) -> TaskEventResult:
    return TaskEventResult(
        id=e.id,
        org_id=e.org_id,
        project_id=e.project_id,
        task_id=e.task_id,
        actor_user_id=e.actor_user_id,
        kind=e.kind,
        created_at=ensure_utc(e.created_at),
    )


class TaskEventRepository(BaseRepository[TaskEvent]):
    """Task event repository. Implements ITaskEventRepository.

    There is no update or delete: records are immutable once written.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TaskEvent)

    async def append(
        self,
        org_id: int,
        project_id: int,
        task_id: int,
        actor_user_id: int,
        kind: str,
    ) -> TaskEventResult:
        event = TaskEvent(
            org_id=org_id,
            project_id=project_id,
            task_id=task_id,
            actor_user_id=actor_user_id,
            kind=kind,
        )
        created = await self.create(event)
        return _event_to_result(created)

    async def list_for_task(self, task_id: int) -> list[TaskEventResult]:
        result = await self.db.execute(
            select(TaskEvent)
            .where(TaskEvent.task_id == task_id)
            .order_by(TaskEvent.id.asc())
        )
        return [_event_to_result(e) for e in result.scalars().all()]
