"""Task dependency repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.application.dtos.task import TaskDependencyResult
from taskline.domain.exceptions import ValidationException
from taskline.infrastructure.persistence.models.task import Task, TaskDependency
from taskline.infrastructure.persistence.repositories.base import BaseRepository


class TaskDependencyRepository(BaseRepository[TaskDependency]):
    """Task dependency repository. Implements ITaskDependencyRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TaskDependency)

    async def add(
        self, task_id: int, depends_on_task_id: int, created_by: int
    ) -> TaskDependencyResult:
        """Insert the edge task_id -> depends_on_task_id.

        Raises ValidationException if the pair already exists.
        """
        edge = TaskDependency(
            task_id=task_id,
            depends_on_task_id=depends_on_task_id,
            created_by=created_by,
        )
        try:
            async with self.db.begin_nested():
                await self.create(edge)
        except IntegrityError as e:
            raise ValidationException(
                f"Task {task_id} already depends on task {depends_on_task_id}",
                field="depends_on_task_id",
            ) from e
        result = await self.db.execute(
            select(Task.id, Task.title, Task.status, Task.is_ongoing, Task.claimed_by).where(
                Task.id == depends_on_task_id
            )
        )
        return _row_to_result(result.one())

    async def list_for_task(self, task_id: int) -> list[TaskDependencyResult]:
        """Return the tasks task_id depends on, most recently added first."""
        stmt = (
            select(Task.id, Task.title, Task.status, Task.is_ongoing, Task.claimed_by)
            .join(TaskDependency, TaskDependency.depends_on_task_id == Task.id)
            .where(TaskDependency.task_id == task_id)
            .order_by(TaskDependency.created_at.desc(), TaskDependency.id.desc())
        )
        result = await self.db.execute(stmt)
        return [_row_to_result(row) for row in result.all()]


def _row_to_result(row) -> TaskDependencyResult:
    status = "ongoing" if row.status == "claimed" and row.is_ongoing else row.status
    return TaskDependencyResult(
        task_id=row.id,
        title=row.title,
        status=status,
        claimed_by=row.claimed_by if row.status == "claimed" else None,
    )
