"""Task dependencies: a task is blocked while any task it depends on is not completed."""

from __future__ import annotations

from typing import TYPE_CHECKING

from taskline.application.dtos.task import TaskDependencyResult
from taskline.application.interfaces.repositories import (
    ITaskDependencyRepository,
    ITaskRepository,
)
from taskline.application.use_cases.tasks.unit_of_work import unit_of_work
from taskline.domain.exceptions import (
    InvalidReferenceException,
    NotFoundOrConflictException,
    ValidationException,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class TaskDependencyService:
    """Adds and lists dependencies between tasks of the same project."""

    def __init__(
        self,
        db: AsyncSession,
        task_repo: ITaskRepository,
        dependency_repo: ITaskDependencyRepository,
    ) -> None:
        self.db = db
        self.task_repo = task_repo
        self.dependency_repo = dependency_repo

    async def add_dependency(
        self, task_id: int, depends_on_task_id: int, user_id: int
    ) -> TaskDependencyResult:
        if task_id == depends_on_task_id:
            raise ValidationException(
                "A task cannot depend on itself", field="depends_on_task_id"
            )
        async with unit_of_work(self.db, "add_dependency"):
            task = await self.task_repo.get(task_id)
            if task is None:
                raise NotFoundOrConflictException(task_id)
            other = await self.task_repo.get(depends_on_task_id)
            if other is None or other.project_id != task.project_id:
                raise InvalidReferenceException("depends_on_task_id", depends_on_task_id)
            return await self.dependency_repo.add(task_id, depends_on_task_id, user_id)

    async def list_dependencies(self, task_id: int) -> list[TaskDependencyResult]:
        if await self.task_repo.get(task_id) is None:
            raise NotFoundOrConflictException(task_id)
        return await self.dependency_repo.list_for_task(task_id)
