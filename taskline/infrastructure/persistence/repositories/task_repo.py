"""Task repository: reads, inserts and the version-guarded status write."""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, exists, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from taskline.application.dtos.task import TaskCreate, TaskListFilters, TaskUpdate
from taskline.domain.entities.task import (
    TaskEntity,
    TaskStatus,
    status_from_columns,
    status_to_columns,
)
from taskline.domain.exceptions import InvalidReferenceException, ValidationException
from taskline.infrastructure.persistence.models.project import Card, Project, TaskType
from taskline.infrastructure.persistence.models.task import Task, TaskDependency
from taskline.infrastructure.persistence.repositories.base import BaseRepository
from taskline.shared.utils.datetime import ensure_utc, utc_now


def _task_to_entity(t: Task) -> TaskEntity:
    """Map Task ORM to TaskEntity."""
    return TaskEntity(
        id=t.id,
        project_id=t.project_id,
        type_id=t.type_id,
        title=t.title,
        description=t.description,
        priority=t.priority,
        status=status_from_columns(
            t.status,
            t.is_ongoing,
            t.claimed_by,
            ensure_utc(t.claimed_at),
            ensure_utc(t.completed_at),
        ),
        version=t.version,
        card_id=t.card_id,
        created_by=t.created_by,
        created_at=ensure_utc(t.created_at),
        created_from_rule_id=t.created_from_rule_id,
    )


def blocked_clause():
    """SQL predicate: the task has at least one dependency not yet completed."""
    dep_task = aliased(Task)
    return exists(
        select(TaskDependency.id)
        .join(dep_task, dep_task.id == TaskDependency.depends_on_task_id)
        .where(
            TaskDependency.task_id == Task.id,
            dep_task.status != "completed",
        )
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def get(self, task_id: int) -> TaskEntity | None:
        """Return the task as currently stored in this transaction."""
        task = await self.get_by_id(task_id, fresh=True)
        return _task_to_entity(task) if task else None

    async def create(self, data: TaskCreate) -> TaskEntity:  # type: ignore[override]
        """Insert an Available task at version 1.

        Raises InvalidReferenceException when a foreign key does not resolve.
        The insert runs in a savepoint so the failure leaves the outer
        transaction usable.
        """
        task = Task(
            project_id=data.project_id,
            type_id=data.type_id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            status="available",
            is_ongoing=False,
            version=1,
            card_id=data.card_id,
            created_by=data.created_by,
            created_from_rule_id=data.created_from_rule_id,
        )
        try:
            async with self.db.begin_nested():
                created = await super().create(task)
        except IntegrityError as e:
            field = _guess_reference_field(e)
            raise InvalidReferenceException(field, getattr(data, field)) from e
        return _task_to_entity(created)

    async def compare_and_set_status(
        self, task_id: int, expected_version: int, status: TaskStatus
    ) -> TaskEntity | None:
        """Write status and bump version only if the row is still at expected_version.

        Returns the updated task; None if another request won the race (or the
        task is gone).
        """
        return await self._compare_and_set(
            task_id, expected_version, status_to_columns(status)
        )

    async def compare_and_set_details(
        self, task_id: int, expected_version: int, changes: TaskUpdate
    ) -> TaskEntity | None:
        """Write the given detail fields under the same version guard as status."""
        values: dict[str, Any] = {}
        if changes.title is not None:
            values["title"] = changes.title
        if changes.description is not None:
            values["description"] = changes.description or None
        if changes.priority is not None:
            values["priority"] = changes.priority
        if changes.type_id is not None:
            values["type_id"] = changes.type_id
        return await self._compare_and_set(task_id, expected_version, values)

    async def list_claimed_by(self, project_id: int, user_id: int) -> list[TaskEntity]:
        """Tasks in the project currently claimed by user_id, ascending id."""
        stmt = (
            select(Task)
            .where(
                Task.project_id == project_id,
                Task.status == "claimed",
                Task.claimed_by == user_id,
            )
            .order_by(Task.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [_task_to_entity(t) for t in result.scalars().all()]

    async def _compare_and_set(
        self, task_id: int, expected_version: int, values: dict[str, Any]
    ) -> TaskEntity | None:
        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.version == expected_version)
            .values(**values, version=Task.version + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            return None
        return await self.get(task_id)

    async def list_for_project(
        self, project_id: int, user_id: int, filters: TaskListFilters
    ) -> list[TaskEntity]:
        """Return the project's tasks matching filters, newest first."""
        stmt = select(Task).where(Task.project_id == project_id)
        if filters.status is not None:
            stmt = stmt.where(*_status_predicates(filters.status))
        if filters.type_id is not None:
            stmt = stmt.where(Task.type_id == filters.type_id)
        if filters.capability_id is not None:
            stmt = stmt.join(TaskType, TaskType.id == Task.type_id).where(
                TaskType.capability_id == filters.capability_id
            )
        if filters.text_query:
            pattern = f"%{filters.text_query.strip()}%"
            stmt = stmt.where(
                or_(Task.title.ilike(pattern), Task.description.ilike(pattern))
            )
        if filters.blocked is not None:
            clause = blocked_clause()
            stmt = stmt.where(clause if filters.blocked else ~clause)
        if filters.claimed_by_me:
            stmt = stmt.where(
                and_(Task.status == "claimed", Task.claimed_by == user_id)
            )
        stmt = stmt.order_by(Task.created_at.desc(), Task.id.desc()).execution_options(
            populate_existing=True
        )
        result = await self.db.execute(stmt)
        return [_task_to_entity(t) for t in result.scalars().all()]

    async def get_project_org_id(self, project_id: int) -> int | None:
        result = await self.db.execute(
            select(Project.org_id).where(Project.id == project_id)
        )
        return result.scalar_one_or_none()

    async def type_in_project(self, type_id: int, project_id: int) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(TaskType)
            .where(TaskType.id == type_id, TaskType.project_id == project_id)
        )
        return (result.scalar() or 0) > 0

    async def card_in_project(self, card_id: int, project_id: int) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(Card)
            .where(Card.id == card_id, Card.project_id == project_id)
        )
        return (result.scalar() or 0) > 0


def _status_predicates(status: str) -> list:
    if status == "ongoing":
        return [Task.status == "claimed", Task.is_ongoing.is_(True)]
    if status in ("available", "claimed", "completed"):
        return [Task.status == status]
    raise ValidationException(f"Unknown status filter: {status}", field="status")


def _guess_reference_field(error: IntegrityError) -> str:
    """Best guess at which reference failed, from the driver message."""
    text = str(error.orig).lower()
    for field in ("card_id", "project_id", "created_from_rule_id"):
        if field in text:
            return field
    return "type_id"
