"""Task creation shared by direct creation and rule automation (implements ITaskCreator)."""

from __future__ import annotations

from taskline.application.dtos.task import TaskCreate
from taskline.application.interfaces.repositories import ITaskRepository
from taskline.application.interfaces.services import IEventRecorder
from taskline.domain.entities.task import TaskEntity, validate_new_task
from taskline.domain.enums import TaskEventKind
from taskline.domain.exceptions import InvalidReferenceException


class TaskFactory:
    """Validates references, inserts an Available task at version 1, records 'task_created'."""

    def __init__(self, task_repo: ITaskRepository, event_recorder: IEventRecorder) -> None:
        self.task_repo = task_repo
        self.event_recorder = event_recorder

    async def create(self, data: TaskCreate) -> TaskEntity:
        validate_new_task(data.title, data.priority)
        org_id = await self.task_repo.get_project_org_id(data.project_id)
        if org_id is None:
            raise InvalidReferenceException("project_id", data.project_id)
        if not await self.task_repo.type_in_project(data.type_id, data.project_id):
            raise InvalidReferenceException("type_id", data.type_id)
        if data.card_id is not None and not await self.task_repo.card_in_project(
            data.card_id, data.project_id
        ):
            raise InvalidReferenceException("card_id", data.card_id)
        task = await self.task_repo.create(data)
        await self.event_recorder.record(
            org_id, task, data.created_by, TaskEventKind.CREATED
        )
        return task
