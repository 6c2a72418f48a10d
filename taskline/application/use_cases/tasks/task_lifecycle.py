"""Task lifecycle engine: create, claim, release, complete, start/pause work, edit, release-all.

Every operation runs as one transaction: read the task, let the entity decide
the next status, write it with a version-guarded UPDATE, append the audit
record, fire automation. Closing work sessions is the only best-effort step.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from taskline.application.dtos.task import TaskCreate, TaskUpdate
from taskline.application.interfaces.repositories import ITaskRepository
from taskline.application.interfaces.services import (
    IEventRecorder,
    IRuleExecutor,
    ITaskCreator,
    IWorkSessionTracker,
)
from taskline.application.use_cases.tasks.unit_of_work import unit_of_work
from taskline.domain.entities.task import TaskEntity, TaskStatus, validate_new_task
from taskline.domain.enums import (
    TaskEventKind,
    TaskOperation,
    TriggerEvent,
    WorkSessionEndReason,
)
from taskline.domain.exceptions import (
    InvalidReferenceException,
    NotFoundOrConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from taskline.shared.telemetry.logging import get_logger
from taskline.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class TaskLifecycleService:
    """State machine for tasks under optimistic concurrency (version compare-and-set)."""

    def __init__(
        self,
        db: AsyncSession,
        task_repo: ITaskRepository,
        task_creator: ITaskCreator,
        event_recorder: IEventRecorder,
        rule_executor: IRuleExecutor,
        session_tracker: IWorkSessionTracker,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.db = db
        self.task_repo = task_repo
        self.task_creator = task_creator
        self.event_recorder = event_recorder
        self.rule_executor = rule_executor
        self.session_tracker = session_tracker
        self._clock = clock

    async def create_task(self, data: TaskCreate) -> TaskEntity:
        """Create an Available task at version 1 and fire 'created' rules.

        Raises InvalidReferenceException if project, type or card do not resolve.
        """
        async with unit_of_work(self.db, TaskOperation.CREATE.value):
            task = await self.task_creator.create(data)
            org_id = await self._org_id(task)
            await self.rule_executor.execute(
                org_id, task, data.created_by, TriggerEvent.CREATED
            )
        logger.info(
            "Task %s created in project %s by user %s",
            task.id,
            task.project_id,
            data.created_by,
        )
        return task

    async def claim_task(self, task_id: int, user_id: int, version: int) -> TaskEntity:
        """Available -> Claimed(taken)."""
        async with unit_of_work(self.db, TaskOperation.CLAIM.value):
            org_id, updated = await self._transition(
                task_id,
                version,
                TaskOperation.CLAIM,
                lambda t: t.claim(user_id, self._clock()),
            )
            await self.event_recorder.record(
                org_id, updated, user_id, TaskEventKind.CLAIMED
            )
            await self.rule_executor.execute(
                org_id, updated, user_id, TriggerEvent.CLAIMED
            )
        return updated

    async def release_task(self, task_id: int, user_id: int, version: int) -> TaskEntity:
        """Claimed -> Available; closes the releaser's open work session (best effort)."""
        async with unit_of_work(self.db, TaskOperation.RELEASE.value):
            org_id, updated = await self._transition(
                task_id, version, TaskOperation.RELEASE, lambda t: t.release(user_id)
            )
            await self.event_recorder.record(
                org_id, updated, user_id, TaskEventKind.RELEASED
            )
            await self.rule_executor.execute(
                org_id, updated, user_id, TriggerEvent.RELEASED
            )
            await self.session_tracker.close_best_effort(
                user_id, task_id, WorkSessionEndReason.RELEASED
            )
        return updated

    async def complete_task(self, task_id: int, user_id: int, version: int) -> TaskEntity:
        """Claimed -> Completed; fires 'completed' rules in the same transaction.

        Any automation failure (e.g. a template pointing at a missing type)
        rolls back the completion too.
        """
        async with unit_of_work(self.db, TaskOperation.COMPLETE.value):
            org_id, updated = await self._transition(
                task_id,
                version,
                TaskOperation.COMPLETE,
                lambda t: t.complete(user_id, self._clock()),
            )
            await self.event_recorder.record(
                org_id, updated, user_id, TaskEventKind.COMPLETED
            )
            created = await self.rule_executor.execute(
                org_id, updated, user_id, TriggerEvent.COMPLETED
            )
            await self.session_tracker.close_best_effort(
                user_id, task_id, WorkSessionEndReason.COMPLETED
            )
        if created:
            logger.info("Completion of task %s derived tasks %s", task_id, created)
        return updated

    async def start_work(self, task_id: int, user_id: int, version: int) -> TaskEntity:
        """Claimed(taken) -> Claimed(ongoing); opens a work session."""
        async with unit_of_work(self.db, TaskOperation.START_WORK.value):
            org_id, updated = await self._transition(
                task_id, version, TaskOperation.START_WORK, lambda t: t.start_work(user_id)
            )
            await self.session_tracker.open(user_id, task_id)
            await self.event_recorder.record(
                org_id, updated, user_id, TaskEventKind.WORK_STARTED
            )
        return updated

    async def pause_work(self, task_id: int, user_id: int, version: int) -> TaskEntity:
        """Claimed(ongoing) -> Claimed(taken); closes the work session (best effort)."""
        async with unit_of_work(self.db, TaskOperation.PAUSE_WORK.value):
            org_id, updated = await self._transition(
                task_id, version, TaskOperation.PAUSE_WORK, lambda t: t.pause_work(user_id)
            )
            await self.event_recorder.record(
                org_id, updated, user_id, TaskEventKind.WORK_PAUSED
            )
            await self.session_tracker.close_best_effort(
                user_id, task_id, WorkSessionEndReason.PAUSED
            )
        return updated

    async def update_task(
        self, task_id: int, user_id: int, version: int, changes: TaskUpdate
    ) -> TaskEntity:
        """Edit a claimed task's title, description, priority or type.

        Only the claimant may edit; the status is untouched and the version
        goes up by one.
        """
        if changes.is_empty():
            raise ValidationException("No fields to update")
        async with unit_of_work(self.db, TaskOperation.UPDATE.value):
            task, _ = await self._read_checked(
                task_id, version, lambda t: t.edit(user_id)
            )
            validate_new_task(
                changes.title if changes.title is not None else task.title,
                changes.priority if changes.priority is not None else task.priority,
            )
            if changes.type_id is not None and not await self.task_repo.type_in_project(
                changes.type_id, task.project_id
            ):
                raise InvalidReferenceException("type_id", changes.type_id)
            updated = await self.task_repo.compare_and_set_details(
                task_id, version, changes
            )
            if updated is None:
                raise NotFoundOrConflictException(task_id, version)
            org_id = await self._org_id(updated)
            await self.event_recorder.record(
                org_id, updated, user_id, TaskEventKind.UPDATED
            )
        logger.info(
            "Task %s updated by user %s (version %s -> %s)",
            task_id,
            user_id,
            task.version,
            updated.version,
        )
        return updated

    async def release_all(
        self, project_id: int, user_id: int, *, actor_user_id: int | None = None
    ) -> list[TaskEntity]:
        """Release every task user_id holds in the project.

        Each task goes through the same version-guarded write as release_task,
        gets its own task_released record and fires 'released' rules. Open
        work sessions are closed with reason 'reassigned'. actor_user_id is
        who asked (defaults to the claimant).
        """
        actor = user_id if actor_user_id is None else actor_user_id
        released: list[TaskEntity] = []
        async with unit_of_work(self.db, TaskOperation.RELEASE_ALL.value):
            org_id = await self.task_repo.get_project_org_id(project_id)
            if org_id is None:
                raise ResourceNotFoundException("project", project_id)
            for task in await self.task_repo.list_claimed_by(project_id, user_id):
                updated = await self.task_repo.compare_and_set_status(
                    task.id, task.version, task.release(user_id)
                )
                if updated is None:
                    raise NotFoundOrConflictException(task.id, task.version)
                await self.event_recorder.record(
                    org_id, updated, actor, TaskEventKind.RELEASED
                )
                await self.rule_executor.execute(
                    org_id, updated, actor, TriggerEvent.RELEASED
                )
                await self.session_tracker.close_best_effort(
                    user_id, task.id, WorkSessionEndReason.REASSIGNED
                )
                released.append(updated)
        logger.info(
            "Released %d task(s) of user %s in project %s",
            len(released),
            user_id,
            project_id,
        )
        return released

    async def heartbeat(self, task_id: int, user_id: int) -> bool:
        """Refresh the open work session's heartbeat. False if none is open."""
        async with unit_of_work(self.db, "heartbeat"):
            return await self.session_tracker.heartbeat(user_id, task_id)

    async def _transition(
        self,
        task_id: int,
        version: int,
        operation: TaskOperation,
        decide: Callable[[TaskEntity], TaskStatus],
    ) -> tuple[int, TaskEntity]:
        """Validate and apply one transition; return (org_id, updated task)."""
        task, next_status = await self._read_checked(task_id, version, decide)
        updated = await self.task_repo.compare_and_set_status(
            task_id, version, next_status
        )
        if updated is None:
            raise NotFoundOrConflictException(task_id, version)
        logger.info(
            "Task %s %s: %s -> %s (version %s -> %s)",
            task_id,
            operation.value,
            task.status.name,
            updated.status.name,
            task.version,
            updated.version,
        )
        return await self._org_id(updated), updated

    async def _read_checked(
        self,
        task_id: int,
        version: int,
        decide: Callable[[TaskEntity], TaskStatus],
    ) -> tuple[TaskEntity, TaskStatus]:
        """Read the task and let the entity decide before checking the version.

        The state check runs first, so an operation that is invalid for the
        current state reports InvalidTransitionException even when the
        presented version is also stale.
        """
        task = await self.task_repo.get(task_id)
        if task is None:
            raise NotFoundOrConflictException(task_id, version)
        next_status = decide(task)
        if version != task.version:
            raise NotFoundOrConflictException(task_id, version)
        return task, next_status

    async def _org_id(self, task: TaskEntity) -> int:
        org_id = await self.task_repo.get_project_org_id(task.project_id)
        if org_id is None:
            raise InvalidReferenceException("project_id", task.project_id)
        return org_id
