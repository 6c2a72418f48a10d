"""Rule executor: derives tasks from matched rules (implements IRuleExecutor).

Runs inside the transition's transaction. Receipts, derived tasks and their
'created' events commit or roll back together with the triggering change.
"""

from __future__ import annotations

from taskline.application.dtos.task import TaskCreate
from taskline.application.interfaces.repositories import IRuleExecutionRepository
from taskline.application.interfaces.services import (
    IRuleMatcher,
    ITaskCreator,
    ITemplateRenderer,
)
from taskline.domain.entities.rule import TaskTemplateEntity
from taskline.domain.entities.task import TITLE_MAX_LENGTH, TaskEntity
from taskline.domain.enums import TriggerEvent
from taskline.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class RuleExecutor:
    """Fires matched rules once per (rule, source task) and creates their tasks."""

    def __init__(
        self,
        matcher: IRuleMatcher,
        renderer: ITemplateRenderer,
        execution_repo: IRuleExecutionRepository,
        task_creator: ITaskCreator,
    ) -> None:
        self.matcher = matcher
        self.renderer = renderer
        self.execution_repo = execution_repo
        self.task_creator = task_creator

    async def execute(
        self,
        org_id: int,
        source_task: TaskEntity,
        actor_user_id: int,
        trigger_event: TriggerEvent = TriggerEvent.COMPLETED,
    ) -> list[int]:
        """Run every matching rule; return ids of the tasks created.

        A rule whose receipt already exists is skipped entirely. Errors from
        task creation (e.g. InvalidReferenceException for a template whose
        type is gone) propagate and abort the caller's transaction.
        """
        matched = await self.matcher.match(
            source_task.project_id, source_task.type_id, trigger_event
        )
        created_ids: list[int] = []
        for m in matched:
            execution_id = await self.execution_repo.try_record(
                m.rule.id, source_task.id, actor_user_id
            )
            if execution_id is None:
                logger.info(
                    "Rule %s already executed for task %s, skipping",
                    m.rule.id,
                    source_task.id,
                )
                continue
            for template in m.templates:
                task = await self.task_creator.create(
                    self._derive(template, source_task, actor_user_id, m.rule.id)
                )
                created_ids.append(task.id)
            await self.execution_repo.set_tasks_created(execution_id, len(m.templates))
            logger.info(
                "Rule %s fired on task %s (%s): %d task(s) created",
                m.rule.id,
                source_task.id,
                trigger_event.value,
                len(m.templates),
            )
        return created_ids

    def _derive(
        self,
        template: TaskTemplateEntity,
        source_task: TaskEntity,
        actor_user_id: int,
        rule_id: int,
    ) -> TaskCreate:
        title = self.renderer.render(template.name, source_task)[:TITLE_MAX_LENGTH]
        description = (
            self.renderer.render(template.description, source_task)
            if template.description
            else None
        )
        return TaskCreate(
            project_id=source_task.project_id,
            type_id=template.type_id,
            title=title,
            priority=template.priority,
            created_by=actor_user_id,
            description=description,
            card_id=source_task.card_id,
            created_from_rule_id=rule_id,
        )
