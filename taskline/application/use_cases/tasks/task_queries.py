"""Task read operations and rule execution history."""

from __future__ import annotations

from taskline.application.dtos.rule import RuleExecutionResult
from taskline.application.dtos.task import TaskListFilters
from taskline.application.interfaces.repositories import (
    IRuleExecutionRepository,
    IRuleRepository,
    ITaskRepository,
)
from taskline.domain.entities.task import STATUS_FILTER_VALUES, TaskEntity
from taskline.domain.exceptions import (
    NotFoundOrConflictException,
    ResourceNotFoundException,
    ValidationException,
)


class TaskQueryService:
    """Reads tasks and rule receipts. Never writes."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        rule_repo: IRuleRepository,
        execution_repo: IRuleExecutionRepository,
    ) -> None:
        self.task_repo = task_repo
        self.rule_repo = rule_repo
        self.execution_repo = execution_repo

    async def get_task(self, task_id: int) -> TaskEntity:
        task = await self.task_repo.get(task_id)
        if task is None:
            raise NotFoundOrConflictException(task_id)
        return task

    async def list_tasks(
        self, project_id: int, user_id: int, filters: TaskListFilters
    ) -> list[TaskEntity]:
        """List a project's tasks, newest first.

        Raises ResourceNotFoundException for an unknown project and
        ValidationException for an unknown status filter.
        """
        if filters.status is not None and filters.status not in STATUS_FILTER_VALUES:
            raise ValidationException(
                f"status must be one of {', '.join(STATUS_FILTER_VALUES)}",
                field="status",
            )
        if await self.task_repo.get_project_org_id(project_id) is None:
            raise ResourceNotFoundException("project", project_id)
        return await self.task_repo.list_for_project(project_id, user_id, filters)

    async def list_rule_executions(
        self, rule_id: int, skip: int = 0, limit: int = 100
    ) -> tuple[list[RuleExecutionResult], int]:
        """Return (page of receipts newest first, total count) for a rule."""
        if await self.rule_repo.get_rule(rule_id) is None:
            raise ResourceNotFoundException("rule", rule_id)
        items = await self.execution_repo.list_for_rule(rule_id, skip=skip, limit=limit)
        total = await self.execution_repo.count_for_rule(rule_id)
        return items, total
