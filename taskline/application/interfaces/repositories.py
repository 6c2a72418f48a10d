"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain entities only; no infrastructure imports.
Every repository works inside the caller's session/transaction and never commits.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from taskline.application.dtos.rule import MatchedRule, RuleExecutionResult
    from taskline.application.dtos.task import (
        TaskCreate,
        TaskDependencyResult,
        TaskListFilters,
        TaskUpdate,
    )
    from taskline.application.dtos.task_event import TaskEventResult
    from taskline.application.dtos.work_session import WorkSessionResult
    from taskline.domain.entities.rule import RuleEntity
    from taskline.domain.entities.task import TaskEntity, TaskStatus


class ITaskRepository(Protocol):
    """Protocol for task persistence and reference checks (DIP)."""

    async def get(self, task_id: int) -> TaskEntity | None:
        """Return the task with fresh column values, or None."""

    async def create(self, data: TaskCreate) -> TaskEntity:
        """Insert an Available task at version 1."""

    async def compare_and_set_status(
        self, task_id: int, expected_version: int, status: TaskStatus
    ) -> TaskEntity | None:
        """Write status and bump version iff the row is at expected_version.

        Returns the updated task, or None when zero rows matched.
        """

    async def compare_and_set_details(
        self, task_id: int, expected_version: int, changes: TaskUpdate
    ) -> TaskEntity | None:
        """Write the changed detail fields under the same version guard."""

    async def list_claimed_by(self, project_id: int, user_id: int) -> list[TaskEntity]:
        """Tasks in the project currently claimed by user_id, ascending id."""

    async def list_for_project(
        self, project_id: int, user_id: int, filters: TaskListFilters
    ) -> list[TaskEntity]:
        """Return the project's tasks matching filters, newest first."""

    async def get_project_org_id(self, project_id: int) -> int | None:
        """Return the org owning the project, or None if the project does not exist."""

    async def type_in_project(self, type_id: int, project_id: int) -> bool:
        """Return whether the task type exists and belongs to the project."""

    async def card_in_project(self, card_id: int, project_id: int) -> bool:
        """Return whether the card exists and belongs to the project."""


class ITaskDependencyRepository(Protocol):
    """Protocol for task dependency persistence."""

    async def add(
        self, task_id: int, depends_on_task_id: int, created_by: int
    ) -> TaskDependencyResult:
        """Insert a dependency edge; raise ValidationException if it already exists."""

    async def list_for_task(self, task_id: int) -> list[TaskDependencyResult]:
        """Return the tasks task_id depends on (newest first)."""


class IRuleRepository(Protocol):
    """Protocol for rule lookup (matching)."""

    async def find_matching(
        self, project_id: int, source_type_id: int, trigger_event: str
    ) -> list[MatchedRule]:
        """Active rules of active workflows in project_id for the trigger, ascending rule id."""

    async def get_rule(self, rule_id: int) -> RuleEntity | None:
        """Return the rule (with its workflow's project), or None."""


class IRuleExecutionRepository(Protocol):
    """Protocol for rule execution receipts (idempotency guard)."""

    async def try_record(
        self, rule_id: int, source_task_id: int, user_id: int | None
    ) -> int | None:
        """Insert a receipt; return its id, or None if one already exists."""

    async def set_tasks_created(self, execution_id: int, tasks_created: int) -> None:
        """Store how many tasks the execution produced."""

    async def list_for_rule(
        self, rule_id: int, skip: int = 0, limit: int = 100
    ) -> list[RuleExecutionResult]:
        """Receipts for a rule, newest first."""

    async def count_for_rule(self, rule_id: int) -> int:
        """Number of receipts for a rule."""


class ITaskEventRepository(Protocol):
    """Protocol for the append-only task audit trail."""

    async def append(
        self,
        org_id: int,
        project_id: int,
        task_id: int,
        actor_user_id: int,
        kind: str,
    ) -> TaskEventResult:
        """Append one record."""

    async def list_for_task(self, task_id: int) -> list[TaskEventResult]:
        """Records for a task in insertion order."""


class IWorkSessionRepository(Protocol):
    """Protocol for work session persistence."""

    async def get_open(self, user_id: int, task_id: int) -> WorkSessionResult | None:
        """Return the open session for (user, task), or None."""

    async def open(self, user_id: int, task_id: int) -> WorkSessionResult:
        """Insert a new open session."""

    async def close_open(self, user_id: int, task_id: int, reason: str) -> bool:
        """End the open session for (user, task); False if there was none."""

    async def touch(self, user_id: int, task_id: int) -> bool:
        """Refresh last_heartbeat_at on the open session; False if there was none."""
