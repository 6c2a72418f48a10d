"""DTOs for rule matching and execution receipts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from taskline.domain.entities.rule import RuleEntity, TaskTemplateEntity


@dataclass(frozen=True)
class MatchedRule:
    """A rule that applies to a trigger, with its templates in execution order."""

    rule: RuleEntity
    templates: list[TaskTemplateEntity] = field(default_factory=list)


@dataclass(frozen=True)
class RuleExecutionResult:
    """Execution receipt for (rule, source task)."""

    id: int
    rule_id: int
    source_task_id: int
    user_id: int | None
    tasks_created: int
    executed_at: datetime


@dataclass(frozen=True)
class WorkflowResult:
    """Workflow read model."""

    id: int
    org_id: int
    project_id: int
    name: str
    description: str | None
    active: bool
    created_by: int
