"""ORM models. Import all so Base.metadata is complete for create_all and Alembic."""

from taskline.infrastructure.persistence.models.project import Card, Project, TaskType
from taskline.infrastructure.persistence.models.task import Task, TaskDependency
from taskline.infrastructure.persistence.models.task_event import TaskEvent
from taskline.infrastructure.persistence.models.work_session import WorkSession
from taskline.infrastructure.persistence.models.workflow import (
    Rule,
    RuleExecution,
    RuleTemplate,
    TaskTemplate,
    Workflow,
)

__all__ = [
    "Card",
    "Project",
    "Rule",
    "RuleExecution",
    "RuleTemplate",
    "Task",
    "TaskDependency",
    "TaskEvent",
    "TaskTemplate",
    "TaskType",
    "WorkSession",
    "Workflow",
]
