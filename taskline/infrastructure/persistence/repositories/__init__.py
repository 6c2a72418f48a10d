"""Repositories: persistence behind the application protocols.

Repositories flush but never commit; the caller owns the transaction.
"""

from taskline.infrastructure.persistence.repositories.rule_execution_repo import (
    RuleExecutionRepository,
)
from taskline.infrastructure.persistence.repositories.rule_repo import RuleRepository
from taskline.infrastructure.persistence.repositories.task_dependency_repo import (
    TaskDependencyRepository,
)
from taskline.infrastructure.persistence.repositories.task_event_repo import (
    TaskEventRepository,
)
from taskline.infrastructure.persistence.repositories.task_repo import TaskRepository
from taskline.infrastructure.persistence.repositories.work_session_repo import (
    WorkSessionRepository,
)

__all__ = [
    "RuleExecutionRepository",
    "RuleRepository",
    "TaskDependencyRepository",
    "TaskEventRepository",
    "TaskRepository",
    "WorkSessionRepository",
]
