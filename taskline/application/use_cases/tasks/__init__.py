"""Task use cases: lifecycle transitions, queries and dependencies."""

from taskline.application.use_cases.tasks.task_dependencies import TaskDependencyService
from taskline.application.use_cases.tasks.task_factory import TaskFactory
from taskline.application.use_cases.tasks.task_lifecycle import TaskLifecycleService
from taskline.application.use_cases.tasks.task_queries import TaskQueryService

__all__ = [
    "TaskDependencyService",
    "TaskFactory",
    "TaskLifecycleService",
    "TaskQueryService",
]
