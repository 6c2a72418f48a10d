"""Task use case dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.application.use_cases.tasks import (
    TaskDependencyService,
    TaskFactory,
    TaskLifecycleService,
    TaskQueryService,
)
from taskline.infrastructure.persistence.database import get_db, get_db_transactional
from taskline.infrastructure.persistence.repositories import (
    RuleExecutionRepository,
    RuleRepository,
    TaskDependencyRepository,
    TaskEventRepository,
    TaskRepository,
    WorkSessionRepository,
)
from taskline.infrastructure.services.rule_executor import RuleExecutor
from taskline.infrastructure.services.rule_matcher import RuleMatcher
from taskline.infrastructure.services.task_event_recorder import TaskEventRecorder
from taskline.infrastructure.services.task_template_renderer import TaskTemplateRenderer
from taskline.infrastructure.services.work_session_tracker import WorkSessionTracker


def build_lifecycle_service(db: AsyncSession) -> TaskLifecycleService:
    """Wire the lifecycle engine and its collaborators onto one session."""
    task_repo = TaskRepository(db)
    recorder = TaskEventRecorder(TaskEventRepository(db))
    factory = TaskFactory(task_repo, recorder)
    executor = RuleExecutor(
        matcher=RuleMatcher(RuleRepository(db)),
        renderer=TaskTemplateRenderer(),
        execution_repo=RuleExecutionRepository(db),
        task_creator=factory,
    )
    return TaskLifecycleService(
        db,
        task_repo,
        factory,
        recorder,
        executor,
        WorkSessionTracker(db, WorkSessionRepository(db)),
    )


async def get_lifecycle_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskLifecycleService:
    """Lifecycle engine bound to the request transaction."""
    return build_lifecycle_service(db)


async def get_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TaskQueryService:
    return TaskQueryService(
        TaskRepository(db), RuleRepository(db), RuleExecutionRepository(db)
    )


async def get_dependency_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TaskDependencyService:
    return TaskDependencyService(db, TaskRepository(db), TaskDependencyRepository(db))
