"""Rule execution repository: idempotency receipts for rule firings."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.application.dtos.rule import RuleExecutionResult
from taskline.infrastructure.persistence.models.workflow import RuleExecution
from taskline.infrastructure.persistence.repositories.base import BaseRepository
from taskline.shared.telemetry.logging import get_logger
from taskline.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)


def _execution_to_result(e: RuleExecution) -> RuleExecutionResult:
    return RuleExecutionResult(
        id=e.id,
        rule_id=e.rule_id,
        source_task_id=e.source_task_id,
        user_id=e.user_id,
        tasks_created=e.tasks_created,
        executed_at=ensure_utc(e.executed_at),
    )


class RuleExecutionRepository(BaseRepository[RuleExecution]):
    """Rule execution repository. Implements IRuleExecutionRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RuleExecution)

    async def exists(self, rule_id: int, source_task_id: int) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(RuleExecution)
            .where(
                RuleExecution.rule_id == rule_id,
                RuleExecution.source_task_id == source_task_id,
            )
        )
        return (result.scalar() or 0) > 0

    async def try_record(
        self, rule_id: int, source_task_id: int, user_id: int | None
    ) -> int | None:
        """Insert the receipt for (rule, source task).

        Returns the new receipt id, or None when one already exists (the
        unique constraint decides; a concurrent insert loses here too).
        """
        if await self.exists(rule_id, source_task_id):
            return None
        try:
            async with self.db.begin_nested():
                created = await self.create(
                    RuleExecution(
                        rule_id=rule_id,
                        source_task_id=source_task_id,
                        user_id=user_id,
                        tasks_created=0,
                    )
                )
        except IntegrityError:
            # Savepoint rolled back; the other writer's receipt stands.
            logger.info(
                "Rule execution receipt already exists (rule_id=%s, source_task_id=%s)",
                rule_id,
                source_task_id,
            )
            return None
        return created.id

    async def set_tasks_created(self, execution_id: int, tasks_created: int) -> None:
        await self.db.execute(
            update(RuleExecution)
            .where(RuleExecution.id == execution_id)
            .values(tasks_created=tasks_created)
            .execution_options(synchronize_session=False)
        )

    async def list_for_rule(
        self, rule_id: int, skip: int = 0, limit: int = 100
    ) -> list[RuleExecutionResult]:
        result = await self.db.execute(
            select(RuleExecution)
            .where(RuleExecution.rule_id == rule_id)
            .order_by(RuleExecution.executed_at.desc(), RuleExecution.id.desc())
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [_execution_to_result(e) for e in result.scalars().all()]

    async def count_for_rule(self, rule_id: int) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(RuleExecution)
            .where(RuleExecution.rule_id == rule_id)
        )
        return result.scalar() or 0
