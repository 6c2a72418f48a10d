"""Work session repository."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.application.dtos.work_session import WorkSessionResult
from taskline.infrastructure.persistence.models.work_session import WorkSession
from taskline.infrastructure.persistence.repositories.base import BaseRepository
from taskline.shared.utils.datetime import ensure_utc, utc_now


def _session_to_result(s: WorkSession) -> WorkSessionResult:
    return WorkSessionResult(
        id=s.id,
        user_id=s.user_id,
        task_id=s.task_id,
        started_at=ensure_utc(s.started_at),
        last_heartbeat_at=ensure_utc(s.last_heartbeat_at),
        ended_at=ensure_utc(s.ended_at),
        ended_reason=s.ended_reason,
    )


class WorkSessionRepository(BaseRepository[WorkSession]):
    """Work session repository. Implements IWorkSessionRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkSession)

    async def get_open(self, user_id: int, task_id: int) -> WorkSessionResult | None:
        result = await self.db.execute(
            select(WorkSession)
            .where(
                WorkSession.user_id == user_id,
                WorkSession.task_id == task_id,
                WorkSession.ended_at.is_(None),
            )
            .execution_options(populate_existing=True)
        )
        session = result.scalar_one_or_none()
        return _session_to_result(session) if session else None

    async def open(self, user_id: int, task_id: int) -> WorkSessionResult:
        """Insert an open session. The partial unique index rejects a second one."""
        now = utc_now()
        created = await self.create(
            WorkSession(
                user_id=user_id,
                task_id=task_id,
                started_at=now,
                last_heartbeat_at=now,
            )
        )
        return _session_to_result(created)

    async def close_open(self, user_id: int, task_id: int, reason: str) -> bool:
        result = await self.db.execute(
            update(WorkSession)
            .where(
                WorkSession.user_id == user_id,
                WorkSession.task_id == task_id,
                WorkSession.ended_at.is_(None),
            )
            .values(ended_at=utc_now(), ended_reason=reason)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def touch(self, user_id: int, task_id: int) -> bool:
        result = await self.db.execute(
            update(WorkSession)
            .where(
                WorkSession.user_id == user_id,
                WorkSession.task_id == task_id,
                WorkSession.ended_at.is_(None),
            )
            .values(last_heartbeat_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
