"""Work session tracker (implements IWorkSessionTracker).

A session is open while a claimed task is actively worked. Closing is
idempotent; the lifecycle engine closes sessions best-effort so a failure
here never aborts a release or completion.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from taskline.application.dtos.work_session import WorkSessionResult
from taskline.application.interfaces.repositories import IWorkSessionRepository
from taskline.domain.enums import WorkSessionEndReason
from taskline.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class WorkSessionTracker:
    """Opens, closes and heartbeats work sessions in the caller's transaction."""

    def __init__(self, db: AsyncSession, session_repo: IWorkSessionRepository) -> None:
        self.db = db
        self.session_repo = session_repo

    async def open(self, user_id: int, task_id: int) -> WorkSessionResult:
        """Open a session; an already open one for (user, task) is returned as is."""
        existing = await self.session_repo.get_open(user_id, task_id)
        if existing is not None:
            return existing
        return await self.session_repo.open(user_id, task_id)

    async def close(
        self, user_id: int, task_id: int, reason: WorkSessionEndReason
    ) -> bool:
        """Close the open session. Returns False (not an error) if none was open."""
        closed = await self.session_repo.close_open(user_id, task_id, reason.value)
        if closed:
            logger.info(
                "Work session closed (user_id=%s, task_id=%s, reason=%s)",
                user_id,
                task_id,
                reason.value,
            )
        return closed

    async def close_best_effort(
        self, user_id: int, task_id: int, reason: WorkSessionEndReason
    ) -> bool:
        """Close inside a savepoint; any failure is logged and discarded.

        The savepoint keeps a failed statement from poisoning the outer
        transaction, so the caller can still commit its transition.
        """
        try:
            async with self.db.begin_nested():
                return await self.close(user_id, task_id, reason)
        except Exception:
            logger.warning(
                "Failed to close work session (user_id=%s, task_id=%s, reason=%s)",
                user_id,
                task_id,
                reason.value,
                exc_info=True,
            )
            return False

    async def heartbeat(self, user_id: int, task_id: int) -> bool:
        return await self.session_repo.touch(user_id, task_id)
