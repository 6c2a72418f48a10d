"""WorkSessionTracker unit tests: idempotent open, best-effort close."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskline.application.dtos.work_session import WorkSessionResult
from taskline.domain.enums import WorkSessionEndReason
from taskline.infrastructure.services.work_session_tracker import WorkSessionTracker


@asynccontextmanager
async def _savepoint():
    yield


@pytest.fixture
def tracker_mocks():
    db = MagicMock()
    db.begin_nested = _savepoint
    repo = AsyncMock()
    return WorkSessionTracker(db, repo), repo


def _session() -> WorkSessionResult:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    return WorkSessionResult(
        id=1,
        user_id=5,
        task_id=10,
        started_at=now,
        last_heartbeat_at=now,
        ended_at=None,
        ended_reason=None,
    )


async def test_open_returns_existing_session(tracker_mocks) -> None:
    tracker, repo = tracker_mocks
    repo.get_open = AsyncMock(return_value=_session())
    result = await tracker.open(5, 10)
    assert result.is_open
    repo.open.assert_not_awaited()


async def test_close_without_open_session_is_noop(tracker_mocks) -> None:
    tracker, repo = tracker_mocks
    repo.close_open = AsyncMock(return_value=False)
    assert await tracker.close(5, 10, WorkSessionEndReason.RELEASED) is False
    repo.close_open.assert_awaited_once_with(5, 10, "released")


async def test_close_best_effort_logs_and_swallows(tracker_mocks, caplog) -> None:
    tracker, repo = tracker_mocks
    repo.close_open = AsyncMock(side_effect=RuntimeError("disk full"))
    with caplog.at_level(logging.WARNING):
        closed = await tracker.close_best_effort(5, 10, WorkSessionEndReason.COMPLETED)
    assert closed is False
    assert "Failed to close work session" in caplog.text
