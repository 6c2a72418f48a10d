"""Task entity state machine and status column mapping."""

from datetime import UTC, datetime

import pytest

from taskline.domain.entities.task import (
    Available,
    Claimed,
    ClaimState,
    Completed,
    TaskEntity,
    status_from_columns,
    status_to_columns,
    validate_new_task,
)
from taskline.domain.exceptions import InvalidTransitionException, ValidationException

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


def _task(status=None, version: int = 1) -> TaskEntity:
    return TaskEntity(
        id=10,
        project_id=1,
        type_id=1,
        title="Fix login",
        description=None,
        priority=3,
        status=status or Available(),
        version=version,
        card_id=None,
        created_by=5,
        created_at=NOW,
    )


def test_claim_from_available() -> None:
    status = _task().claim(user_id=5, now=NOW)
    assert status == Claimed(claimed_by=5, claim_state=ClaimState.TAKEN, claimed_at=NOW)
    assert status.name == "claimed"


def test_claim_already_claimed_is_invalid() -> None:
    task = _task(Claimed(claimed_by=6))
    with pytest.raises(InvalidTransitionException) as exc_info:
        task.claim(user_id=5, now=NOW)
    assert exc_info.value.details["from_state"] == "claimed"
    assert exc_info.value.details["operation"] == "claim"


def test_release_requires_claimant() -> None:
    task = _task(Claimed(claimed_by=6))
    with pytest.raises(InvalidTransitionException) as exc_info:
        task.release(user_id=5)
    assert exc_info.value.details["reason"] == "not_claimant"


def test_release_and_complete_from_ongoing() -> None:
    task = _task(Claimed(claimed_by=5, claim_state=ClaimState.ONGOING))
    assert task.release(5) == Available()
    completed = task.complete(5, NOW)
    assert completed == Completed(completed_by=5, completed_at=NOW)


def test_completed_is_terminal() -> None:
    task = _task(Completed(completed_by=5, completed_at=NOW))
    for attempt in (
        lambda: task.claim(5, NOW),
        lambda: task.release(5),
        lambda: task.complete(5, NOW),
        lambda: task.start_work(5),
    ):
        with pytest.raises(InvalidTransitionException):
            attempt()


def test_start_and_pause_work() -> None:
    taken = _task(Claimed(claimed_by=5, claimed_at=NOW))
    ongoing = taken.start_work(5)
    assert ongoing.claim_state is ClaimState.ONGOING
    assert ongoing.claimed_at == NOW
    assert _task(ongoing).pause_work(5).claim_state is ClaimState.TAKEN


def test_start_work_twice_and_pause_when_taken_are_invalid() -> None:
    with pytest.raises(InvalidTransitionException):
        _task(Claimed(claimed_by=5, claim_state=ClaimState.ONGOING)).start_work(5)
    with pytest.raises(InvalidTransitionException):
        _task(Claimed(claimed_by=5)).pause_work(5)


def test_edit_keeps_status_for_claimant_only() -> None:
    ongoing = Claimed(claimed_by=5, claim_state=ClaimState.ONGOING)
    assert _task(ongoing).edit(5) == ongoing
    with pytest.raises(InvalidTransitionException):
        _task(ongoing).edit(6)
    with pytest.raises(InvalidTransitionException):
        _task().edit(5)


def test_with_status_bumps_version_by_one() -> None:
    task = _task(version=4)
    moved = task.with_status(Claimed(claimed_by=5))
    assert moved.version == 5
    assert task.version == 4


def test_status_columns_translate_both_ways() -> None:
    ongoing = Claimed(claimed_by=5, claim_state=ClaimState.ONGOING, claimed_at=NOW)
    cols = status_to_columns(ongoing)
    assert cols["status"] == "claimed"
    assert cols["is_ongoing"] is True
    assert status_from_columns("claimed", True, 5, NOW, None) == ongoing
    assert status_from_columns("available", False, None, None, None) == Available()
    assert status_to_columns(Available())["claimed_by"] is None


def test_status_from_columns_rejects_claim_without_claimant() -> None:
    with pytest.raises(ValueError):
        status_from_columns("claimed", False, None, None, None)


@pytest.mark.parametrize(
    "title,priority,field",
    [("", 3, "title"), ("   ", 3, "title"), ("x" * 256, 3, "title"), ("ok", 0, "priority"), ("ok", 6, "priority")],
)
def test_validate_new_task_rejects(title: str, priority: int, field: str) -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_new_task(title, priority)
    assert exc_info.value.details["field"] == field


def test_validate_new_task_accepts_bounds() -> None:
    validate_new_task("x" * 255, 1)
    validate_new_task("y", 5)
