"""Task domain entity and its lifecycle status.

Status is a closed sum type: Available | Claimed(taken or ongoing) | Completed.
Persistence stores it as a status string plus an is_ongoing flag (and the
claimant/timestamps); status_from_columns/status_to_columns are the only
translation points so invalid combinations never cross the API boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, NoReturn

from taskline.domain.enums import TaskOperation
from taskline.domain.exceptions import InvalidTransitionException, ValidationException

PRIORITY_MIN = 1
PRIORITY_MAX = 5
TITLE_MAX_LENGTH = 255

# Values accepted by the list filter; "claimed" covers both claim sub-states.
STATUS_FILTER_VALUES = ("available", "claimed", "ongoing", "completed")


class ClaimState(str, Enum):
    """Sub-state of a claimed task."""

    TAKEN = "taken"
    ONGOING = "ongoing"


@dataclass(frozen=True)
class Available:
    """Open for anyone to claim."""

    @property
    def name(self) -> str:
        return "available"


@dataclass(frozen=True)
class Claimed:
    """Held by one user; ONGOING while a work session is open."""

    claimed_by: int
    claim_state: ClaimState = ClaimState.TAKEN
    claimed_at: datetime | None = None

    @property
    def name(self) -> str:
        return "ongoing" if self.claim_state is ClaimState.ONGOING else "claimed"


@dataclass(frozen=True)
class Completed:
    """Terminal state."""

    completed_by: int | None = None
    completed_at: datetime | None = None

    @property
    def name(self) -> str:
        return "completed"


TaskStatus = Available | Claimed | Completed


def status_from_columns(
    status: str,
    is_ongoing: bool,
    claimed_by: int | None,
    claimed_at: datetime | None,
    completed_at: datetime | None,
) -> TaskStatus:
    """Build the sum type from the persisted columns.

    Raises ValueError for combinations the schema should never hold
    (e.g. 'claimed' without a claimant).
    """
    if status == "available":
        return Available()
    if status == "claimed":
        if claimed_by is None:
            raise ValueError("claimed task without claimed_by")
        state = ClaimState.ONGOING if is_ongoing else ClaimState.TAKEN
        return Claimed(claimed_by=claimed_by, claim_state=state, claimed_at=claimed_at)
    if status == "completed":
        return Completed(completed_by=claimed_by, completed_at=completed_at)
    raise ValueError(f"unknown task status: {status!r}")


def status_to_columns(status: TaskStatus) -> dict[str, Any]:
    """Flatten the sum type into column values for a guarded UPDATE."""
    if isinstance(status, Available):
        return {
            "status": "available",
            "is_ongoing": False,
            "claimed_by": None,
            "claimed_at": None,
            "completed_at": None,
        }
    if isinstance(status, Claimed):
        return {
            "status": "claimed",
            "is_ongoing": status.claim_state is ClaimState.ONGOING,
            "claimed_by": status.claimed_by,
            "claimed_at": status.claimed_at,
            "completed_at": None,
        }
    return {
        "status": "completed",
        "is_ongoing": False,
        "claimed_by": status.completed_by,
        "completed_at": status.completed_at,
    }


def validate_new_task(title: str, priority: int) -> None:
    """Check creation inputs that do not need the database."""
    if not title or not title.strip():
        raise ValidationException("Task title must not be empty", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationException(
            f"Task title must be at most {TITLE_MAX_LENGTH} characters", field="title"
        )
    if not PRIORITY_MIN <= priority <= PRIORITY_MAX:
        raise ValidationException(
            f"Priority must be between {PRIORITY_MIN} and {PRIORITY_MAX}",
            field="priority",
        )


@dataclass(frozen=True)
class TaskEntity:
    """Domain entity for a task. Transition methods return the next status or raise."""

    id: int
    project_id: int
    type_id: int
    title: str
    description: str | None
    priority: int
    status: TaskStatus
    version: int
    card_id: int | None
    created_by: int
    created_at: datetime
    created_from_rule_id: int | None = None

    def claim(self, user_id: int, now: datetime) -> Claimed:
        if not isinstance(self.status, Available):
            self._reject(TaskOperation.CLAIM)
        return Claimed(claimed_by=user_id, claim_state=ClaimState.TAKEN, claimed_at=now)

    def release(self, user_id: int) -> Available:
        self._require_claimant(TaskOperation.RELEASE, user_id)
        return Available()

    def complete(self, user_id: int, now: datetime) -> Completed:
        self._require_claimant(TaskOperation.COMPLETE, user_id)
        return Completed(completed_by=user_id, completed_at=now)

    def start_work(self, user_id: int) -> Claimed:
        claimed = self._require_claimant(TaskOperation.START_WORK, user_id)
        if claimed.claim_state is ClaimState.ONGOING:
            self._reject(TaskOperation.START_WORK)
        return replace(claimed, claim_state=ClaimState.ONGOING)

    def pause_work(self, user_id: int) -> Claimed:
        claimed = self._require_claimant(TaskOperation.PAUSE_WORK, user_id)
        if claimed.claim_state is not ClaimState.ONGOING:
            self._reject(TaskOperation.PAUSE_WORK)
        return replace(claimed, claim_state=ClaimState.TAKEN)

    def edit(self, user_id: int) -> Claimed:
        """Only the claimant may change a task's details; the status is kept."""
        return self._require_claimant(TaskOperation.UPDATE, user_id)

    def with_status(self, status: TaskStatus) -> TaskEntity:
        """Return a copy carrying the new status and the next version."""
        return replace(self, status=status, version=self.version + 1)

    def _require_claimant(self, operation: TaskOperation, user_id: int) -> Claimed:
        if not isinstance(self.status, Claimed):
            self._reject(operation)
        if self.status.claimed_by != user_id:
            self._reject(operation, reason="not_claimant")
        return self.status

    def _reject(self, operation: TaskOperation, reason: str | None = None) -> NoReturn:
        raise InvalidTransitionException(
            self.id, operation.value, self.status.name, reason=reason
        )
