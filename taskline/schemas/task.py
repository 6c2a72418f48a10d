"""Task API schemas.

The lifecycle status is exposed as one tagged union keyed by "state", so a
client never sees the storage columns (status + is_ongoing) separately.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from taskline.application.dtos.task import TaskDependencyResult
from taskline.domain.entities.task import (
    Available,
    Claimed,
    Completed,
    TaskEntity,
    TaskStatus,
)


class AvailableStatus(BaseModel):
    state: Literal["available"] = "available"


class ClaimedStatus(BaseModel):
    state: Literal["claimed"] = "claimed"
    claim_state: Literal["taken", "ongoing"]
    claimed_by: int
    claimed_at: datetime | None = None


class CompletedStatus(BaseModel):
    state: Literal["completed"] = "completed"
    completed_by: int | None = None
    completed_at: datetime | None = None


TaskStatusResponse = Annotated[
    AvailableStatus | ClaimedStatus | CompletedStatus,
    Field(discriminator="state"),
]


def status_to_response(status: TaskStatus) -> AvailableStatus | ClaimedStatus | CompletedStatus:
    if isinstance(status, Available):
        return AvailableStatus()
    if isinstance(status, Claimed):
        return ClaimedStatus(
            claim_state=status.claim_state.value,
            claimed_by=status.claimed_by,
            claimed_at=status.claimed_at,
        )
    if isinstance(status, Completed):
        return CompletedStatus(
            completed_by=status.completed_by, completed_at=status.completed_at
        )
    raise TypeError(f"unknown task status: {status!r}")


class TaskCreateRequest(BaseModel):
    """Request body for creating a task in a project.

    Title and priority ranges are checked by the domain (400 VALIDATION_ERROR).
    """

    type_id: int
    title: str
    description: str | None = None
    priority: int = Field(default=3, description="1 (lowest) to 5 (highest)")
    card_id: int | None = None


class VersionRequest(BaseModel):
    """Body for lifecycle transitions: the version the client believes is current."""

    version: int = Field(..., ge=1)


class TaskUpdateRequest(BaseModel):
    """Edit of a claimed task. Omitted fields are left unchanged; "" clears the description."""

    version: int = Field(..., ge=1)
    title: str | None = None
    description: str | None = None
    priority: int | None = None
    type_id: int | None = None


class TaskResponse(BaseModel):
    """Task response."""

    id: int
    project_id: int
    type_id: int
    title: str
    description: str | None
    priority: int
    status: TaskStatusResponse
    version: int
    card_id: int | None
    created_by: int
    created_at: datetime
    created_from_rule_id: int | None = None

    @classmethod
    def from_entity(cls, task: TaskEntity) -> "TaskResponse":
        return cls(
            id=task.id,
            project_id=task.project_id,
            type_id=task.type_id,
            title=task.title,
            description=task.description,
            priority=task.priority,
            status=status_to_response(task.status),
            version=task.version,
            card_id=task.card_id,
            created_by=task.created_by,
            created_at=task.created_at,
            created_from_rule_id=task.created_from_rule_id,
        )


class HeartbeatResponse(BaseModel):
    """Whether an open work session was refreshed."""

    touched: bool


class DependencyCreateRequest(BaseModel):
    depends_on_task_id: int


class TaskDependencyResponse(BaseModel):
    """A task the requested task depends on."""

    model_config = ConfigDict(from_attributes=True)

    task_id: int
    title: str
    status: Literal["available", "claimed", "ongoing", "completed"]
    claimed_by: int | None

    @classmethod
    def from_result(cls, result: TaskDependencyResult) -> "TaskDependencyResponse":
        return cls.model_validate(result)
