"""Domain entities (dataclasses, no ORM)."""

from taskline.domain.entities.rule import RuleEntity, TaskTemplateEntity
from taskline.domain.entities.task import (
    Available,
    ClaimState,
    Claimed,
    Completed,
    TaskEntity,
    TaskStatus,
)

__all__ = [
    "Available",
    "ClaimState",
    "Claimed",
    "Completed",
    "RuleEntity",
    "TaskEntity",
    "TaskStatus",
    "TaskTemplateEntity",
]
