"""DTOs for task lifecycle audit records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TaskEventResult:
    """Append-only lifecycle audit record."""

    id: int
    org_id: int
    project_id: int
    task_id: int
    actor_user_id: int
    kind: str
    created_at: datetime
