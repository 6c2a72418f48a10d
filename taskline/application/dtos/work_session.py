"""DTOs for work sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WorkSessionResult:
    """Work session interval; ended_at None while open."""

    id: int
    user_id: int
    task_id: int
    started_at: datetime
    last_heartbeat_at: datetime
    ended_at: datetime | None
    ended_reason: str | None

    @property
    def is_open(self) -> bool:
        return self.ended_at is None
