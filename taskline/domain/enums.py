"""Domain enumerations for the Taskline application.

Enums represent fixed sets of domain values (task event kinds, trigger
events, work session end reasons).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TaskOperation(_ValuesMixin, str, Enum):
    """Lifecycle operations accepted by the task lifecycle engine."""

    CREATE = "create"
    CLAIM = "claim"
    RELEASE = "release"
    COMPLETE = "complete"
    START_WORK = "start_work"
    PAUSE_WORK = "pause_work"
    UPDATE = "update"
    RELEASE_ALL = "release_all"


class TaskEventKind(_ValuesMixin, str, Enum):
    """Kinds of append-only task audit records."""

    CREATED = "task_created"
    CLAIMED = "task_claimed"
    RELEASED = "task_released"
    COMPLETED = "task_completed"
    WORK_STARTED = "task_work_started"
    WORK_PAUSED = "task_work_paused"
    UPDATED = "task_updated"


class TriggerEvent(_ValuesMixin, str, Enum):
    """Lifecycle events a rule can be attached to."""

    CREATED = "created"
    CLAIMED = "claimed"
    RELEASED = "released"
    COMPLETED = "completed"


class WorkSessionEndReason(_ValuesMixin, str, Enum):
    """Why a work session was closed."""

    RELEASED = "released"
    COMPLETED = "completed"
    PAUSED = "paused"
    REASSIGNED = "reassigned"
