"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from taskline.application.dtos.rule import MatchedRule
    from taskline.application.dtos.task import TaskCreate
    from taskline.application.dtos.task_event import TaskEventResult
    from taskline.application.dtos.work_session import WorkSessionResult
    from taskline.domain.entities.task import TaskEntity
    from taskline.domain.enums import TaskEventKind, TriggerEvent, WorkSessionEndReason


class ITemplateRenderer(Protocol):
    """Renders a template string against the task that triggered a rule."""

    def render(self, template: str, source_task: TaskEntity) -> str:
        """Substitute known placeholders; leave unknown ones untouched."""


class IRuleMatcher(Protocol):
    """Resolves the rules (and their templates) that apply to a trigger."""

    async def match(
        self, project_id: int, source_type_id: int, trigger_event: TriggerEvent
    ) -> list[MatchedRule]:
        """Matched rules in ascending rule id order."""


class IRuleExecutor(Protocol):
    """Creates derived tasks for a trigger inside the caller's transaction."""

    async def execute(
        self,
        org_id: int,
        source_task: TaskEntity,
        actor_user_id: int,
        trigger_event: TriggerEvent,
    ) -> list[int]:
        """Return ids of tasks created (empty when nothing fired)."""


class ITaskCreator(Protocol):
    """Inserts a validated task and its 'created' audit record."""

    async def create(self, data: TaskCreate) -> TaskEntity:
        """Create and return the task."""


class IEventRecorder(Protocol):
    """Appends task lifecycle audit records."""

    async def record(
        self, org_id: int, task: TaskEntity, actor_user_id: int, kind: TaskEventKind
    ) -> TaskEventResult:
        """Append one record for task."""


class IWorkSessionTracker(Protocol):
    """Opens and closes work sessions."""

    async def open(self, user_id: int, task_id: int) -> WorkSessionResult:
        """Open (or return the already open) session for (user, task)."""

    async def close(self, user_id: int, task_id: int, reason: WorkSessionEndReason) -> bool:
        """Close the open session; True if one was closed."""

    async def close_best_effort(
        self, user_id: int, task_id: int, reason: WorkSessionEndReason
    ) -> bool:
        """Like close, but failures are logged and swallowed."""

    async def heartbeat(self, user_id: int, task_id: int) -> bool:
        """Refresh the open session's heartbeat; True if one was touched."""
