"""Automation rule domain entities.

A workflow groups rules for one project. A rule says "when a task of type X
reaches event Y, create tasks from these templates".
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleEntity:
    """Domain entity for an automation rule (scope resolved through its workflow)."""

    id: int
    workflow_id: int
    project_id: int
    name: str
    source_type_id: int | None
    trigger_event: str
    active: bool

    def matches(self, project_id: int, source_type_id: int, trigger_event: str) -> bool:
        """Return whether this rule fires for a task of source_type_id reaching trigger_event."""
        if not self.active or self.project_id != project_id:
            return False
        if self.trigger_event != trigger_event:
            return False
        return self.source_type_id is None or self.source_type_id == source_type_id


@dataclass(frozen=True)
class TaskTemplateEntity:
    """Title/description pattern plus target task type for derived tasks."""

    id: int
    project_id: int
    name: str
    description: str | None
    type_id: int
    priority: int
    execution_order: int = 0
