"""DTOs for task commands, list filters and dependency views (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TaskCreate:
    """Command to create a task (directly or from a rule template)."""

    project_id: int
    type_id: int
    title: str
    priority: int
    created_by: int
    description: str | None = None
    card_id: int | None = None
    created_from_rule_id: int | None = None


@dataclass(frozen=True)
class TaskUpdate:
    """Edit of a claimed task's details. None leaves the field unchanged.

    An empty description clears it.
    """

    title: str | None = None
    description: str | None = None
    priority: int | None = None
    type_id: int | None = None

    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and self.priority is None
            and self.type_id is None
        )


@dataclass(frozen=True)
class TaskListFilters:
    """Optional filters for listing a project's tasks. None means "no filter"."""

    status: str | None = None
    type_id: int | None = None
    capability_id: int | None = None
    text_query: str | None = None
    blocked: bool | None = None
    claimed_by_me: bool = False


@dataclass(frozen=True)
class TaskDependencyResult:
    """A task another task depends on, with the fields a board needs."""

    task_id: int
    title: str
    status: str
    claimed_by: int | None
