"""Task template rendering: title/description patterns -> concrete text (Jinja)."""

from __future__ import annotations

import re
from typing import Any

from jinja2 import StrictUndefined, TemplateError, meta
from jinja2.sandbox import SandboxedEnvironment

from taskline.domain.entities.task import TaskEntity
from taskline.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Every Jinja construct: expressions, statements, comments.
_CONSTRUCT = re.compile(r"\{\{.*?\}\}|\{%.*?%\}|\{#.*?#\}", re.DOTALL)


def father_reference(task: TaskEntity) -> str:
    """Human-readable back-reference to the task that triggered a rule."""
    return f"[Task #{task.id}: {task.title}]"


class TaskTemplateRenderer:
    """Renders task template strings against the source task.

    Supported names: father ("[Task #<id>: <title>]"), father_id, father_title.
    Each {{ ... }} expression over those names (filters allowed) is rendered on
    its own. Anything else (unknown names, statements, comments, expressions
    that fail) is left exactly as written.
    """

    def __init__(self) -> None:
        self._env = SandboxedEnvironment(autoescape=False, undefined=StrictUndefined)

    def context_for(self, source_task: TaskEntity) -> dict[str, Any]:
        return {
            "father": father_reference(source_task),
            "father_id": source_task.id,
            "father_title": source_task.title,
        }

    def render(self, template: str, source_task: TaskEntity) -> str:
        if "{" not in template:
            return template
        ctx = self.context_for(source_task)
        return _CONSTRUCT.sub(lambda m: self._render_construct(m.group(0), ctx), template)

    def _render_construct(self, construct: str, ctx: dict[str, Any]) -> str:
        if not construct.startswith("{{"):
            return construct
        try:
            names = meta.find_undeclared_variables(self._env.parse(construct))
            if not names or not names.issubset(ctx):
                return construct
            return self._env.from_string(construct).render(**ctx)
        except TemplateError:
            logger.warning("Template expression left unrendered: %r", construct)
            return construct
