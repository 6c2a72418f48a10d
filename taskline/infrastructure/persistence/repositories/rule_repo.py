"""Rule repository: matching lookups and admin-side workflow/rule/template writes."""

from __future__ import annotations

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.application.dtos.rule import MatchedRule, WorkflowResult
from taskline.domain.entities.rule import RuleEntity, TaskTemplateEntity
from taskline.domain.enums import TriggerEvent
from taskline.domain.exceptions import ResourceNotFoundException, ValidationException
from taskline.infrastructure.persistence.models.workflow import (
    Rule,
    RuleTemplate,
    TaskTemplate,
    Workflow,
)
from taskline.infrastructure.persistence.repositories.base import BaseRepository


def _rule_to_entity(r: Rule, project_id: int) -> RuleEntity:
    return RuleEntity(
        id=r.id,
        workflow_id=r.workflow_id,
        project_id=project_id,
        name=r.name,
        source_type_id=r.task_type_id,
        trigger_event=r.trigger_event,
        active=r.active,
    )


def _template_to_entity(t: TaskTemplate, execution_order: int = 0) -> TaskTemplateEntity:
    return TaskTemplateEntity(
        id=t.id,
        project_id=t.project_id,
        name=t.name,
        description=t.description,
        type_id=t.type_id,
        priority=t.priority,
        execution_order=execution_order,
    )


def _workflow_to_result(w: Workflow) -> WorkflowResult:
    return WorkflowResult(
        id=w.id,
        org_id=w.org_id,
        project_id=w.project_id,
        name=w.name,
        description=w.description,
        active=w.active,
        created_by=w.created_by,
    )


class RuleRepository(BaseRepository[Rule]):
    """Rule repository. Implements IRuleRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Rule)

    async def find_matching(
        self, project_id: int, source_type_id: int, trigger_event: str
    ) -> list[MatchedRule]:
        """Active rules of active workflows in project_id for trigger_event.

        Rules without a source type match any type. Ordered by rule id;
        each rule's templates by (execution_order, template id).
        """
        stmt = (
            select(Rule, Workflow.project_id)
            .join(Workflow, Workflow.id == Rule.workflow_id)
            .where(
                Workflow.project_id == project_id,
                Workflow.active.is_(True),
                Rule.active.is_(True),
                Rule.trigger_event == trigger_event,
                or_(Rule.task_type_id.is_(None), Rule.task_type_id == source_type_id),
            )
            .order_by(Rule.id.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        rules = [_rule_to_entity(r, pid) for r, pid in result.all()]
        if not rules:
            return []

        tmpl_stmt = (
            select(TaskTemplate, RuleTemplate.rule_id, RuleTemplate.execution_order)
            .join(RuleTemplate, RuleTemplate.template_id == TaskTemplate.id)
            .where(RuleTemplate.rule_id.in_([r.id for r in rules]))
            .order_by(
                RuleTemplate.rule_id.asc(),
                RuleTemplate.execution_order.asc(),
                TaskTemplate.id.asc(),
            )
        )
        by_rule: dict[int, list[TaskTemplateEntity]] = {r.id: [] for r in rules}
        for template, rule_id, order in (await self.db.execute(tmpl_stmt)).all():
            by_rule[rule_id].append(_template_to_entity(template, order))
        return [MatchedRule(rule=r, templates=by_rule[r.id]) for r in rules]

    async def get_rule(self, rule_id: int) -> RuleEntity | None:
        result = await self.db.execute(
            select(Rule, Workflow.project_id)
            .join(Workflow, Workflow.id == Rule.workflow_id)
            .where(Rule.id == rule_id)
        )
        row = result.one_or_none()
        return _rule_to_entity(row[0], row[1]) if row else None

    async def create_workflow(
        self,
        org_id: int,
        project_id: int,
        name: str,
        created_by: int,
        *,
        description: str | None = None,
        active: bool = True,
    ) -> WorkflowResult:
        workflow = Workflow(
            org_id=org_id,
            project_id=project_id,
            name=name,
            description=description,
            active=active,
            created_by=created_by,
        )
        self.db.add(workflow)
        await self.db.flush()
        await self.db.refresh(workflow)
        return _workflow_to_result(workflow)

    async def set_workflow_active(self, workflow_id: int, active: bool) -> None:
        result = await self.db.execute(
            update(Workflow).where(Workflow.id == workflow_id).values(active=active)
        )
        if result.rowcount == 0:
            raise ResourceNotFoundException("workflow", workflow_id)

    async def create_rule(
        self,
        workflow_id: int,
        name: str,
        trigger_event: TriggerEvent | str,
        *,
        source_type_id: int | None = None,
        goal: str | None = None,
        active: bool = True,
    ) -> RuleEntity:
        trigger = TriggerEvent(trigger_event).value
        workflow = await self.db.get(Workflow, workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", workflow_id)
        rule = await self.create(
            Rule(
                workflow_id=workflow_id,
                name=name,
                goal=goal,
                task_type_id=source_type_id,
                trigger_event=trigger,
                active=active,
            )
        )
        return _rule_to_entity(rule, workflow.project_id)

    async def set_rule_active(self, rule_id: int, active: bool) -> None:
        result = await self.db.execute(
            update(Rule).where(Rule.id == rule_id).values(active=active)
        )
        if result.rowcount == 0:
            raise ResourceNotFoundException("rule", rule_id)

    async def create_template(
        self,
        org_id: int,
        project_id: int,
        name: str,
        type_id: int,
        created_by: int,
        *,
        description: str | None = None,
        priority: int = 3,
    ) -> TaskTemplateEntity:
        """Create a task template. name is the title pattern (may embed {{father}})."""
        if not name or not name.strip():
            raise ValidationException("Template name must not be empty", field="name")
        template = TaskTemplate(
            org_id=org_id,
            project_id=project_id,
            name=name,
            description=description,
            type_id=type_id,
            priority=priority,
            created_by=created_by,
        )
        self.db.add(template)
        await self.db.flush()
        await self.db.refresh(template)
        return _template_to_entity(template)

    async def attach_template(
        self, rule_id: int, template_id: int, execution_order: int = 0
    ) -> None:
        """Attach a template to a rule; re-attaching updates the order."""
        link = await self.db.get(RuleTemplate, (rule_id, template_id))
        if link is not None:
            link.execution_order = execution_order
        else:
            self.db.add(
                RuleTemplate(
                    rule_id=rule_id,
                    template_id=template_id,
                    execution_order=execution_order,
                )
            )
        await self.db.flush()
