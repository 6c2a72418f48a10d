"""Workflow, Rule, TaskTemplate, RuleTemplate and RuleExecution ORM models.

Rule-based automation: a project workflow holds rules; a rule fires on a
task lifecycle event and materializes its attached templates as new tasks.
"""

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from taskline.domain.enums import TriggerEvent
from taskline.infrastructure.persistence.database import Base
from taskline.infrastructure.persistence.models.mixins import CreatedAtMixin, IdMixin
from taskline.shared.utils.datetime import utc_now


def _in_values(column: str, values: list[str]) -> str:
    return "{} IN ({})".format(
        column, ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    )


class Workflow(IdMixin, CreatedAtMixin, Base):
    """Named container of rules for one project. Table: workflows."""

    __tablename__ = "workflows"

    org_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.true()
    )
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_workflows_project_name"),
    )


class Rule(IdMixin, CreatedAtMixin, Base):
    """Automation trigger. Table: rules. task_type_id NULL matches any type."""

    __tablename__ = "rules"

    workflow_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("workflows.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    goal: Mapped[str | None] = mapped_column(Text, nullable=True)
    task_type_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("task_types.id"), nullable=True
    )
    trigger_event: Mapped[str] = mapped_column(String(32), nullable=False)
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.true()
    )

    __table_args__ = (
        CheckConstraint(
            _in_values("trigger_event", TriggerEvent.values()),
            name="rules_trigger_event_check",
        ),
    )


class TaskTemplate(IdMixin, CreatedAtMixin, Base):
    """Template for derived tasks. Table: task_templates. name is the title pattern."""

    __tablename__ = "task_templates"

    org_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Deliberately not a foreign key: a template can outlive its target type,
    # and a dangling type must surface as InvalidReference at execution time.
    type_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=3, server_default=sa.text("3")
    )
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        CheckConstraint("priority BETWEEN 1 AND 5", name="task_templates_priority_range"),
    )


class RuleTemplate(Base):
    """Rule <-> template attachment (N:M). Table: rule_templates."""

    __tablename__ = "rule_templates"

    rule_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("rules.id", ondelete="CASCADE"), primary_key=True
    )
    template_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("task_templates.id", ondelete="CASCADE"), primary_key=True
    )
    execution_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )


class RuleExecution(IdMixin, Base):
    """Idempotency receipt: one per (rule, source task). Table: rule_executions."""

    __tablename__ = "rule_executions"

    rule_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("rules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    source_task_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    tasks_created: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    executed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("rule_id", "source_task_id", name="uq_rule_executions_rule_source"),
    )
