"""Task and TaskDependency ORM models.

The lifecycle status is persisted as status + is_ongoing + claimant columns;
taskline.domain.entities.task translates them to the TaskStatus sum type.
"""

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from taskline.infrastructure.persistence.database import Base
from taskline.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    IdMixin,
    TimestampMixin,
)


class Task(IdMixin, TimestampMixin, Base):
    """Task row. Table: tasks. status/version are written only by the lifecycle engine."""

    __tablename__ = "tasks"

    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False, index=True
    )
    type_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("task_types.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=3, server_default=sa.text("3")
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="available", server_default="available"
    )
    is_ongoing: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.false()
    )
    claimed_by: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default=sa.text("1")
    )
    card_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("cards.id"), nullable=True, index=True
    )
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_from_rule_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("rules.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        CheckConstraint("priority BETWEEN 1 AND 5", name="tasks_priority_range"),
        CheckConstraint(
            "status IN ('available', 'claimed', 'completed')",
            name="tasks_status_check",
        ),
        CheckConstraint(
            "status != 'claimed' OR claimed_by IS NOT NULL",
            name="tasks_claimed_has_claimant",
        ),
        CheckConstraint(
            "NOT is_ongoing OR status = 'claimed'",
            name="tasks_ongoing_only_when_claimed",
        ),
        CheckConstraint("version >= 1", name="tasks_version_positive"),
        Index("ix_tasks_project_status", "project_id", "status"),
    )


class TaskDependency(IdMixin, CreatedAtMixin, Base):
    """task_id cannot be finished meaningfully before depends_on_task_id. Table: task_dependencies."""

    __tablename__ = "task_dependencies"

    task_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    depends_on_task_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        UniqueConstraint("task_id", "depends_on_task_id", name="uq_task_dependencies_pair"),
        CheckConstraint("task_id != depends_on_task_id", name="task_dependencies_not_self"),
    )
