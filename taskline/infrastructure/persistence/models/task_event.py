"""TaskEvent ORM model. Append-only lifecycle audit (never updated or deleted)."""

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from taskline.domain.enums import TaskEventKind
from taskline.infrastructure.persistence.database import Base
from taskline.infrastructure.persistence.models.mixins import CreatedAtMixin, IdMixin


class TaskEvent(IdMixin, CreatedAtMixin, Base):
    """Task lifecycle audit record. Table: task_events."""

    __tablename__ = "task_events"

    org_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False
    )
    task_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tasks.id"), nullable=False
    )
    actor_user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "kind IN ({})".format(", ".join(f"'{v}'" for v in TaskEventKind.values())),
            name="task_events_kind_check",
        ),
        Index("ix_task_events_org_created_at", "org_id", "created_at"),
        Index("ix_task_events_project_created_at", "project_id", "created_at"),
        Index("ix_task_events_task_created_at", "task_id", "created_at"),
        Index("ix_task_events_actor_created_at", "actor_user_id", "created_at"),
    )
