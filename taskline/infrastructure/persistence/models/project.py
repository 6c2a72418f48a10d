"""Project, TaskType and Card ORM models.

These are owned by admin screens outside the lifecycle engine; the engine
only reads them to resolve references (org scope, type ownership, card).
"""

from sqlalchemy import BigInteger, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskline.infrastructure.persistence.database import Base
from taskline.infrastructure.persistence.models.mixins import CreatedAtMixin, IdMixin


class Project(IdMixin, CreatedAtMixin, Base):
    """Project within an organization. Table: projects."""

    __tablename__ = "projects"

    org_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class TaskType(IdMixin, Base):
    """Task type scoped to a project. Table: task_types."""

    __tablename__ = "task_types"

    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False, default="task")
    # Capabilities are resolved by an external collaborator; kept as an opaque id.
    capability_id: Mapped[int | None] = mapped_column(
        BigInteger, nullable=True, index=True
    )

    __table_args__ = (UniqueConstraint("name", "project_id", name="uq_task_types_name_project"),)


class Card(IdMixin, CreatedAtMixin, Base):
    """Opaque grouping of tasks. Table: cards."""

    __tablename__ = "cards"

    project_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("projects.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
