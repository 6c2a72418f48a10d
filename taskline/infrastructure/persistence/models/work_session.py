"""WorkSession ORM model. Time tracking while a claimed task is actively worked."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from taskline.infrastructure.persistence.database import Base
from taskline.infrastructure.persistence.models.mixins import IdMixin
from taskline.shared.utils.datetime import utc_now


class WorkSession(IdMixin, Base):
    """Work session. Table: work_sessions. ended_at NULL means open."""

    __tablename__ = "work_sessions"

    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    task_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tasks.id"), nullable=False, index=True
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    last_heartbeat_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
    )
    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    ended_reason: Mapped[str | None] = mapped_column(String(32), nullable=True)

    __table_args__ = (
        # At most one open session per (user, task).
        Index(
            "uq_work_sessions_open_user_task",
            "user_id",
            "task_id",
            unique=True,
            postgresql_where=text("ended_at IS NULL"),
            sqlite_where=text("ended_at IS NULL"),
        ),
        Index(
            "ix_work_sessions_user_open",
            "user_id",
            postgresql_where=text("ended_at IS NULL"),
            sqlite_where=text("ended_at IS NULL"),
        ),
    )
