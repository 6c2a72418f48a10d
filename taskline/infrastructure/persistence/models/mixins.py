"""SQLAlchemy mixins for common model patterns.

Provides: IdMixin (integer surrogate key), CreatedAtMixin, TimestampMixin.
Integer keys keep lineage references human readable ("[Task #42: ...]").
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from taskline.shared.utils.datetime import utc_now

# SQLite only autoincrements INTEGER PRIMARY KEY (rowid alias).
BigIntId = BigInteger().with_variant(Integer, "sqlite")


class IdMixin:
    """Mixin for models keyed by an autoincrement integer id."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(BigIntId, primary_key=True, autoincrement=True)


class CreatedAtMixin:
    """Mixin for an immutable created_at (timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            nullable=False,
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            onupdate=utc_now,
            nullable=False,
        )
