"""
Declarative base for the chunk store.

Every table gets a UUID primary key and UTC timestamps. Timestamps are
generated in Python (microsecond resolution) rather than by the server so
that rows written in one transaction still have a usable load order.

Dependencies: sqlalchemy
System role: ORM foundation
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Stable constraint names for migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Registry for all ORM models; ``Base.metadata`` drives create_all in tests."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class UUIDMixin:
    """
    UUID v4 primary key.

    ``Uuid`` maps to native UUID on PostgreSQL and CHAR(32) on SQLite,
    so the same model runs against the in-memory test database.
    """

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """
    created_at / updated_at in UTC.

    Chunks are never updated in place, so updated_at only changes if a
    row is rewritten by a maintenance job.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
