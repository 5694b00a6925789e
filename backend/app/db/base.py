"""SQLAlchemy Declarative Base — shared base class and audit columns for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Every entity has a string id, create/modify timestamps and a soft-delete flag

Design Decisions:
    - Separate file for Base: avoids circular imports between models (ADR: SQLAlchemy best practice)
    - String primary keys: user ids are usernames, other ids are generated hex uuids
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all Legal Admin ORM models."""
    pass


class EntityMixin:
    """id, timestamps and soft-delete flag shared by every table."""
    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: uuid.uuid4().hex,
    )
    create_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
    last_modified_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=utc_now,
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )


class AuditMixin(EntityMixin):
    """Adds who created / last modified the row (user ids)."""

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
        )

    @declared_attr
    def last_modified_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
        )
