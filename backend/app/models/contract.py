"""Contract ORM — the main administered document.

Invariants:
    - Deletion is soft (is_deleted), rows are never removed by handlers
    - created_by / last_modified_by hold the caller's user id

Design Decisions:
    - Attachments in a separate table: listing contracts never loads file bytes
    - attachments loads on access only (lazy="select"); a hard delete needs it
      for the delete-orphan cascade
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import AuditMixin, Base, utc_now


class Contract(AuditMixin, Base):
    __tablename__ = "contracts"

    author: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
    updated: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    attachments: Mapped[list["ContractAttachment"]] = relationship(
        "ContractAttachment", back_populates="contract",
        cascade="all, delete-orphan", lazy="select",
    )
