"""ContractAttachment ORM — a file uploaded against a contract."""

from sqlalchemy import ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import AuditMixin, Base


class ContractAttachment(AuditMixin, Base):
    __tablename__ = "contract_attachments"

    contract_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False,
    )
    file_name: Mapped[str] = mapped_column(String(512), nullable=False)
    content_type: Mapped[str] = mapped_column(
        String(256), nullable=False, default="application/octet-stream",
    )
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    contract: Mapped["Contract"] = relationship(
        "Contract", back_populates="attachments", lazy="select",
    )
