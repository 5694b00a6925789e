"""ORM Models — SQLAlchemy declarative models for the admin entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every table has a string id, audit timestamps and a soft-delete flag

Design Decisions:
    - One file per entity for locality (ADR: ExMA max 3-4 files to understand a feature)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from app.models.user import User  # noqa: F401
from app.models.contract import Contract  # noqa: F401
from app.models.contract_attachment import ContractAttachment  # noqa: F401
