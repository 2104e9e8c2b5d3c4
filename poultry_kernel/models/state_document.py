"""
Module: poultry_kernel.models.state_document
Responsibility: ORM persistence for named JSON state documents.  The whole
    farm lives in one row; ``revision`` counts successful writes.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - ``name`` is unique: one row per document.
    - ``body`` holds the encoded document exactly as the codec produced it.

Failure modes:
    - IntegrityError on a duplicate name (uq_state_document_name).
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from poultry_kernel.db.base import Base


class StateDocument(Base):
    """One named, versioned JSON document."""

    __tablename__ = "farm_state_documents"

    __table_args__ = (
        UniqueConstraint("name", name="uq_state_document_name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    revision: Mapped[int] = mapped_column(nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<StateDocument {self.name} r{self.revision}>"
