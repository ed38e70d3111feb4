"""
Idempotency record table.

Stores the response of a completed operation so that a retry
with the same key gets the same answer instead of a second
side effect.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_core.models.base import Base


class IdempotencyRecord(Base):
    """Append-only; a stored response is never updated."""

    __tablename__ = "idempotency_keys"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "action_key", "idempotency_key",
            name="uq_idempotency_keys_scope",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    action_key: Mapped[str] = mapped_column(String(100), nullable=False)
    idempotency_key: Mapped[str] = mapped_column(String(100), nullable=False)
    response_body: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
