"""
Journal entry and journal line tables.

An entry owns its lines: they are written and replaced together.
Balance is enforced by the JournalEntry aggregate before a row
ever reaches POSTED status, not by the schema.
"""

from datetime import date, datetime

from sqlalchemy import (
    String, Date, DateTime, BigInteger, Integer, ForeignKey, Text, JSON,
    UniqueConstraint, Index,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_core.models.base import Base
from ledger_core.models.enums import EntryDirection, EntryStatus


class JournalEntryModel(Base):

    __tablename__ = "journal_entries"
    __table_args__ = (
        # Backstop for entry number allocation: two postings can
        # never commit the same number for one tenant.
        UniqueConstraint(
            "tenant_id", "entry_number", name="uq_journal_entries_tenant_number"
        ),
        Index("ix_journal_entries_tenant_date", "tenant_id", "posting_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    entry_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status: Mapped[EntryStatus] = mapped_column(
        SAEnum(EntryStatus, name="entry_status_enum"),
        nullable=False,
        default=EntryStatus.DRAFT,
    )
    posting_date: Mapped[date] = mapped_column(Date, nullable=False)
    memo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    source_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    source_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    source_ref: Mapped[str | None] = mapped_column(String(100), nullable=True)
    reverses_entry_id: Mapped[str | None] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=True
    )
    reversed_by_entry_id: Mapped[str | None] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=True
    )
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    posted_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    posted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reversed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    lines: Mapped[list["JournalLineModel"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLineModel.position",
    )

    def __repr__(self) -> str:
        return f"<JournalEntryModel {self.entry_number or self.id} ({self.status.value})>"


class JournalLineModel(Base):

    __tablename__ = "journal_lines"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    entry_id: Mapped[str] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ledger_account_id: Mapped[str] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    direction: Mapped[EntryDirection] = mapped_column(
        SAEnum(EntryDirection, name="entry_direction_enum"),
        nullable=False,
    )
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    line_memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    entry: Mapped["JournalEntryModel"] = relationship(back_populates="lines")

    def __repr__(self) -> str:
        return (
            f"<JournalLineModel {self.direction.value} "
            f"{self.amount_cents} {self.currency}>"
        )
