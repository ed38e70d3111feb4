"""Accounting period table."""

from datetime import date, datetime

from sqlalchemy import String, Date, DateTime, Index, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from ledger_core.models.base import Base
from ledger_core.models.enums import PeriodStatus


class AccountingPeriodModel(Base):
    """
    One fiscal period (usually a month) of a tenant.

    Date ranges are not allowed to overlap within a tenant; that
    is maintained when periods are created, not re-checked here.
    """

    __tablename__ = "accounting_periods"
    __table_args__ = (
        Index("ix_accounting_periods_tenant_dates", "tenant_id", "start_date", "end_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    fiscal_year_id: Mapped[str] = mapped_column(String(36), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[PeriodStatus] = mapped_column(
        SAEnum(PeriodStatus, name="period_status_enum"),
        nullable=False,
        default=PeriodStatus.OPEN,
    )
    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    closed_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        return f"<AccountingPeriodModel {self.name} ({self.status.value})>"
