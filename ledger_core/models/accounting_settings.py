"""
Accounting settings table, one row per tenant.

The row doubles as the entry number counter, so posting code
reads it with SELECT ... FOR UPDATE.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from ledger_core.models.base import Base


class AccountingSettingsModel(Base):

    __tablename__ = "accounting_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False
    )
    base_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    fiscal_year_start_month_day: Mapped[str] = mapped_column(
        String(5), nullable=False, default="01-01"
    )
    period_locking_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    entry_number_prefix: Mapped[str] = mapped_column(
        String(20), nullable=False, default="JE-"
    )
    next_entry_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        return f"<AccountingSettingsModel tenant={self.tenant_id}>"
