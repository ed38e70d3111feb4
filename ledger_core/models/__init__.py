"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from ledger_core.models.base import Base
from ledger_core.models.enums import (
    AccountType,
    EntryDirection,
    EntryStatus,
    PeriodStatus,
)
from ledger_core.models.ledger_account import LedgerAccountModel
from ledger_core.models.journal_entry import JournalEntryModel, JournalLineModel
from ledger_core.models.accounting_period import AccountingPeriodModel
from ledger_core.models.accounting_settings import AccountingSettingsModel
from ledger_core.models.idempotency_key import IdempotencyRecord

__all__ = [
    "Base",
    "AccountType",
    "EntryDirection",
    "EntryStatus",
    "PeriodStatus",
    "LedgerAccountModel",
    "JournalEntryModel",
    "JournalLineModel",
    "AccountingPeriodModel",
    "AccountingSettingsModel",
    "IdempotencyRecord",
]
