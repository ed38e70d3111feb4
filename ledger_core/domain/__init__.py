"""Domain aggregates: plain Python, no persistence code."""

from ledger_core.domain.accounting_period import AccountingPeriod, AccountingPeriodView
from ledger_core.domain.accounting_settings import (
    AccountingSettings,
    AccountingSettingsView,
)
from ledger_core.domain.journal_entry import (
    EntrySource,
    JournalEntry,
    JournalEntryView,
    JournalLine,
)
from ledger_core.domain.ledger_account import LedgerAccount, LedgerAccountView

__all__ = [
    "AccountingPeriod",
    "AccountingPeriodView",
    "AccountingSettings",
    "AccountingSettingsView",
    "EntrySource",
    "JournalEntry",
    "JournalEntryView",
    "JournalLine",
    "LedgerAccount",
    "LedgerAccountView",
]
