"""Business logic services."""

from ledger_core.services.accounting_application import AccountingApplication
from ledger_core.services.journal_entry_service import JournalEntryService
from ledger_core.services.ledger_account_service import LedgerAccountService
from ledger_core.services.period_service import PeriodService
from ledger_core.services.report_service import ReportService
from ledger_core.services.settings_service import SettingsService

__all__ = [
    "AccountingApplication",
    "JournalEntryService",
    "LedgerAccountService",
    "PeriodService",
    "ReportService",
    "SettingsService",
]
