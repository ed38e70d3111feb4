"""SQLAlchemy adapters for the ports in ledger_core.ports."""

from ledger_core.repositories.ledger_account_repository import (
    SqlAlchemyLedgerAccountRepository,
)
from ledger_core.repositories.journal_entry_repository import (
    SqlAlchemyJournalEntryRepository,
)
from ledger_core.repositories.accounting_period_repository import (
    SqlAlchemyAccountingPeriodRepository,
)
from ledger_core.repositories.accounting_settings_repository import (
    SqlAlchemyAccountingSettingsRepository,
)
from ledger_core.repositories.report_query import SqlAlchemyReportQuery
from ledger_core.repositories.idempotency_store import SqlAlchemyIdempotencyStore
from ledger_core.repositories.transaction_runner import SqlAlchemyTransactionRunner

__all__ = [
    "SqlAlchemyLedgerAccountRepository",
    "SqlAlchemyJournalEntryRepository",
    "SqlAlchemyAccountingPeriodRepository",
    "SqlAlchemyAccountingSettingsRepository",
    "SqlAlchemyReportQuery",
    "SqlAlchemyIdempotencyStore",
    "SqlAlchemyTransactionRunner",
]
