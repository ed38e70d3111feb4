"""
Builds an AccountingApplication on top of a SQLAlchemy session.

The application itself only knows the ports; this is the one
place that picks the SQLAlchemy adapters for them.
"""

from sqlalchemy.orm import Session

from ledger_core.ports import Clock, IdGenerator, SystemClock, UuidGenerator
from ledger_core.repositories import (
    SqlAlchemyAccountingPeriodRepository,
    SqlAlchemyAccountingSettingsRepository,
    SqlAlchemyIdempotencyStore,
    SqlAlchemyJournalEntryRepository,
    SqlAlchemyLedgerAccountRepository,
    SqlAlchemyReportQuery,
    SqlAlchemyTransactionRunner,
)
from ledger_core.services.accounting_application import AccountingApplication


def build_accounting_application(
    db: Session,
    clock: Clock | None = None,
    ids: IdGenerator | None = None,
    transactions: SqlAlchemyTransactionRunner | None = None,
) -> AccountingApplication:
    """
    Wire every port to its SQLAlchemy adapter over one session.

    Pass `transactions` to share a runner with a caller that opens
    its own unit of work (see ledger_core.purchasing).
    """
    clock = clock or SystemClock()
    return AccountingApplication(
        accounts=SqlAlchemyLedgerAccountRepository(db),
        entries=SqlAlchemyJournalEntryRepository(db),
        periods=SqlAlchemyAccountingPeriodRepository(db),
        settings=SqlAlchemyAccountingSettingsRepository(db),
        reports=SqlAlchemyReportQuery(db),
        idempotency=SqlAlchemyIdempotencyStore(db, clock),
        transactions=transactions or SqlAlchemyTransactionRunner(db),
        clock=clock,
        ids=ids or UuidGenerator(),
    )
