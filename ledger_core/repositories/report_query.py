"""
Report queries over posted journal lines.

Aggregation is pushed into the database: the report service
only ever sees per-account sums or one account's lines, never
the whole journal.
"""

from sqlalchemy import select, func, case
from sqlalchemy.orm import Session

from ledger_core.models.enums import EntryDirection, EntryStatus
from ledger_core.models.journal_entry import JournalEntryModel, JournalLineModel
from ledger_core.ports import (
    AccountActivityTotals,
    AccountingReportQueryPort,
    LedgerLineRow,
)


class SqlAlchemyReportQuery(AccountingReportQueryPort):

    def __init__(self, db: Session):
        self.db = db

    def _posted_lines(self, stmt, tenant_id, from_date, to_date):
        stmt = stmt.select_from(JournalLineModel).join(
            JournalEntryModel, JournalLineModel.entry_id == JournalEntryModel.id
        ).where(
            JournalEntryModel.tenant_id == tenant_id,
            JournalEntryModel.status == EntryStatus.POSTED,
        )
        if from_date is not None:
            stmt = stmt.where(JournalEntryModel.posting_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(JournalEntryModel.posting_date <= to_date)
        return stmt

    def get_account_activity_totals(
        self, tenant_id, *, from_date=None, to_date=None, account_ids=None
    ):
        debit_sum = func.sum(case(
            (JournalLineModel.direction == EntryDirection.DEBIT,
             JournalLineModel.amount_cents),
            else_=0,
        ))
        credit_sum = func.sum(case(
            (JournalLineModel.direction == EntryDirection.CREDIT,
             JournalLineModel.amount_cents),
            else_=0,
        ))
        stmt = select(
            JournalLineModel.ledger_account_id,
            debit_sum.label("debits"),
            credit_sum.label("credits"),
        )
        stmt = self._posted_lines(stmt, tenant_id, from_date, to_date)
        if account_ids is not None:
            stmt = stmt.where(JournalLineModel.ledger_account_id.in_(account_ids))
        stmt = stmt.group_by(JournalLineModel.ledger_account_id)

        return [
            AccountActivityTotals(
                account_id=row.ledger_account_id,
                debits_cents=int(row.debits or 0),
                credits_cents=int(row.credits or 0),
            )
            for row in self.db.execute(stmt)
        ]

    def list_ledger_lines(self, tenant_id, account_id, *, from_date, to_date):
        stmt = select(
            JournalEntryModel.id,
            JournalEntryModel.entry_number,
            JournalEntryModel.posting_date,
            JournalEntryModel.memo,
            JournalLineModel.line_memo,
            JournalLineModel.reference,
            JournalLineModel.direction,
            JournalLineModel.amount_cents,
            JournalLineModel.currency,
        )
        stmt = self._posted_lines(stmt, tenant_id, from_date, to_date).where(
            JournalLineModel.ledger_account_id == account_id
        ).order_by(
            JournalEntryModel.posting_date,
            JournalEntryModel.posted_at,
            JournalEntryModel.entry_number,
            JournalLineModel.position,
        )
        return [
            LedgerLineRow(
                entry_id=row.id,
                entry_number=row.entry_number,
                posting_date=row.posting_date,
                memo=row.memo,
                line_memo=row.line_memo,
                reference=row.reference,
                direction=row.direction,
                amount_cents=row.amount_cents,
                currency=row.currency,
            )
            for row in self.db.execute(stmt)
        ]
