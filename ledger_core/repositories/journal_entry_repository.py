"""
SQLAlchemy implementation of the journal entry repository.

An entry and its lines are saved as one unit. Lines are matched
by id: unchanged lines are updated in place, lines that are no
longer part of the entry are deleted through the delete-orphan
cascade on JournalEntryModel.lines.
"""

from sqlalchemy import select, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_core.domain import (
    EntrySource,
    JournalEntry,
    JournalEntryView,
    JournalLine,
)
from ledger_core.errors import ConflictError, ValidationError
from ledger_core.models.enums import EntryStatus
from ledger_core.models.journal_entry import JournalEntryModel, JournalLineModel
from ledger_core.ports import JournalEntryRepository
from ledger_core.repositories.utils import as_utc


def _is_entry_number_clash(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    # PostgreSQL names the constraint, SQLite names the columns
    return (
        "uq_journal_entries_tenant_number" in message
        or "journal_entries.entry_number" in message
    )


def _to_domain(row: JournalEntryModel) -> JournalEntry:
    lines = tuple(
        JournalLine(
            id=line.id,
            ledger_account_id=line.ledger_account_id,
            direction=line.direction,
            amount_cents=line.amount_cents,
            currency=line.currency,
            line_memo=line.line_memo,
            reference=line.reference,
            tags=tuple(line.tags or ()),
        )
        for line in sorted(row.lines, key=lambda l: l.position)
    )
    return JournalEntry.rehydrate(JournalEntryView(
        id=row.id,
        tenant_id=row.tenant_id,
        entry_number=row.entry_number,
        status=row.status,
        posting_date=row.posting_date,
        memo=row.memo,
        lines=lines,
        source=EntrySource(
            source_type=row.source_type,
            source_id=row.source_id,
            source_ref=row.source_ref,
        ),
        reverses_entry_id=row.reverses_entry_id,
        reversed_by_entry_id=row.reversed_by_entry_id,
        created_by=row.created_by,
        posted_by=row.posted_by,
        posted_at=as_utc(row.posted_at),
        reversed_at=as_utc(row.reversed_at),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    ))


class SqlAlchemyJournalEntryRepository(JournalEntryRepository):

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, tenant_id, entry_id, for_update=False):
        stmt = select(JournalEntryModel).where(
            JournalEntryModel.tenant_id == tenant_id,
            JournalEntryModel.id == entry_id,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        row = self.db.execute(stmt).scalar_one_or_none()
        return _to_domain(row) if row else None

    def is_entry_number_taken(self, tenant_id, entry_number):
        found = self.db.execute(
            select(JournalEntryModel.id).where(
                JournalEntryModel.tenant_id == tenant_id,
                JournalEntryModel.entry_number == entry_number,
            ).limit(1)
        ).scalar_one_or_none()
        return found is not None

    def list(
        self,
        tenant_id,
        *,
        status=None,
        from_date=None,
        to_date=None,
        account_id=None,
        source_type=None,
        source_id=None,
        search=None,
        offset=0,
        limit=50,
    ):
        stmt = select(JournalEntryModel).where(
            JournalEntryModel.tenant_id == tenant_id
        )
        if status is not None:
            stmt = stmt.where(JournalEntryModel.status == status)
        if from_date is not None:
            stmt = stmt.where(JournalEntryModel.posting_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(JournalEntryModel.posting_date <= to_date)
        if account_id is not None:
            stmt = stmt.where(JournalEntryModel.id.in_(
                select(JournalLineModel.entry_id).where(
                    JournalLineModel.tenant_id == tenant_id,
                    JournalLineModel.ledger_account_id == account_id,
                )
            ))
        if source_type is not None:
            stmt = stmt.where(JournalEntryModel.source_type == source_type)
        if source_id is not None:
            stmt = stmt.where(JournalEntryModel.source_id == source_id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                JournalEntryModel.memo.ilike(pattern),
                JournalEntryModel.entry_number.ilike(pattern),
            ))

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        rows = self.db.execute(
            stmt.order_by(
                JournalEntryModel.posting_date.desc(),
                JournalEntryModel.created_at.desc(),
                JournalEntryModel.id,
            ).offset(offset).limit(limit)
        ).scalars().all()
        return [_to_domain(row) for row in rows], total

    def save(self, entry: JournalEntry) -> None:
        state = entry.snapshot()
        row = self.db.get(JournalEntryModel, state.id)
        if row is None:
            row = JournalEntryModel(id=state.id, tenant_id=state.tenant_id)
            self.db.add(row)
        else:
            self._claim_transition(row, state)

        row.entry_number = state.entry_number
        row.status = state.status
        row.posting_date = state.posting_date
        row.memo = state.memo
        row.source_type = state.source.source_type
        row.source_id = state.source.source_id
        row.source_ref = state.source.source_ref
        row.reverses_entry_id = state.reverses_entry_id
        row.reversed_by_entry_id = state.reversed_by_entry_id
        row.created_by = state.created_by
        row.posted_by = state.posted_by
        row.posted_at = state.posted_at
        row.reversed_at = state.reversed_at
        row.created_at = state.created_at
        row.updated_at = state.updated_at

        existing = {line.id: line for line in row.lines}
        lines = []
        for position, line in enumerate(state.lines):
            line_row = existing.get(line.id) or JournalLineModel(
                id=line.id, tenant_id=state.tenant_id
            )
            line_row.position = position
            line_row.ledger_account_id = line.ledger_account_id
            line_row.direction = line.direction
            line_row.amount_cents = line.amount_cents
            line_row.currency = line.currency
            line_row.line_memo = line.line_memo
            line_row.reference = line.reference
            line_row.tags = list(line.tags)
            lines.append(line_row)
        row.lines = lines

        try:
            self.db.flush()
        except IntegrityError as exc:
            if not _is_entry_number_clash(exc):
                raise
            raise ConflictError(
                f"entry number {state.entry_number} is already in use"
            ) from exc

    def _claim_transition(self, row: JournalEntryModel, state: JournalEntryView) -> None:
        """
        Compare-and-set the status or reversal link against the stored row.

        The row in the session may have been read before another
        transaction posted or reversed the same entry. The conditional
        UPDATE matches nothing in that case, and the write is refused
        instead of overwriting the other transaction's result.
        """
        if row.status == EntryStatus.DRAFT:
            condition = JournalEntryModel.status == EntryStatus.DRAFT
            values = {"status": state.status, "updated_at": state.updated_at}
            message = f"journal entry {state.id} is no longer a draft"
        elif row.reversed_by_entry_id is None and state.reversed_by_entry_id is not None:
            condition = JournalEntryModel.reversed_by_entry_id.is_(None)
            values = {"reversed_by_entry_id": state.reversed_by_entry_id}
            message = f"entry {state.entry_number} has already been reversed"
        else:
            return

        result = self.db.execute(
            update(JournalEntryModel)
            .where(JournalEntryModel.id == state.id, condition)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ValidationError(message)
