"""SQLAlchemy implementation of the accounting period repository."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_core.domain import AccountingPeriod, AccountingPeriodView
from ledger_core.models.accounting_period import AccountingPeriodModel
from ledger_core.ports import AccountingPeriodRepository
from ledger_core.repositories.utils import as_utc


def _to_domain(row: AccountingPeriodModel) -> AccountingPeriod:
    return AccountingPeriod.rehydrate(AccountingPeriodView(
        id=row.id,
        tenant_id=row.tenant_id,
        fiscal_year_id=row.fiscal_year_id,
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
        status=row.status,
        closed_at=as_utc(row.closed_at),
        closed_by=row.closed_by,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    ))


class SqlAlchemyAccountingPeriodRepository(AccountingPeriodRepository):

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, tenant_id, period_id):
        row = self.db.execute(
            select(AccountingPeriodModel).where(
                AccountingPeriodModel.tenant_id == tenant_id,
                AccountingPeriodModel.id == period_id,
            )
        ).scalar_one_or_none()
        return _to_domain(row) if row else None

    def find_period_containing_date(self, tenant_id, day):
        # Periods never overlap, so at most one row can match.
        row = self.db.execute(
            select(AccountingPeriodModel).where(
                AccountingPeriodModel.tenant_id == tenant_id,
                AccountingPeriodModel.start_date <= day,
                AccountingPeriodModel.end_date >= day,
            ).order_by(AccountingPeriodModel.start_date).limit(1)
        ).scalar_one_or_none()
        return _to_domain(row) if row else None

    def list(self, tenant_id):
        rows = self.db.execute(
            select(AccountingPeriodModel)
            .where(AccountingPeriodModel.tenant_id == tenant_id)
            .order_by(AccountingPeriodModel.start_date)
        ).scalars().all()
        return [_to_domain(row) for row in rows]

    def save(self, period: AccountingPeriod) -> None:
        state = period.snapshot()
        row = self.db.get(AccountingPeriodModel, state.id)
        if row is None:
            row = AccountingPeriodModel(id=state.id, tenant_id=state.tenant_id)
            self.db.add(row)
        row.fiscal_year_id = state.fiscal_year_id
        row.name = state.name
        row.start_date = state.start_date
        row.end_date = state.end_date
        row.status = state.status
        row.closed_at = state.closed_at
        row.closed_by = state.closed_by
        row.created_at = state.created_at
        row.updated_at = state.updated_at
        self.db.flush()
