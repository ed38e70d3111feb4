"""SQLAlchemy implementation of the accounting settings repository."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_core.domain import AccountingSettings, AccountingSettingsView
from ledger_core.models.accounting_settings import AccountingSettingsModel
from ledger_core.ports import AccountingSettingsRepository
from ledger_core.repositories.utils import as_utc


def _to_domain(row: AccountingSettingsModel) -> AccountingSettings:
    return AccountingSettings.rehydrate(AccountingSettingsView(
        id=row.id,
        tenant_id=row.tenant_id,
        base_currency=row.base_currency,
        fiscal_year_start_month_day=row.fiscal_year_start_month_day,
        period_locking_enabled=row.period_locking_enabled,
        entry_number_prefix=row.entry_number_prefix,
        next_entry_number=row.next_entry_number,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    ))


class SqlAlchemyAccountingSettingsRepository(AccountingSettingsRepository):

    def __init__(self, db: Session):
        self.db = db

    def find_by_tenant(self, tenant_id, for_update=False):
        stmt = select(AccountingSettingsModel).where(
            AccountingSettingsModel.tenant_id == tenant_id
        )
        if for_update:
            # Row lock on PostgreSQL; SQLite ignores it and relies on
            # its database-level write lock instead.
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        row = self.db.execute(stmt).scalar_one_or_none()
        return _to_domain(row) if row else None

    def save(self, settings: AccountingSettings) -> None:
        state = settings.snapshot()
        row = self.db.get(AccountingSettingsModel, state.id)
        if row is None:
            row = AccountingSettingsModel(id=state.id, tenant_id=state.tenant_id)
            self.db.add(row)
        row.base_currency = state.base_currency
        row.fiscal_year_start_month_day = state.fiscal_year_start_month_day
        row.period_locking_enabled = state.period_locking_enabled
        row.entry_number_prefix = state.entry_number_prefix
        row.next_entry_number = state.next_entry_number
        row.created_at = state.created_at
        row.updated_at = state.updated_at
        self.db.flush()
