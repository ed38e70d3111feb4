"""SQLAlchemy implementation of the ledger account repository."""

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ledger_core.domain import LedgerAccount, LedgerAccountView
from ledger_core.errors import ConflictError
from ledger_core.models.enums import AccountType
from ledger_core.models.ledger_account import LedgerAccountModel
from ledger_core.ports import LedgerAccountRepository
from ledger_core.repositories.utils import as_utc


def _to_domain(row: LedgerAccountModel) -> LedgerAccount:
    return LedgerAccount.rehydrate(LedgerAccountView(
        id=row.id,
        tenant_id=row.tenant_id,
        code=row.code,
        name=row.name,
        account_type=row.account_type,
        is_active=row.is_active,
        system_account_key=row.system_account_key,
        description=row.description,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    ))


class SqlAlchemyLedgerAccountRepository(LedgerAccountRepository):

    def __init__(self, db: Session):
        self.db = db

    def _query(self, tenant_id: str):
        return select(LedgerAccountModel).where(
            LedgerAccountModel.tenant_id == tenant_id
        )

    def find_by_id(self, tenant_id, account_id):
        row = self.db.execute(
            self._query(tenant_id).where(LedgerAccountModel.id == account_id)
        ).scalar_one_or_none()
        return _to_domain(row) if row else None

    def find_by_code(self, tenant_id, code):
        row = self.db.execute(
            self._query(tenant_id).where(LedgerAccountModel.code == code)
        ).scalar_one_or_none()
        return _to_domain(row) if row else None

    def find_by_system_key(self, tenant_id, key):
        row = self.db.execute(
            self._query(tenant_id).where(
                LedgerAccountModel.system_account_key == key
            )
        ).scalar_one_or_none()
        return _to_domain(row) if row else None

    def find_many(self, tenant_id, account_ids):
        if not account_ids:
            return {}
        rows = self.db.execute(
            self._query(tenant_id).where(LedgerAccountModel.id.in_(account_ids))
        ).scalars().all()
        return {row.id: _to_domain(row) for row in rows}

    def list(
        self,
        tenant_id,
        *,
        account_type: AccountType | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ):
        stmt = self._query(tenant_id)
        if account_type is not None:
            stmt = stmt.where(LedgerAccountModel.account_type == account_type)
        if is_active is not None:
            stmt = stmt.where(LedgerAccountModel.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                LedgerAccountModel.code.ilike(pattern),
                LedgerAccountModel.name.ilike(pattern),
            ))
        rows = self.db.execute(
            stmt.order_by(LedgerAccountModel.code)
        ).scalars().all()
        return [_to_domain(row) for row in rows]

    def count(self, tenant_id):
        return self.db.execute(
            select(func.count()).select_from(LedgerAccountModel).where(
                LedgerAccountModel.tenant_id == tenant_id
            )
        ).scalar_one()

    def save(self, account: LedgerAccount) -> None:
        state = account.snapshot()
        row = self.db.get(LedgerAccountModel, state.id)
        if row is None:
            row = LedgerAccountModel(id=state.id, tenant_id=state.tenant_id)
            self.db.add(row)
        row.code = state.code
        row.name = state.name
        row.account_type = state.account_type
        row.is_active = state.is_active
        row.system_account_key = state.system_account_key
        row.description = state.description
        row.created_at = state.created_at
        row.updated_at = state.updated_at
        try:
            self.db.flush()
        except IntegrityError as exc:
            raise ConflictError(
                f"ledger account code '{state.code}' already exists"
            ) from exc
