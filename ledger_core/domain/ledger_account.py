"""
Ledger account aggregate (chart of accounts).

Accounts are never deleted. An account that should no longer
receive postings is deactivated; its history stays reportable.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from ledger_core.errors import ValidationError
from ledger_core.models.enums import AccountType


@dataclass(frozen=True)
class LedgerAccountView:
    """Read-only snapshot of a ledger account."""
    id: str
    tenant_id: str
    code: str
    name: str
    account_type: AccountType
    is_active: bool
    system_account_key: str | None
    description: str | None
    created_at: datetime
    updated_at: datetime


class LedgerAccount:

    def __init__(self, state: LedgerAccountView):
        self._state = state

    @classmethod
    def create(
        cls,
        *,
        id: str,
        tenant_id: str,
        code: str,
        name: str,
        account_type: AccountType,
        now: datetime,
        description: str | None = None,
        system_account_key: str | None = None,
        is_active: bool = True,
    ) -> "LedgerAccount":
        code = (code or "").strip()
        name = (name or "").strip()
        if not code:
            raise ValidationError("account code is required")
        if not name:
            raise ValidationError("account name is required")
        return cls(LedgerAccountView(
            id=id,
            tenant_id=tenant_id,
            code=code,
            name=name,
            account_type=AccountType(account_type),
            is_active=is_active,
            system_account_key=system_account_key or None,
            description=description,
            created_at=now,
            updated_at=now,
        ))

    @classmethod
    def rehydrate(cls, state: LedgerAccountView) -> "LedgerAccount":
        return cls(state)

    # --- Reads ---

    @property
    def id(self) -> str:
        return self._state.id

    @property
    def tenant_id(self) -> str:
        return self._state.tenant_id

    @property
    def code(self) -> str:
        return self._state.code

    @property
    def name(self) -> str:
        return self._state.name

    @property
    def account_type(self) -> AccountType:
        return self._state.account_type

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    @property
    def system_account_key(self) -> str | None:
        return self._state.system_account_key

    def snapshot(self) -> LedgerAccountView:
        return self._state

    # --- Operations ---

    def update(
        self,
        *,
        now: datetime,
        name: str | None = None,
        description: str | None = None,
    ) -> None:
        changes = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("account name cannot be empty")
            changes["name"] = name.strip()
        if description is not None:
            changes["description"] = description
        if changes:
            self._state = replace(self._state, updated_at=now, **changes)

    def activate(self, now: datetime) -> None:
        self._state = replace(self._state, is_active=True, updated_at=now)

    def deactivate(self, now: datetime) -> None:
        self._state = replace(self._state, is_active=False, updated_at=now)

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.code} ({self.account_type.value})>"
