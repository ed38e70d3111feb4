"""
Ledger account service: the chart of accounts registry.

Besides the CRUD-style operations, this is where the journal
entry engine checks that the accounts it is about to post to
exist and are active.
"""

import logging

from ledger_core.domain import LedgerAccount
from ledger_core.errors import ConflictError, NotFoundError, ValidationError
from ledger_core.ports import Clock, IdGenerator, LedgerAccountRepository
from ledger_core.schemas.ledger_account import (
    CreateLedgerAccountInput,
    ListLedgerAccountsInput,
    UpdateLedgerAccountInput,
)

logger = logging.getLogger(__name__)


class LedgerAccountService:

    def __init__(
        self,
        accounts: LedgerAccountRepository,
        clock: Clock,
        ids: IdGenerator,
    ):
        self.accounts = accounts
        self.clock = clock
        self.ids = ids

    def create(self, tenant_id: str, request: CreateLedgerAccountInput) -> LedgerAccount:
        """
        Create a ledger account.

        Raises ConflictError if the code, or the system account
        key when one is given, is already used in this tenant.
        """
        code = request.code.strip()
        if self.accounts.find_by_code(tenant_id, code):
            raise ConflictError(f"ledger account code '{code}' already exists")

        if request.system_account_key and self.accounts.find_by_system_key(
            tenant_id, request.system_account_key
        ):
            raise ConflictError(
                f"system account key '{request.system_account_key}' "
                f"is already assigned"
            )

        account = LedgerAccount.create(
            id=self.ids.new_id(),
            tenant_id=tenant_id,
            code=code,
            name=request.name,
            account_type=request.account_type,
            description=request.description,
            system_account_key=request.system_account_key,
            is_active=request.is_active,
            now=self.clock.now(),
        )
        self.accounts.save(account)
        logger.info(
            "Created ledger account %s (%s) for tenant %s",
            account.code, account.account_type.value, tenant_id,
        )
        return account

    def update(self, tenant_id: str, request: UpdateLedgerAccountInput) -> LedgerAccount:
        account = self.get(tenant_id, request.account_id)
        now = self.clock.now()

        account.update(now=now, name=request.name, description=request.description)
        if request.is_active is True and not account.is_active:
            account.activate(now)
            logger.info("Activated ledger account %s", account.code)
        elif request.is_active is False and account.is_active:
            account.deactivate(now)
            logger.info("Deactivated ledger account %s", account.code)

        self.accounts.save(account)
        return account

    def get(self, tenant_id: str, account_id: str) -> LedgerAccount:
        account = self.accounts.find_by_id(tenant_id, account_id)
        if not account:
            raise NotFoundError(f"ledger account {account_id} not found")
        return account

    def list(self, tenant_id: str, request: ListLedgerAccountsInput) -> list[LedgerAccount]:
        return self.accounts.list(
            tenant_id,
            account_type=request.account_type,
            is_active=request.is_active,
            search=request.search,
        )

    def require_active(self, tenant_id: str, account_ids: set[str]) -> dict[str, LedgerAccount]:
        """
        Resolve account ids for posting.

        Raises ValidationError if any id is unknown in this tenant
        or refers to an inactive account.
        """
        found = self.accounts.find_many(tenant_id, account_ids)

        missing = sorted(account_ids - set(found))
        if missing:
            raise ValidationError(
                f"ledger accounts not found: {', '.join(missing)}"
            )

        for account in found.values():
            if not account.is_active:
                raise ValidationError(
                    f"ledger account {account.code} is inactive"
                )
        return found
