"""
Chart of accounts API endpoints.
"""

from fastapi import APIRouter, Depends

from ledger_core.api.deps import get_accounting_app, get_context, unwrap_or_raise
from ledger_core.context import UseCaseContext
from ledger_core.models.enums import AccountType
from ledger_core.services.accounting_application import AccountingApplication
from ledger_core.schemas.ledger_account import (
    CreateLedgerAccountInput,
    LedgerAccountPatch,
    LedgerAccountResponse,
    ListLedgerAccountsInput,
    UpdateLedgerAccountInput,
)

router = APIRouter(prefix="/accounting/accounts", tags=["Ledger Accounts"])


@router.post("", response_model=LedgerAccountResponse, status_code=201)
def create_ledger_account(
    request: CreateLedgerAccountInput,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """
    Create a ledger account.

    Returns 409 if the code is already used in this tenant.
    """
    return unwrap_or_raise(app.create_ledger_account(ctx, request))


@router.get("", response_model=list[LedgerAccountResponse])
def list_ledger_accounts(
    account_type: AccountType | None = None,
    is_active: bool | None = None,
    search: str | None = None,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """List accounts ordered by code."""
    return unwrap_or_raise(app.list_ledger_accounts(ctx, ListLedgerAccountsInput(
        account_type=account_type,
        is_active=is_active,
        search=search,
    )))


@router.patch("/{account_id}", response_model=LedgerAccountResponse)
def update_ledger_account(
    account_id: str,
    request: LedgerAccountPatch,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """
    Rename, describe, activate or deactivate an account.

    Accounts cannot be deleted; set is_active to false instead.
    """
    return unwrap_or_raise(app.update_ledger_account(ctx, UpdateLedgerAccountInput(
        account_id=account_id, **request.model_dump()
    )))
