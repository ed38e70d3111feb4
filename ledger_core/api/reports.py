"""
Financial report API endpoints.

All reports are read-only and computed from posted entries.
"""

from datetime import date

from fastapi import APIRouter, Depends

from ledger_core.api.deps import get_accounting_app, get_context, unwrap_or_raise
from ledger_core.context import UseCaseContext
from ledger_core.services.accounting_application import AccountingApplication
from ledger_core.schemas.reports import (
    BalanceSheetInput,
    BalanceSheetResponse,
    GeneralLedgerInput,
    GeneralLedgerResponse,
    ProfitLossInput,
    ProfitLossResponse,
    TrialBalanceInput,
    TrialBalanceResponse,
)

router = APIRouter(prefix="/accounting/reports", tags=["Reports"])


@router.get("/trial-balance", response_model=TrialBalanceResponse)
def get_trial_balance(
    from_date: date,
    to_date: date,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.get_trial_balance(
        ctx, TrialBalanceInput(from_date=from_date, to_date=to_date)
    ))


@router.get("/general-ledger/{account_id}", response_model=GeneralLedgerResponse)
def get_general_ledger(
    account_id: str,
    from_date: date,
    to_date: date,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.get_general_ledger(ctx, GeneralLedgerInput(
        account_id=account_id, from_date=from_date, to_date=to_date
    )))


@router.get("/profit-loss", response_model=ProfitLossResponse)
def get_profit_loss(
    from_date: date,
    to_date: date,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.get_profit_loss(
        ctx, ProfitLossInput(from_date=from_date, to_date=to_date)
    ))


@router.get("/balance-sheet", response_model=BalanceSheetResponse)
def get_balance_sheet(
    as_of_date: date,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.get_balance_sheet(
        ctx, BalanceSheetInput(as_of_date=as_of_date)
    ))
