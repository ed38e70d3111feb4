"""
Accounting period API endpoints.
"""

from fastapi import APIRouter, Depends

from ledger_core.api.deps import get_accounting_app, get_context, unwrap_or_raise
from ledger_core.context import UseCaseContext
from ledger_core.models.enums import PeriodStatus
from ledger_core.services.accounting_application import AccountingApplication
from ledger_core.schemas.period import (
    AccountingPeriodResponse,
    ClosePeriodInput,
    ListPeriodsInput,
    ReopenPeriodInput,
)

router = APIRouter(prefix="/accounting/periods", tags=["Periods"])


@router.get("", response_model=list[AccountingPeriodResponse])
def list_periods(
    status: PeriodStatus | None = None,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.list_periods(ctx, ListPeriodsInput(status=status)))


@router.post("/{period_id}/close", response_model=AccountingPeriodResponse)
def close_period(
    period_id: str,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """
    Close a period.

    With period locking enabled, nothing can be posted into a
    closed period until it is reopened.
    """
    return unwrap_or_raise(
        app.close_period(ctx, ClosePeriodInput(period_id=period_id))
    )


@router.post("/{period_id}/reopen", response_model=AccountingPeriodResponse)
def reopen_period(
    period_id: str,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(
        app.reopen_period(ctx, ReopenPeriodInput(period_id=period_id))
    )
