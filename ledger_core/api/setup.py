"""
Accounting setup and settings API endpoints.
"""

from fastapi import APIRouter, Depends

from ledger_core.api.deps import get_accounting_app, get_context, unwrap_or_raise
from ledger_core.context import UseCaseContext
from ledger_core.services.accounting_application import AccountingApplication
from ledger_core.schemas.settings import (
    AccountingSettingsResponse,
    GetSetupStatusInput,
    SetupAccountingInput,
    SetupAccountingResponse,
    SetupStatusResponse,
    UpdateAccountingSettingsInput,
)

router = APIRouter(prefix="/accounting", tags=["Setup"])


@router.get("/setup-status", response_model=SetupStatusResponse)
def get_setup_status(
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.get_setup_status(ctx, GetSetupStatusInput()))


@router.post("/setup", response_model=SetupAccountingResponse, status_code=201)
def setup_accounting(
    request: SetupAccountingInput,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """
    Set up accounting for the tenant.

    Seeds the chosen chart of accounts template and opens the
    current fiscal year. Returns 409 if already set up.
    """
    return unwrap_or_raise(app.setup_accounting(ctx, request))


@router.patch("/settings", response_model=AccountingSettingsResponse)
def update_accounting_settings(
    request: UpdateAccountingSettingsInput,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.update_accounting_settings(ctx, request))
