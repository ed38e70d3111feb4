"""
Pydantic schemas for tenant accounting settings and setup.

Setup happens once per tenant: it creates the settings record,
seeds a chart of accounts and opens the first fiscal year.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from ledger_core.schemas.ledger_account import LedgerAccountResponse
from ledger_core.schemas.period import AccountingPeriodResponse


class SetupAccountingInput(BaseModel):
    base_currency: str | None = Field(default=None, min_length=3, max_length=3)
    fiscal_year_start_month_day: str = "01-01"
    period_locking_enabled: bool = False
    entry_number_prefix: str | None = Field(default=None, max_length=20)
    chart_template: Literal[
        "minimal", "freelancer", "smallBusiness", "standard", "empty"
    ] = "standard"


class UpdateAccountingSettingsInput(BaseModel):
    base_currency: str | None = Field(default=None, min_length=3, max_length=3)
    fiscal_year_start_month_day: str | None = None
    period_locking_enabled: bool | None = None
    entry_number_prefix: str | None = Field(default=None, max_length=20)


class GetSetupStatusInput(BaseModel):
    pass


class AccountingSettingsResponse(BaseModel):
    id: str
    tenant_id: str
    base_currency: str
    fiscal_year_start_month_day: str
    period_locking_enabled: bool
    entry_number_prefix: str
    next_entry_number: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SetupStatusResponse(BaseModel):
    is_setup: bool
    settings: AccountingSettingsResponse | None = None
    account_count: int = 0


class SetupAccountingResponse(BaseModel):
    settings: AccountingSettingsResponse
    accounts: list[LedgerAccountResponse]
    periods: list[AccountingPeriodResponse]
