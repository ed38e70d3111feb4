"""
Pydantic schemas for financial reports.

Every amount is integer cents in the tenant's base currency,
which each report carries in its currency field.
"""

from datetime import date

from pydantic import BaseModel

from ledger_core.models.enums import AccountType, EntryDirection


# --- Request Schemas ---

class TrialBalanceInput(BaseModel):
    from_date: date
    to_date: date


class GeneralLedgerInput(BaseModel):
    account_id: str
    from_date: date
    to_date: date


class ProfitLossInput(BaseModel):
    from_date: date
    to_date: date


class BalanceSheetInput(BaseModel):
    as_of_date: date


# --- Response Schemas ---

class TrialBalanceRow(BaseModel):
    account_id: str
    code: str
    name: str
    account_type: AccountType
    debits_cents: int
    credits_cents: int
    balance_cents: int


class TrialBalanceResponse(BaseModel):
    from_date: date
    to_date: date
    currency: str
    rows: list[TrialBalanceRow]
    total_debits_cents: int
    total_credits_cents: int


class GeneralLedgerLine(BaseModel):
    entry_id: str
    entry_number: str | None
    posting_date: date
    memo: str
    line_memo: str | None
    reference: str | None
    direction: EntryDirection
    amount_cents: int
    running_balance_cents: int


class GeneralLedgerResponse(BaseModel):
    account_id: str
    code: str
    name: str
    account_type: AccountType
    from_date: date
    to_date: date
    currency: str
    opening_balance_cents: int
    lines: list[GeneralLedgerLine]
    closing_balance_cents: int


class ReportAccountRow(BaseModel):
    """One account line of the profit & loss or balance sheet."""
    account_id: str
    code: str
    name: str
    balance_cents: int


class ProfitLossResponse(BaseModel):
    from_date: date
    to_date: date
    currency: str
    income: list[ReportAccountRow]
    expenses: list[ReportAccountRow]
    total_income_cents: int
    total_expenses_cents: int
    net_profit_cents: int


class BalanceSheetResponse(BaseModel):
    as_of_date: date
    currency: str
    assets: list[ReportAccountRow]
    liabilities: list[ReportAccountRow]
    equity: list[ReportAccountRow]
    total_assets_cents: int
    total_liabilities_cents: int
    total_equity_cents: int
    net_income_cents: int
    total_liabilities_and_equity_cents: int
    is_balanced: bool
