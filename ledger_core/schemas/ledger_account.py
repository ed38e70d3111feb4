"""
Pydantic schemas for the chart of accounts.

Inputs only check shape. Business rules (unique codes, non-empty
names after trimming) are enforced by the LedgerAccount aggregate
and reported through Result failures.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ledger_core.models.enums import AccountType


# --- Request Schemas ---

class CreateLedgerAccountInput(BaseModel):
    code: str = Field(max_length=20)
    name: str = Field(max_length=100)
    account_type: AccountType
    description: str | None = None
    system_account_key: str | None = Field(default=None, max_length=50)
    is_active: bool = True


class LedgerAccountPatch(BaseModel):
    """
    Partial update. Fields left as None are not touched.

    is_active toggles the account through activate()/deactivate().
    """
    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    is_active: bool | None = None


class UpdateLedgerAccountInput(LedgerAccountPatch):
    account_id: str


class ListLedgerAccountsInput(BaseModel):
    account_type: AccountType | None = None
    is_active: bool | None = None
    search: str | None = None


# --- Response Schemas ---

class LedgerAccountResponse(BaseModel):
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

    model_config = {"from_attributes": True}
