"""
Pydantic schemas for journal entries.

Amounts are integer cents. The schemas deliberately accept any
integer: whether an amount is positive, and whether the lines
balance, is decided by the JournalEntry aggregate so that every
caller gets the same ValidationError for the same mistake.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from ledger_core.models.enums import EntryDirection, EntryStatus


# --- Request Schemas ---

class JournalLineInput(BaseModel):
    """A single debit or credit. currency defaults to the tenant's base currency."""
    ledger_account_id: str
    direction: EntryDirection
    amount_cents: int
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    line_memo: str | None = None
    reference: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class CreateJournalEntryInput(BaseModel):
    posting_date: date
    memo: str = ""
    lines: list[JournalLineInput]
    source_type: str | None = None
    source_id: str | None = None
    source_ref: str | None = None
    idempotency_key: str | None = None


class JournalEntryPatch(BaseModel):
    """Fields left as None keep their current value."""
    posting_date: date | None = None
    memo: str | None = None
    lines: list[JournalLineInput] | None = None
    source_type: str | None = None
    source_id: str | None = None
    source_ref: str | None = None


class UpdateJournalEntryInput(JournalEntryPatch):
    entry_id: str


class PostJournalEntryInput(BaseModel):
    entry_id: str
    idempotency_key: str | None = None


class ReversalDetails(BaseModel):
    """reversal_date defaults to today; memo defaults to "Reversal of <number>"."""
    reversal_date: date | None = None
    memo: str | None = None


class ReverseJournalEntryInput(ReversalDetails):
    entry_id: str
    idempotency_key: str | None = None


class GetJournalEntryInput(BaseModel):
    entry_id: str


class ListJournalEntriesInput(BaseModel):
    status: EntryStatus | None = None
    from_date: date | None = None
    to_date: date | None = None
    account_id: str | None = None
    source_type: str | None = None
    source_id: str | None = None
    search: str | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=200)


# --- Response Schemas ---

class JournalLineResponse(BaseModel):
    id: str
    ledger_account_id: str
    direction: EntryDirection
    amount_cents: int
    currency: str
    line_memo: str | None
    reference: str | None
    tags: list[str]

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    id: str
    tenant_id: str
    entry_number: str | None
    status: EntryStatus
    posting_date: date
    memo: str
    lines: list[JournalLineResponse]
    source_type: str | None
    source_id: str | None
    source_ref: str | None
    reverses_entry_id: str | None
    reversed_by_entry_id: str | None
    is_reversed: bool
    total_debits_cents: int
    total_credits_cents: int
    created_by: str | None
    posted_by: str | None
    posted_at: datetime | None
    reversed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class JournalEntryListResponse(BaseModel):
    items: list[JournalEntryResponse]
    total: int
    page: int
    page_size: int
