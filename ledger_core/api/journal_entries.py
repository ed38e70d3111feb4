"""
Journal entry API endpoints.

Creating, posting and reversing honour an Idempotency-Key header:
repeating a request with the same key returns the first response
instead of doing the work twice.
"""

from datetime import date

from fastapi import APIRouter, Depends, Header, Query

from ledger_core.api.deps import get_accounting_app, get_context, unwrap_or_raise
from ledger_core.context import UseCaseContext
from ledger_core.models.enums import EntryStatus
from ledger_core.services.accounting_application import AccountingApplication
from ledger_core.schemas.journal import (
    CreateJournalEntryInput,
    GetJournalEntryInput,
    JournalEntryListResponse,
    JournalEntryPatch,
    JournalEntryResponse,
    ListJournalEntriesInput,
    PostJournalEntryInput,
    ReversalDetails,
    ReverseJournalEntryInput,
    UpdateJournalEntryInput,
)

router = APIRouter(prefix="/accounting/journal-entries", tags=["Journal Entries"])


@router.post("", response_model=JournalEntryResponse, status_code=201)
def create_journal_entry(
    request: CreateJournalEntryInput,
    idempotency_key: str | None = Header(default=None),
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """Create a draft entry. It does not have to balance until it is posted."""
    if idempotency_key:
        request = request.model_copy(update={"idempotency_key": idempotency_key})
    return unwrap_or_raise(app.create_journal_entry(ctx, request))


@router.get("", response_model=JournalEntryListResponse)
def list_journal_entries(
    status: EntryStatus | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    account_id: str | None = None,
    source_type: str | None = None,
    source_id: str | None = None,
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=200),
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(app.list_journal_entries(ctx, ListJournalEntriesInput(
        status=status,
        from_date=from_date,
        to_date=to_date,
        account_id=account_id,
        source_type=source_type,
        source_id=source_id,
        search=search,
        page=page,
        page_size=page_size,
    )))


@router.get("/{entry_id}", response_model=JournalEntryResponse)
def get_journal_entry(
    entry_id: str,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    return unwrap_or_raise(
        app.get_journal_entry(ctx, GetJournalEntryInput(entry_id=entry_id))
    )


@router.patch("/{entry_id}", response_model=JournalEntryResponse)
def update_journal_entry(
    entry_id: str,
    request: JournalEntryPatch,
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """Edit a draft. Posted entries return 400."""
    return unwrap_or_raise(app.update_journal_entry(ctx, UpdateJournalEntryInput(
        entry_id=entry_id, **request.model_dump(exclude_unset=True)
    )))


@router.post("/{entry_id}/post", response_model=JournalEntryResponse)
def post_journal_entry(
    entry_id: str,
    idempotency_key: str | None = Header(default=None),
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """
    Post a draft entry.

    Returns 400 if the entry does not balance, references an
    inactive account, or falls into a closed period.
    """
    return unwrap_or_raise(app.post_journal_entry(ctx, PostJournalEntryInput(
        entry_id=entry_id, idempotency_key=idempotency_key
    )))


@router.post(
    "/{entry_id}/reverse",
    response_model=JournalEntryResponse,
    status_code=201,
)
def reverse_journal_entry(
    entry_id: str,
    request: ReversalDetails,
    idempotency_key: str | None = Header(default=None),
    ctx: UseCaseContext = Depends(get_context),
    app: AccountingApplication = Depends(get_accounting_app),
):
    """Reverse a posted entry. Responds with the new, already posted reversal."""
    return unwrap_or_raise(app.reverse_journal_entry(ctx, ReverseJournalEntryInput(
        entry_id=entry_id,
        idempotency_key=idempotency_key,
        **request.model_dump(),
    )))
