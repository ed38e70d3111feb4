"""Aggregate snapshot -> response DTO mapping."""

from ledger_core.domain import (
    AccountingPeriod,
    AccountingSettings,
    JournalEntry,
    LedgerAccount,
)
from ledger_core.schemas.journal import JournalEntryResponse, JournalLineResponse
from ledger_core.schemas.ledger_account import LedgerAccountResponse
from ledger_core.schemas.period import AccountingPeriodResponse
from ledger_core.schemas.settings import AccountingSettingsResponse


def account_to_response(account: LedgerAccount) -> LedgerAccountResponse:
    return LedgerAccountResponse.model_validate(account.snapshot())


def period_to_response(period: AccountingPeriod) -> AccountingPeriodResponse:
    return AccountingPeriodResponse.model_validate(period.snapshot())


def settings_to_response(settings: AccountingSettings) -> AccountingSettingsResponse:
    return AccountingSettingsResponse.model_validate(settings.snapshot())


def entry_to_response(entry: JournalEntry) -> JournalEntryResponse:
    state = entry.snapshot()
    totals = entry.totals_by_currency().values()
    return JournalEntryResponse(
        id=state.id,
        tenant_id=state.tenant_id,
        entry_number=state.entry_number,
        status=state.status,
        posting_date=state.posting_date,
        memo=state.memo,
        lines=[
            JournalLineResponse(
                id=line.id,
                ledger_account_id=line.ledger_account_id,
                direction=line.direction,
                amount_cents=line.amount_cents,
                currency=line.currency,
                line_memo=line.line_memo,
                reference=line.reference,
                tags=list(line.tags),
            )
            for line in state.lines
        ],
        source_type=state.source.source_type,
        source_id=state.source.source_id,
        source_ref=state.source.source_ref,
        reverses_entry_id=state.reverses_entry_id,
        reversed_by_entry_id=state.reversed_by_entry_id,
        is_reversed=entry.is_reversed,
        total_debits_cents=sum(d for d, _ in totals),
        total_credits_cents=sum(c for _, c in totals),
        created_by=state.created_by,
        posted_by=state.posted_by,
        posted_at=state.posted_at,
        reversed_at=state.reversed_at,
        created_at=state.created_at,
        updated_at=state.updated_at,
    )
