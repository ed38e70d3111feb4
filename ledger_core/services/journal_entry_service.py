"""
Journal entry service: the posting engine.

This service enforces the ledger's fundamental rules:
1. Every posted entry balances (debits = credits, per currency)
2. Posted entries are immutable; corrections are reversals
3. Lines may only reference active accounts of the same tenant
4. With period locking enabled, nothing posts into a closed period
5. Entry numbers are handed out only to entries that actually post

None of these methods commit. They are meant to be called inside
TransactionRunner.with_transaction, which is what makes the entry
save and the settings counter save land together or not at all.
"""

import logging

from ledger_core.config import get_settings
from ledger_core.context import UseCaseContext
from ledger_core.domain import (
    AccountingSettings,
    EntrySource,
    JournalEntry,
    JournalLine,
)
from ledger_core.errors import NotFoundError
from ledger_core.numbering import allocate_unique_number
from ledger_core.ports import (
    AccountingSettingsRepository,
    Clock,
    IdGenerator,
    JournalEntryRepository,
)
from ledger_core.schemas.journal import (
    CreateJournalEntryInput,
    JournalLineInput,
    ListJournalEntriesInput,
    ReverseJournalEntryInput,
    UpdateJournalEntryInput,
)
from ledger_core.services.ledger_account_service import LedgerAccountService
from ledger_core.services.period_service import PeriodService
from ledger_core.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class JournalEntryService:

    def __init__(
        self,
        entries: JournalEntryRepository,
        settings_repo: AccountingSettingsRepository,
        account_service: LedgerAccountService,
        period_service: PeriodService,
        settings_service: SettingsService,
        clock: Clock,
        ids: IdGenerator,
    ):
        self.entries = entries
        self.settings_repo = settings_repo
        self.account_service = account_service
        self.period_service = period_service
        self.settings_service = settings_service
        self.clock = clock
        self.ids = ids

    def _build_lines(
        self, lines: list[JournalLineInput], base_currency: str
    ) -> list[JournalLine]:
        return [
            JournalLine(
                id=self.ids.new_id(),
                ledger_account_id=line.ledger_account_id,
                direction=line.direction,
                amount_cents=line.amount_cents,
                currency=line.currency or base_currency,
                line_memo=line.line_memo,
                reference=line.reference,
                tags=tuple(line.tags),
            )
            for line in lines
        ]

    def get(self, tenant_id: str, entry_id: str, for_update: bool = False) -> JournalEntry:
        entry = self.entries.find_by_id(tenant_id, entry_id, for_update=for_update)
        if not entry:
            raise NotFoundError(f"journal entry {entry_id} not found")
        return entry

    def create_draft(self, ctx: UseCaseContext, request: CreateJournalEntryInput) -> JournalEntry:
        """
        Create a DRAFT entry.

        Balance is not required yet. Every line must reference an
        active account of the tenant.
        """
        settings = self.settings_service.get_required(ctx.tenant_id)
        entry = JournalEntry.create_draft(
            id=self.ids.new_id(),
            tenant_id=ctx.tenant_id,
            posting_date=request.posting_date,
            memo=request.memo,
            lines=self._build_lines(request.lines, settings.base_currency),
            now=self.clock.now(),
            created_by=ctx.user_id,
            source=EntrySource(
                source_type=request.source_type,
                source_id=request.source_id,
                source_ref=request.source_ref,
            ),
        )
        self.account_service.require_active(ctx.tenant_id, entry.account_ids())
        self.entries.save(entry)
        logger.info("Created draft journal entry %s for tenant %s", entry.id, ctx.tenant_id)
        return entry

    def update_draft(self, ctx: UseCaseContext, request: UpdateJournalEntryInput) -> JournalEntry:
        entry = self.get(ctx.tenant_id, request.entry_id)

        lines = None
        if request.lines is not None:
            settings = self.settings_service.get_required(ctx.tenant_id)
            lines = self._build_lines(request.lines, settings.base_currency)

        source = None
        if any(v is not None for v in (
            request.source_type, request.source_id, request.source_ref
        )):
            current = entry.snapshot().source
            source = EntrySource(
                source_type=request.source_type or current.source_type,
                source_id=request.source_id or current.source_id,
                source_ref=request.source_ref or current.source_ref,
            )

        entry.update_draft(
            now=self.clock.now(),
            posting_date=request.posting_date,
            memo=request.memo,
            lines=lines,
            source=source,
        )
        if lines is not None:
            self.account_service.require_active(ctx.tenant_id, entry.account_ids())
        self.entries.save(entry)
        return entry

    def post(self, ctx: UseCaseContext, entry_id: str) -> JournalEntry:
        """
        Post a draft entry.

        All checks run before a number is allocated, so a rejected
        entry leaves the counter untouched. The settings row is locked
        before the entry is read, so concurrent posts queue up behind it.
        """
        settings = self.settings_service.get_required(ctx.tenant_id, for_update=True)
        entry = self.get(ctx.tenant_id, entry_id, for_update=True)
        self._post(ctx, entry, settings)
        return entry

    def _post(
        self,
        ctx: UseCaseContext,
        entry: JournalEntry,
        settings: AccountingSettings,
    ) -> None:
        entry.ensure_postable()
        self.account_service.require_active(ctx.tenant_id, entry.account_ids())
        self.period_service.ensure_open_for_posting(settings, entry.posting_date)

        entry_number = allocate_unique_number(
            settings.allocate_entry_number,
            lambda candidate: self.entries.is_entry_number_taken(
                ctx.tenant_id, candidate
            ),
            max_attempts=get_settings().NUMBER_ALLOCATION_MAX_ATTEMPTS,
        )
        entry.post(
            entry_number=entry_number,
            posted_by=ctx.user_id,
            now=self.clock.now(),
        )
        self.entries.save(entry)
        self.settings_repo.save(settings)
        logger.info(
            "Posted journal entry %s (%s) for tenant %s",
            entry.entry_number, entry.id, ctx.tenant_id,
        )

    def reverse(self, ctx: UseCaseContext, request: ReverseJournalEntryInput) -> JournalEntry:
        """
        Reverse a posted entry and return the reversal.

        The reversal is posted immediately with its own number and
        the two entries are linked both ways. Both saves and the
        counter save must share one transaction.
        """
        settings = self.settings_service.get_required(ctx.tenant_id, for_update=True)
        original = self.get(ctx.tenant_id, request.entry_id, for_update=True)
        original.ensure_reversible()

        now = self.clock.now()
        reversal = original.build_reversal(
            id=self.ids.new_id(),
            line_ids=[self.ids.new_id() for _ in original.lines],
            reversal_date=request.reversal_date or now.date(),
            memo=request.memo,
            created_by=ctx.user_id,
            now=now,
        )
        self._post(ctx, reversal, settings)

        original.mark_reversed(reversal_entry_id=reversal.id, now=now)
        self.entries.save(original)
        logger.info(
            "Reversed journal entry %s with %s for tenant %s",
            original.entry_number, reversal.entry_number, ctx.tenant_id,
        )
        return reversal

    def list(
        self, tenant_id: str, request: ListJournalEntriesInput
    ) -> tuple[list[JournalEntry], int]:
        return self.entries.list(
            tenant_id,
            status=request.status,
            from_date=request.from_date,
            to_date=request.to_date,
            account_id=request.account_id,
            source_type=request.source_type,
            source_id=request.source_id,
            search=request.search,
            offset=(request.page - 1) * request.page_size,
            limit=request.page_size,
        )
