"""
Cost of goods sold posting.

When stock leaves inventory at cost:

    Debit   COGS        amount
    Credit  Inventory   amount
"""

import logging
from dataclasses import dataclass
from datetime import date

from ledger_core.context import UseCaseContext
from ledger_core.models.enums import EntryDirection
from ledger_core.ports import JournalPostingPort, TransactionRunner
from ledger_core.purchasing.errors import PurchasingPostingError
from ledger_core.schemas.journal import (
    CreateJournalEntryInput,
    JournalEntryResponse,
    JournalLineInput,
    PostJournalEntryInput,
)

logger = logging.getLogger(__name__)

SOURCE_TYPE = "COGS"


@dataclass
class CogsPostingRequest:
    source_id: str
    source_ref: str
    posting_date: date
    amount_cents: int
    cogs_account_id: str
    inventory_account_id: str
    memo: str | None = None


class CogsPostingService:

    def __init__(
        self,
        posting: JournalPostingPort,
        transactions: TransactionRunner | None = None,
    ):
        self.posting = posting
        self.transactions = transactions

    def post_cogs(self, ctx: UseCaseContext, request: CogsPostingRequest) -> JournalEntryResponse:
        if self.transactions is None:
            return self._post(ctx, request)
        return self.transactions.with_transaction(lambda: self._post(ctx, request))

    def _post(self, ctx: UseCaseContext, request: CogsPostingRequest) -> JournalEntryResponse:
        created = self.posting.create_journal_entry(ctx, CreateJournalEntryInput(
            posting_date=request.posting_date,
            memo=request.memo or f"Cost of goods sold for {request.source_ref}",
            lines=[
                JournalLineInput(
                    ledger_account_id=request.cogs_account_id,
                    direction=EntryDirection.DEBIT,
                    amount_cents=request.amount_cents,
                    reference=request.source_ref,
                ),
                JournalLineInput(
                    ledger_account_id=request.inventory_account_id,
                    direction=EntryDirection.CREDIT,
                    amount_cents=request.amount_cents,
                    reference=request.source_ref,
                ),
            ],
            source_type=SOURCE_TYPE,
            source_id=request.source_id,
            source_ref=request.source_ref,
            idempotency_key=f"cogs:{request.source_id}:create",
        ))
        if not created.success:
            raise PurchasingPostingError(
                f"could not create COGS entry for {request.source_ref}", created.error
            )

        posted = self.posting.post_journal_entry(ctx, PostJournalEntryInput(
            entry_id=created.value.id,
            idempotency_key=f"cogs:{request.source_id}:post",
        ))
        if not posted.success:
            raise PurchasingPostingError(
                f"could not post COGS entry for {request.source_ref}", posted.error
            )

        logger.info(
            "Posted COGS %d cents for %s as %s",
            request.amount_cents, request.source_ref, posted.value.entry_number,
        )
        return posted.value
