"""
Vendor bill posting.

Turns an approved vendor bill into a posted journal entry:

    Debit   expense account of each bill line   line amount
    Credit  accounts payable                    bill total

Purchasing only sees the ledger through JournalPostingPort.
Account resolution (which expense account, which AP account)
is purchasing's business and arrives on the bill itself.
"""

import logging
from dataclasses import dataclass, field
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

SOURCE_TYPE = "VendorBill"


@dataclass
class VendorBillLine:
    expense_account_id: str
    amount_cents: int
    description: str | None = None


@dataclass
class VendorBill:
    id: str
    bill_number: str
    vendor_name: str
    bill_date: date
    payable_account_id: str
    lines: list[VendorBillLine] = field(default_factory=list)
    currency: str | None = None

    @property
    def total_cents(self) -> int:
        return sum(line.amount_cents for line in self.lines)


class VendorBillPostingService:
    """
    Posts vendor bills to the ledger.

    When a TransactionRunner is given, create and post run in one
    unit of work: a bill whose entry cannot be posted leaves no
    draft behind.
    """

    def __init__(
        self,
        posting: JournalPostingPort,
        transactions: TransactionRunner | None = None,
    ):
        self.posting = posting
        self.transactions = transactions

    def post_vendor_bill(self, ctx: UseCaseContext, bill: VendorBill) -> JournalEntryResponse:
        if self.transactions is None:
            return self._post(ctx, bill)
        return self.transactions.with_transaction(lambda: self._post(ctx, bill))

    def _post(self, ctx: UseCaseContext, bill: VendorBill) -> JournalEntryResponse:
        lines = [
            JournalLineInput(
                ledger_account_id=line.expense_account_id,
                direction=EntryDirection.DEBIT,
                amount_cents=line.amount_cents,
                currency=bill.currency,
                line_memo=line.description,
                reference=bill.bill_number,
            )
            for line in bill.lines
        ]
        lines.append(JournalLineInput(
            ledger_account_id=bill.payable_account_id,
            direction=EntryDirection.CREDIT,
            amount_cents=bill.total_cents,
            currency=bill.currency,
            line_memo=f"Payable to {bill.vendor_name}",
            reference=bill.bill_number,
        ))

        created = self.posting.create_journal_entry(ctx, CreateJournalEntryInput(
            posting_date=bill.bill_date,
            memo=f"Vendor bill {bill.bill_number} - {bill.vendor_name}",
            lines=lines,
            source_type=SOURCE_TYPE,
            source_id=bill.id,
            source_ref=bill.bill_number,
            idempotency_key=f"vendor-bill:{bill.id}:create",
        ))
        if not created.success:
            raise PurchasingPostingError(
                f"could not create journal entry for bill {bill.bill_number}",
                created.error,
            )

        posted = self.posting.post_journal_entry(ctx, PostJournalEntryInput(
            entry_id=created.value.id,
            idempotency_key=f"vendor-bill:{bill.id}:post",
        ))
        if not posted.success:
            raise PurchasingPostingError(
                f"could not post journal entry for bill {bill.bill_number}",
                posted.error,
            )

        logger.info(
            "Posted vendor bill %s as %s", bill.bill_number, posted.value.entry_number
        )
        return posted.value
