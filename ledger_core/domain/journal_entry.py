"""
Journal entry aggregate.

An entry is a group of lines that must balance: for every
currency, the sum of DEBIT amounts equals the sum of CREDIT
amounts. Amounts are positive integers in minor units (cents).
Nothing here rounds; callers hand in already-rounded values.

Lifecycle:
    DRAFT   -> mutable, may be unbalanced while being edited
    POSTED  -> immutable; may be reversed exactly once, which
               links it to a new, already-posted reversal entry
"""

from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from ledger_core.errors import ValidationError
from ledger_core.models.enums import EntryDirection, EntryStatus


@dataclass(frozen=True)
class JournalLine:
    """One debit or credit against a ledger account."""
    id: str
    ledger_account_id: str
    direction: EntryDirection
    amount_cents: int
    currency: str
    line_memo: str | None = None
    reference: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EntrySource:
    """Link to the business document that produced an entry."""
    source_type: str | None = None
    source_id: str | None = None
    source_ref: str | None = None


@dataclass(frozen=True)
class JournalEntryView:
    """Read-only snapshot of a journal entry."""
    id: str
    tenant_id: str
    entry_number: str | None
    status: EntryStatus
    posting_date: date
    memo: str
    lines: tuple[JournalLine, ...]
    source: EntrySource
    reverses_entry_id: str | None
    reversed_by_entry_id: str | None
    created_by: str | None
    posted_by: str | None
    posted_at: datetime | None
    reversed_at: datetime | None
    created_at: datetime
    updated_at: datetime


def _validate_lines(lines) -> tuple[JournalLine, ...]:
    lines = tuple(lines or ())
    if not lines:
        raise ValidationError("journal entry must have at least one line")
    for line in lines:
        amount = line.amount_cents
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError(
                f"line amount must be an integer number of cents, got {amount!r}"
            )
        if amount <= 0:
            raise ValidationError(
                f"line amount must be positive, got {amount}"
            )
        if not line.ledger_account_id:
            raise ValidationError("every line needs a ledger account")
        if not line.currency:
            raise ValidationError("every line needs a currency")
    return lines


class JournalEntry:

    def __init__(self, state: JournalEntryView):
        self._state = state

    @classmethod
    def create_draft(
        cls,
        *,
        id: str,
        tenant_id: str,
        posting_date: date,
        memo: str,
        lines,
        now: datetime,
        created_by: str | None = None,
        source: EntrySource | None = None,
        reverses_entry_id: str | None = None,
    ) -> "JournalEntry":
        if posting_date is None:
            raise ValidationError("posting date is required")
        return cls(JournalEntryView(
            id=id,
            tenant_id=tenant_id,
            entry_number=None,
            status=EntryStatus.DRAFT,
            posting_date=posting_date,
            memo=memo or "",
            lines=_validate_lines(lines),
            source=source or EntrySource(),
            reverses_entry_id=reverses_entry_id,
            reversed_by_entry_id=None,
            created_by=created_by,
            posted_by=None,
            posted_at=None,
            reversed_at=None,
            created_at=now,
            updated_at=now,
        ))

    @classmethod
    def rehydrate(cls, state: JournalEntryView) -> "JournalEntry":
        return cls(state)

    # --- Reads ---

    @property
    def id(self) -> str:
        return self._state.id

    @property
    def tenant_id(self) -> str:
        return self._state.tenant_id

    @property
    def entry_number(self) -> str | None:
        return self._state.entry_number

    @property
    def status(self) -> EntryStatus:
        return self._state.status

    @property
    def posting_date(self) -> date:
        return self._state.posting_date

    @property
    def lines(self) -> tuple[JournalLine, ...]:
        return self._state.lines

    @property
    def is_draft(self) -> bool:
        return self._state.status == EntryStatus.DRAFT

    @property
    def is_posted(self) -> bool:
        return self._state.status == EntryStatus.POSTED

    @property
    def is_reversed(self) -> bool:
        return self._state.reversed_by_entry_id is not None

    def snapshot(self) -> JournalEntryView:
        return self._state

    def account_ids(self) -> set[str]:
        return {line.ledger_account_id for line in self._state.lines}

    def totals_by_currency(self) -> dict[str, tuple[int, int]]:
        """Return {currency: (debits_cents, credits_cents)}."""
        debits = defaultdict(int)
        credits = defaultdict(int)
        for line in self._state.lines:
            if line.direction == EntryDirection.DEBIT:
                debits[line.currency] += line.amount_cents
            else:
                credits[line.currency] += line.amount_cents
        currencies = sorted(set(debits) | set(credits))
        return {c: (debits[c], credits[c]) for c in currencies}

    def is_balanced(self) -> bool:
        return all(d == c for d, c in self.totals_by_currency().values())

    # --- Operations ---

    def update_draft(
        self,
        *,
        now: datetime,
        posting_date: date | None = None,
        memo: str | None = None,
        lines=None,
        source: EntrySource | None = None,
    ) -> None:
        """Edit a draft. Posted entries are immutable."""
        if not self.is_draft:
            raise ValidationError(
                f"only draft entries can be edited; entry "
                f"{self._state.entry_number} is {self._state.status.value}"
            )
        changes = {}
        if posting_date is not None:
            changes["posting_date"] = posting_date
        if memo is not None:
            changes["memo"] = memo
        if lines is not None:
            changes["lines"] = _validate_lines(lines)
        if source is not None:
            changes["source"] = source
        self._state = replace(self._state, updated_at=now, **changes)

    def ensure_postable(self) -> None:
        """
        Check everything post() checks that does not need the
        entry number. Called before a number is allocated so a
        rejected entry never consumes one.
        """
        if not self.is_draft:
            raise ValidationError(
                f"only draft entries can be posted; entry "
                f"{self._state.entry_number} is already {self._state.status.value}"
            )
        _validate_lines(self._state.lines)
        if not self.is_balanced():
            details = ", ".join(
                f"{currency} debits={d} credits={c}"
                for currency, (d, c) in self.totals_by_currency().items()
                if d != c
            )
            raise ValidationError(f"entry is not balanced ({details})")

    def post(self, *, entry_number: str, posted_by: str | None, now: datetime) -> None:
        self.ensure_postable()
        if not entry_number:
            raise ValidationError("entry number is required to post")
        self._state = replace(
            self._state,
            status=EntryStatus.POSTED,
            entry_number=entry_number,
            posted_by=posted_by,
            posted_at=now,
            updated_at=now,
        )

    def build_reversal(
        self,
        *,
        id: str,
        line_ids: list[str],
        reversal_date: date,
        memo: str | None,
        created_by: str | None,
        now: datetime,
    ) -> "JournalEntry":
        """
        Build the draft that offsets this entry: same accounts and
        amounts, every direction flipped. The caller posts it.
        """
        self.ensure_reversible()
        if len(line_ids) != len(self._state.lines):
            raise ValueError("need exactly one new line id per original line")
        lines = [
            replace(line, id=line_id, direction=line.direction.flipped())
            for line, line_id in zip(self._state.lines, line_ids)
        ]
        return JournalEntry.create_draft(
            id=id,
            tenant_id=self._state.tenant_id,
            posting_date=reversal_date,
            memo=memo or f"Reversal of {self._state.entry_number}",
            lines=lines,
            now=now,
            created_by=created_by,
            source=self._state.source,
            reverses_entry_id=self._state.id,
        )

    def ensure_reversible(self) -> None:
        if not self.is_posted:
            raise ValidationError(
                "only posted entries can be reversed"
            )
        if self.is_reversed:
            raise ValidationError(
                f"entry {self._state.entry_number} has already been reversed"
            )

    def mark_reversed(self, *, reversal_entry_id: str, now: datetime) -> None:
        self.ensure_reversible()
        self._state = replace(
            self._state,
            reversed_by_entry_id=reversal_entry_id,
            reversed_at=now,
            updated_at=now,
        )

    def __repr__(self) -> str:
        label = self._state.entry_number or self._state.id
        return f"<JournalEntry {label} ({self._state.status.value})>"
