"""
Ports: the abstract collaborators the accounting core depends on.

The core never imports a storage library. Everything it reads or
writes goes through one of these interfaces, and every method is
parameterised by tenant_id so no implementation can be asked for
another tenant's data by accident.

SQLAlchemy implementations live in ledger_core.repositories.
"""

import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, TypeVar

from ledger_core.domain import (
    AccountingPeriod,
    AccountingSettings,
    JournalEntry,
    LedgerAccount,
)
from ledger_core.models.enums import AccountType, EntryDirection, EntryStatus

if TYPE_CHECKING:
    from ledger_core.context import UseCaseContext
    from ledger_core.results import Result
    from ledger_core.schemas.journal import (
        CreateJournalEntryInput,
        JournalEntryResponse,
        PostJournalEntryInput,
    )

T = TypeVar("T")


# --- Repositories ---

class LedgerAccountRepository(ABC):

    @abstractmethod
    def find_by_id(self, tenant_id: str, account_id: str) -> LedgerAccount | None:
        ...

    @abstractmethod
    def find_by_code(self, tenant_id: str, code: str) -> LedgerAccount | None:
        ...

    @abstractmethod
    def find_by_system_key(self, tenant_id: str, key: str) -> LedgerAccount | None:
        ...

    @abstractmethod
    def find_many(self, tenant_id: str, account_ids: set[str]) -> dict[str, LedgerAccount]:
        ...

    @abstractmethod
    def list(
        self,
        tenant_id: str,
        *,
        account_type: AccountType | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> list[LedgerAccount]:
        ...

    @abstractmethod
    def count(self, tenant_id: str) -> int:
        ...

    @abstractmethod
    def save(self, account: LedgerAccount) -> None:
        ...


class JournalEntryRepository(ABC):

    @abstractmethod
    def find_by_id(
        self, tenant_id: str, entry_id: str, for_update: bool = False
    ) -> JournalEntry | None:
        """With for_update, lock the row until the transaction ends."""

    @abstractmethod
    def is_entry_number_taken(self, tenant_id: str, entry_number: str) -> bool:
        ...

    @abstractmethod
    def list(
        self,
        tenant_id: str,
        *,
        status: EntryStatus | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        account_id: str | None = None,
        source_type: str | None = None,
        source_id: str | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[JournalEntry], int]:
        """Return one page of entries and the total match count."""

    @abstractmethod
    def save(self, entry: JournalEntry) -> None:
        ...


class AccountingPeriodRepository(ABC):

    @abstractmethod
    def find_by_id(self, tenant_id: str, period_id: str) -> AccountingPeriod | None:
        ...

    @abstractmethod
    def find_period_containing_date(
        self, tenant_id: str, day: date
    ) -> AccountingPeriod | None:
        ...

    @abstractmethod
    def list(self, tenant_id: str) -> list[AccountingPeriod]:
        ...

    @abstractmethod
    def save(self, period: AccountingPeriod) -> None:
        ...


class AccountingSettingsRepository(ABC):

    @abstractmethod
    def find_by_tenant(
        self, tenant_id: str, for_update: bool = False
    ) -> AccountingSettings | None:
        """
        Load the tenant's settings.

        for_update=True must lock the record until the current
        transaction ends, so two concurrent postings cannot read
        the same next_entry_number.
        """

    @abstractmethod
    def save(self, settings: AccountingSettings) -> None:
        ...


# --- Report queries ---

@dataclass(frozen=True)
class AccountActivityTotals:
    account_id: str
    debits_cents: int
    credits_cents: int


@dataclass(frozen=True)
class LedgerLineRow:
    entry_id: str
    entry_number: str | None
    posting_date: date
    memo: str
    line_memo: str | None
    reference: str | None
    direction: EntryDirection
    amount_cents: int
    currency: str


class AccountingReportQueryPort(ABC):
    """Read-side queries over POSTED journal lines only."""

    @abstractmethod
    def get_account_activity_totals(
        self,
        tenant_id: str,
        *,
        from_date: date | None = None,
        to_date: date | None = None,
        account_ids: list[str] | None = None,
    ) -> list[AccountActivityTotals]:
        """Per-account debit/credit sums; both bounds inclusive, None = open."""

    @abstractmethod
    def list_ledger_lines(
        self,
        tenant_id: str,
        account_id: str,
        *,
        from_date: date,
        to_date: date,
    ) -> list[LedgerLineRow]:
        ...


# --- Infrastructure ---

class IdempotencyStore(ABC):
    """Key-value store keyed by (tenant_id, action_key, idempotency_key)."""

    @abstractmethod
    def get(self, tenant_id: str, action_key: str, idempotency_key: str) -> dict | None:
        ...

    @abstractmethod
    def store(
        self, tenant_id: str, action_key: str, idempotency_key: str, body: dict
    ) -> None:
        ...


class TransactionRunner(ABC):

    @abstractmethod
    def with_transaction(self, fn: Callable[[], T]) -> T:
        """
        Run fn atomically: every write made inside it is persisted
        together, or none is. Nested calls join the outer unit.
        """

    @property
    @abstractmethod
    def in_transaction(self) -> bool:
        """True while a with_transaction() call is running."""


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        ...


class IdGenerator(ABC):

    @abstractmethod
    def new_id(self) -> str:
        ...


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class UuidGenerator(IdGenerator):

    def new_id(self) -> str:
        return str(uuid.uuid4())


# --- Contract offered to other modules ---

class JournalPostingPort(ABC):
    """
    What other modules (purchasing, inventory) may ask of the ledger.

    Implemented by AccountingApplication. Callers must treat a failed
    Result as a failure of their own operation.
    """

    @abstractmethod
    def create_journal_entry(
        self, ctx: "UseCaseContext", request: "CreateJournalEntryInput"
    ) -> "Result[JournalEntryResponse]":
        ...

    @abstractmethod
    def post_journal_entry(
        self, ctx: "UseCaseContext", request: "PostJournalEntryInput"
    ) -> "Result[JournalEntryResponse]":
        ...
