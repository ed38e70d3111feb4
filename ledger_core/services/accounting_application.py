"""
Accounting application: the public face of the ledger.

Every operation the rest of the system may call lives here.
Each one:
- Takes a UseCaseContext (tenant, user) and a Pydantic input
- Runs inside TransactionRunner.with_transaction
- Returns a Result; AccountingError subclasses are turned into
  Result.fail and logged, never raised to the caller

Anything else (a lost database connection, a bug) is not an
accounting failure. It is rolled back and propagates.

create, post and reverse accept an idempotency_key. A retry with
the same key gets the stored response back instead of a second
entry, a second number or a second reversal.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from pydantic import BaseModel

from ledger_core.context import UseCaseContext
from ledger_core.errors import AccountingError, IdempotencyKeyTaken, ValidationError
from ledger_core.ports import (
    AccountingPeriodRepository,
    AccountingReportQueryPort,
    AccountingSettingsRepository,
    Clock,
    IdempotencyStore,
    IdGenerator,
    JournalEntryRepository,
    JournalPostingPort,
    LedgerAccountRepository,
    TransactionRunner,
)
from ledger_core.results import Result
from ledger_core.schemas.journal import (
    CreateJournalEntryInput,
    GetJournalEntryInput,
    JournalEntryListResponse,
    JournalEntryResponse,
    ListJournalEntriesInput,
    PostJournalEntryInput,
    ReverseJournalEntryInput,
    UpdateJournalEntryInput,
)
from ledger_core.schemas.ledger_account import (
    CreateLedgerAccountInput,
    LedgerAccountResponse,
    ListLedgerAccountsInput,
    UpdateLedgerAccountInput,
)
from ledger_core.schemas.period import (
    AccountingPeriodResponse,
    ClosePeriodInput,
    ListPeriodsInput,
    ReopenPeriodInput,
)
from ledger_core.schemas.reports import (
    BalanceSheetInput,
    BalanceSheetResponse,
    GeneralLedgerInput,
    GeneralLedgerResponse,
    ProfitLossInput,
    ProfitLossResponse,
    TrialBalanceInput,
    TrialBalanceResponse,
)
from ledger_core.schemas.settings import (
    AccountingSettingsResponse,
    GetSetupStatusInput,
    SetupAccountingInput,
    SetupAccountingResponse,
    SetupStatusResponse,
    UpdateAccountingSettingsInput,
)
from ledger_core.services.journal_entry_service import JournalEntryService
from ledger_core.services.ledger_account_service import LedgerAccountService
from ledger_core.services.mappers import (
    account_to_response,
    entry_to_response,
    period_to_response,
    settings_to_response,
)
from ledger_core.services.period_service import PeriodService
from ledger_core.services.report_service import ReportService
from ledger_core.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class AccountingApplication(JournalPostingPort):

    def __init__(
        self,
        *,
        accounts: LedgerAccountRepository,
        entries: JournalEntryRepository,
        periods: AccountingPeriodRepository,
        settings: AccountingSettingsRepository,
        reports: AccountingReportQueryPort,
        idempotency: IdempotencyStore,
        transactions: TransactionRunner,
        clock: Clock,
        ids: IdGenerator,
    ):
        self.idempotency = idempotency
        self.transactions = transactions

        self.account_service = LedgerAccountService(accounts, clock, ids)
        self.period_service = PeriodService(periods, clock, ids)
        self.settings_service = SettingsService(
            settings, self.account_service, self.period_service, clock, ids
        )
        self.entry_service = JournalEntryService(
            entries,
            settings,
            self.account_service,
            self.period_service,
            self.settings_service,
            clock,
            ids,
        )
        self.report_service = ReportService(accounts, reports, self.settings_service)

    # --- Plumbing ---

    def _execute(
        self,
        action: str,
        ctx: UseCaseContext,
        fn: Callable[[], T],
    ) -> Result[T]:
        try:
            if ctx is None or not ctx.tenant_id:
                raise ValidationError("tenant id is required")
            return Result.ok(self.transactions.with_transaction(fn))
        except AccountingError as exc:
            logger.warning(
                "%s failed for tenant %s: [%s] %s",
                action,
                getattr(ctx, "tenant_id", None),
                exc.code,
                exc.message,
            )
            return Result.fail(exc)

    def _execute_idempotent(
        self,
        action: str,
        ctx: UseCaseContext,
        idempotency_key: str | None,
        response_type: type[M],
        fn: Callable[[], M],
    ) -> Result[M]:
        """
        Like _execute, but a repeated idempotency key replays the
        stored response.

        Two first requests with the same key can both miss the
        lookup. The loser's store() fails, its work is rolled back,
        and it replays what the winner stored.
        """
        if not idempotency_key:
            return self._execute(action, ctx, fn)

        def stored() -> M | None:
            body = self.idempotency.get(ctx.tenant_id, action, idempotency_key)
            if body is None:
                return None
            logger.info(
                "Replaying %s for tenant %s (idempotency key %s)",
                action, ctx.tenant_id, idempotency_key,
            )
            return response_type.model_validate(body)

        def run() -> M:
            replayed = stored()
            if replayed is not None:
                return replayed
            response = fn()
            self.idempotency.store(
                ctx.tenant_id,
                action,
                idempotency_key,
                response.model_dump(mode="json"),
            )
            return response

        nested = self.transactions.in_transaction
        result = self._execute(action, ctx, run)
        # Inside a caller's unit of work nothing was rolled back yet;
        # the caller fails, and its retry replays.
        if isinstance(result.error, IdempotencyKeyTaken) and not nested:
            return self._execute(action, ctx, stored)
        return result

    # --- Ledger accounts ---

    def create_ledger_account(
        self, ctx: UseCaseContext, request: CreateLedgerAccountInput
    ) -> Result[LedgerAccountResponse]:
        return self._execute("create_ledger_account", ctx, lambda: account_to_response(
            self.account_service.create(ctx.tenant_id, request)
        ))

    def update_ledger_account(
        self, ctx: UseCaseContext, request: UpdateLedgerAccountInput
    ) -> Result[LedgerAccountResponse]:
        return self._execute("update_ledger_account", ctx, lambda: account_to_response(
            self.account_service.update(ctx.tenant_id, request)
        ))

    def list_ledger_accounts(
        self, ctx: UseCaseContext, request: ListLedgerAccountsInput
    ) -> Result[list[LedgerAccountResponse]]:
        return self._execute("list_ledger_accounts", ctx, lambda: [
            account_to_response(a)
            for a in self.account_service.list(ctx.tenant_id, request)
        ])

    # --- Journal entries ---

    def create_journal_entry(
        self, ctx: UseCaseContext, request: CreateJournalEntryInput
    ) -> Result[JournalEntryResponse]:
        return self._execute_idempotent(
            "create_journal_entry", ctx, request.idempotency_key, JournalEntryResponse,
            lambda: entry_to_response(self.entry_service.create_draft(ctx, request)),
        )

    def update_journal_entry(
        self, ctx: UseCaseContext, request: UpdateJournalEntryInput
    ) -> Result[JournalEntryResponse]:
        return self._execute("update_journal_entry", ctx, lambda: entry_to_response(
            self.entry_service.update_draft(ctx, request)
        ))

    def post_journal_entry(
        self, ctx: UseCaseContext, request: PostJournalEntryInput
    ) -> Result[JournalEntryResponse]:
        return self._execute_idempotent(
            "post_journal_entry", ctx, request.idempotency_key, JournalEntryResponse,
            lambda: entry_to_response(self.entry_service.post(ctx, request.entry_id)),
        )

    def reverse_journal_entry(
        self, ctx: UseCaseContext, request: ReverseJournalEntryInput
    ) -> Result[JournalEntryResponse]:
        """Reverse a posted entry. The value is the new reversal entry."""
        return self._execute_idempotent(
            "reverse_journal_entry", ctx, request.idempotency_key, JournalEntryResponse,
            lambda: entry_to_response(self.entry_service.reverse(ctx, request)),
        )

    def list_journal_entries(
        self, ctx: UseCaseContext, request: ListJournalEntriesInput
    ) -> Result[JournalEntryListResponse]:
        def run():
            items, total = self.entry_service.list(ctx.tenant_id, request)
            return JournalEntryListResponse(
                items=[entry_to_response(e) for e in items],
                total=total,
                page=request.page,
                page_size=request.page_size,
            )
        return self._execute("list_journal_entries", ctx, run)

    def get_journal_entry(
        self, ctx: UseCaseContext, request: GetJournalEntryInput
    ) -> Result[JournalEntryResponse]:
        return self._execute("get_journal_entry", ctx, lambda: entry_to_response(
            self.entry_service.get(ctx.tenant_id, request.entry_id)
        ))

    # --- Reports ---

    def get_trial_balance(
        self, ctx: UseCaseContext, request: TrialBalanceInput
    ) -> Result[TrialBalanceResponse]:
        return self._execute("get_trial_balance", ctx, lambda: self.report_service.trial_balance(
            ctx.tenant_id, request.from_date, request.to_date
        ))

    def get_general_ledger(
        self, ctx: UseCaseContext, request: GeneralLedgerInput
    ) -> Result[GeneralLedgerResponse]:
        return self._execute("get_general_ledger", ctx, lambda: self.report_service.general_ledger(
            ctx.tenant_id, request.account_id, request.from_date, request.to_date
        ))

    def get_profit_loss(
        self, ctx: UseCaseContext, request: ProfitLossInput
    ) -> Result[ProfitLossResponse]:
        return self._execute("get_profit_loss", ctx, lambda: self.report_service.profit_loss(
            ctx.tenant_id, request.from_date, request.to_date
        ))

    def get_balance_sheet(
        self, ctx: UseCaseContext, request: BalanceSheetInput
    ) -> Result[BalanceSheetResponse]:
        return self._execute("get_balance_sheet", ctx, lambda: self.report_service.balance_sheet(
            ctx.tenant_id, request.as_of_date
        ))

    # --- Periods ---

    def close_period(
        self, ctx: UseCaseContext, request: ClosePeriodInput
    ) -> Result[AccountingPeriodResponse]:
        return self._execute("close_period", ctx, lambda: period_to_response(
            self.period_service.close(ctx.tenant_id, request.period_id, ctx.user_id)
        ))

    def reopen_period(
        self, ctx: UseCaseContext, request: ReopenPeriodInput
    ) -> Result[AccountingPeriodResponse]:
        return self._execute("reopen_period", ctx, lambda: period_to_response(
            self.period_service.reopen(ctx.tenant_id, request.period_id)
        ))

    def list_periods(
        self, ctx: UseCaseContext, request: ListPeriodsInput
    ) -> Result[list[AccountingPeriodResponse]]:
        return self._execute("list_periods", ctx, lambda: [
            period_to_response(p)
            for p in self.period_service.list_periods(ctx.tenant_id, request.status)
        ])

    # --- Settings and setup ---

    def update_accounting_settings(
        self, ctx: UseCaseContext, request: UpdateAccountingSettingsInput
    ) -> Result[AccountingSettingsResponse]:
        return self._execute("update_accounting_settings", ctx, lambda: settings_to_response(
            self.settings_service.update(ctx.tenant_id, request)
        ))

    def get_setup_status(
        self, ctx: UseCaseContext, request: GetSetupStatusInput | None = None
    ) -> Result[SetupStatusResponse]:
        def run():
            settings = self.settings_service.find(ctx.tenant_id)
            return SetupStatusResponse(
                is_setup=settings is not None,
                settings=settings_to_response(settings) if settings else None,
                account_count=self.account_service.accounts.count(ctx.tenant_id),
            )
        return self._execute("get_setup_status", ctx, run)

    def setup_accounting(
        self, ctx: UseCaseContext, request: SetupAccountingInput
    ) -> Result[SetupAccountingResponse]:
        def run():
            result = self.settings_service.setup(ctx.tenant_id, request)
            return SetupAccountingResponse(
                settings=settings_to_response(result.settings),
                accounts=[account_to_response(a) for a in result.accounts],
                periods=[period_to_response(p) for p in result.periods],
            )
        return self._execute("setup_accounting", ctx, run)
