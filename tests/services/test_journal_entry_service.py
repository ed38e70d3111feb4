"""
Comprehensive tests for journal entry operations.

Tests cover:
- Draft creation against active accounts
- Posting: balance rule, numbering, period locking
- Immutability after posting
- Reversal: symmetry, linkage, atomicity
- Idempotent replay
- Tenant isolation
- Listing and pagination
"""

from dataclasses import replace
from datetime import date

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ledger_core.context import UseCaseContext
from ledger_core.domain import JournalEntry
from ledger_core.errors import ConflictError, NotFoundError, ValidationError
from ledger_core.models.accounting_settings import AccountingSettingsModel
from ledger_core.models.enums import AccountType, EntryDirection, EntryStatus
from ledger_core.ports import UuidGenerator
from ledger_core.repositories import (
    SqlAlchemyAccountingPeriodRepository,
    SqlAlchemyAccountingSettingsRepository,
    SqlAlchemyIdempotencyStore,
    SqlAlchemyJournalEntryRepository,
    SqlAlchemyLedgerAccountRepository,
    SqlAlchemyReportQuery,
    SqlAlchemyTransactionRunner,
)
from ledger_core.schemas.journal import (
    CreateJournalEntryInput,
    GetJournalEntryInput,
    JournalLineInput,
    ListJournalEntriesInput,
    PostJournalEntryInput,
    ReverseJournalEntryInput,
    UpdateJournalEntryInput,
)
from ledger_core.schemas.ledger_account import (
    CreateLedgerAccountInput,
    UpdateLedgerAccountInput,
)
from ledger_core.schemas.period import ClosePeriodInput, ListPeriodsInput, ReopenPeriodInput
from ledger_core.schemas.reports import ProfitLossInput, TrialBalanceInput
from ledger_core.schemas.settings import SetupAccountingInput
from ledger_core.services.accounting_application import AccountingApplication

DEBIT = EntryDirection.DEBIT
CREDIT = EntryDirection.CREDIT


# --- Helpers ---

def setup_tenant(app, ctx, period_locking_enabled=False):
    """Set up accounting with an empty chart, plus Cash and Revenue."""
    app.setup_accounting(ctx, SetupAccountingInput(
        base_currency="EUR",
        chart_template="empty",
        period_locking_enabled=period_locking_enabled,
    )).unwrap()
    cash = app.create_ledger_account(ctx, CreateLedgerAccountInput(
        code="1000", name="Cash", account_type=AccountType.ASSET
    )).unwrap()
    revenue = app.create_ledger_account(ctx, CreateLedgerAccountInput(
        code="4000", name="Revenue", account_type=AccountType.INCOME
    )).unwrap()
    return cash, revenue


def sale_lines(cash, revenue, debit=10000, credit=10000):
    return [
        JournalLineInput(ledger_account_id=cash.id, direction=DEBIT, amount_cents=debit),
        JournalLineInput(ledger_account_id=revenue.id, direction=CREDIT, amount_cents=credit),
    ]


def create_entry(app, ctx, lines, posting_date=date(2025, 3, 10), **kwargs):
    return app.create_journal_entry(ctx, CreateJournalEntryInput(
        posting_date=posting_date, memo="Cash sale", lines=lines, **kwargs
    ))


def post(app, ctx, entry_id, **kwargs):
    return app.post_journal_entry(ctx, PostJournalEntryInput(entry_id=entry_id, **kwargs))


def create_and_post(app, ctx, lines, **kwargs):
    entry = create_entry(app, ctx, lines, **kwargs).unwrap()
    return post(app, ctx, entry.id).unwrap()


# --- Draft creation ---

class TestCreateJournalEntry:

    def test_draft_does_not_need_to_balance(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)

        result = create_entry(app_service, ctx, sale_lines(cash, revenue, credit=5000))

        assert result.success
        entry = result.value
        assert entry.status == EntryStatus.DRAFT
        assert entry.entry_number is None
        assert entry.created_by == "user-1"

    def test_line_currency_defaults_to_base_currency(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()
        assert {line.currency for line in entry.lines} == {"EUR"}

    def test_unknown_account_rejected(self, app_service, ctx):
        cash, _ = setup_tenant(app_service, ctx)

        result = create_entry(app_service, ctx, [
            JournalLineInput(ledger_account_id=cash.id, direction=DEBIT, amount_cents=100),
            JournalLineInput(ledger_account_id="nope", direction=CREDIT, amount_cents=100),
        ])

        assert isinstance(result.error, ValidationError)
        assert "nope" in result.error.message

    def test_inactive_account_rejected(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        app_service.update_ledger_account(ctx, UpdateLedgerAccountInput(
            account_id=revenue.id, is_active=False
        )).unwrap()

        result = create_entry(app_service, ctx, sale_lines(cash, revenue))

        assert isinstance(result.error, ValidationError)
        assert "inactive" in result.error.message

    def test_non_positive_amount_rejected(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        result = create_entry(app_service, ctx, sale_lines(cash, revenue, debit=0))
        assert isinstance(result.error, ValidationError)

    def test_requires_setup(self, app_service, ctx):
        result = create_entry(app_service, ctx, [
            JournalLineInput(ledger_account_id="a", direction=DEBIT, amount_cents=1),
        ])
        assert isinstance(result.error, NotFoundError)


# --- Posting ---

class TestPostJournalEntry:

    def test_post_assigns_first_number(self, app_service, ctx):
        """Cash sale posts as JE-1 and shows up in profit & loss."""
        cash, revenue = setup_tenant(app_service, ctx)

        posted = create_and_post(app_service, ctx, sale_lines(cash, revenue))

        assert posted.status == EntryStatus.POSTED
        assert posted.entry_number == "JE-1"
        assert posted.posted_by == "user-1"
        assert posted.total_debits_cents == posted.total_credits_cents == 10000

        pnl = app_service.get_profit_loss(ctx, ProfitLossInput(
            from_date=date(2025, 3, 1), to_date=date(2025, 3, 31)
        )).unwrap()
        assert pnl.total_income_cents == 10000
        assert pnl.net_profit_cents == 10000

    def test_numbers_are_sequential(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        numbers = [
            create_and_post(app_service, ctx, sale_lines(cash, revenue)).entry_number
            for _ in range(3)
        ]
        assert numbers == ["JE-1", "JE-2", "JE-3"]

    def test_unbalanced_entry_rejected_and_stays_draft(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue, credit=9000)).unwrap()

        result = post(app_service, ctx, entry.id)

        assert isinstance(result.error, ValidationError)
        assert "entry is not balanced" in result.error.message
        reloaded = app_service.get_journal_entry(
            ctx, GetJournalEntryInput(entry_id=entry.id)
        ).unwrap()
        assert reloaded.status == EntryStatus.DRAFT
        assert reloaded.entry_number is None

    def test_failed_post_does_not_burn_a_number(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        bad = create_entry(app_service, ctx, sale_lines(cash, revenue, credit=1)).unwrap()
        assert not post(app_service, ctx, bad.id).success

        good = create_and_post(app_service, ctx, sale_lines(cash, revenue))

        assert good.entry_number == "JE-1"

    def test_posting_to_deactivated_account_rejected(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()
        app_service.update_ledger_account(ctx, UpdateLedgerAccountInput(
            account_id=cash.id, is_active=False
        )).unwrap()

        result = post(app_service, ctx, entry.id)

        assert isinstance(result.error, ValidationError)

    def test_counter_behind_data_skips_taken_numbers(self, app_service, ctx, db_session):
        cash, revenue = setup_tenant(app_service, ctx)
        create_and_post(app_service, ctx, sale_lines(cash, revenue))

        # Simulate a counter that fell behind (restored backup, manual import)
        db_session.execute(
            update(AccountingSettingsModel)
            .where(AccountingSettingsModel.tenant_id == ctx.tenant_id)
            .values(next_entry_number=1)
        )
        db_session.commit()

        second = create_and_post(app_service, ctx, sale_lines(cash, revenue))

        assert second.entry_number == "JE-2"

    def test_unknown_entry_not_found(self, app_service, ctx):
        setup_tenant(app_service, ctx)
        assert isinstance(post(app_service, ctx, "missing").error, NotFoundError)


class TestImmutability:

    def test_posted_entry_cannot_be_updated(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        posted = create_and_post(app_service, ctx, sale_lines(cash, revenue))

        result = app_service.update_journal_entry(ctx, UpdateJournalEntryInput(
            entry_id=posted.id, lines=sale_lines(cash, revenue, 1, 1)
        ))

        assert isinstance(result.error, ValidationError)
        reloaded = app_service.get_journal_entry(
            ctx, GetJournalEntryInput(entry_id=posted.id)
        ).unwrap()
        assert [l.amount_cents for l in reloaded.lines] == [10000, 10000]

    def test_draft_update_replaces_lines(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue, credit=1)).unwrap()

        updated = app_service.update_journal_entry(ctx, UpdateJournalEntryInput(
            entry_id=entry.id,
            memo="Fixed",
            lines=sale_lines(cash, revenue, 2500, 2500),
        )).unwrap()

        assert updated.memo == "Fixed"
        assert [l.amount_cents for l in updated.lines] == [2500, 2500]
        assert post(app_service, ctx, entry.id).success


# --- Period locking ---

class TestPeriodLocking:

    def _march(self, app, ctx):
        periods = app.list_periods(ctx, ListPeriodsInput()).unwrap()
        return next(p for p in periods if p.name == "2025-03")

    def test_closed_period_blocks_posting_until_reopened(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx, period_locking_enabled=True)
        march = self._march(app_service, ctx)
        app_service.close_period(ctx, ClosePeriodInput(period_id=march.id)).unwrap()
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()

        blocked = post(app_service, ctx, entry.id)
        assert isinstance(blocked.error, ValidationError)
        assert "closed period 2025-03" in blocked.error.message

        app_service.reopen_period(ctx, ReopenPeriodInput(period_id=march.id)).unwrap()
        assert post(app_service, ctx, entry.id).value.entry_number == "JE-1"

    def test_no_period_for_date_blocks_posting(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx, period_locking_enabled=True)
        entry = create_entry(
            app_service, ctx, sale_lines(cash, revenue), posting_date=date(2030, 1, 1)
        ).unwrap()

        result = post(app_service, ctx, entry.id)

        assert "no accounting period covers" in result.error.message

    def test_closed_period_ignored_without_locking(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx, period_locking_enabled=False)
        march = self._march(app_service, ctx)
        app_service.close_period(ctx, ClosePeriodInput(period_id=march.id)).unwrap()

        posted = create_and_post(app_service, ctx, sale_lines(cash, revenue))

        assert posted.status == EntryStatus.POSTED

    def test_double_close_rejected(self, app_service, ctx):
        setup_tenant(app_service, ctx)
        march = self._march(app_service, ctx)
        app_service.close_period(ctx, ClosePeriodInput(period_id=march.id)).unwrap()

        again = app_service.close_period(ctx, ClosePeriodInput(period_id=march.id))
        reopen_open = app_service.reopen_period(
            ctx, ReopenPeriodInput(period_id=self._first_open(app_service, ctx).id)
        )

        assert isinstance(again.error, ValidationError)
        assert isinstance(reopen_open.error, ValidationError)

    def _first_open(self, app, ctx):
        periods = app.list_periods(ctx, ListPeriodsInput()).unwrap()
        return next(p for p in periods if p.status.value == "OPEN")


# --- Reversal ---

class TestReverseJournalEntry:

    def test_reversal_zeroes_trial_balance(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        original = create_and_post(app_service, ctx, sale_lines(cash, revenue))

        reversal = app_service.reverse_journal_entry(ctx, ReverseJournalEntryInput(
            entry_id=original.id, reversal_date=date(2025, 3, 20), memo="correction"
        )).unwrap()

        assert reversal.entry_number == "JE-2"
        assert reversal.status == EntryStatus.POSTED
        assert reversal.memo == "correction"
        assert {(l.ledger_account_id, l.direction, l.amount_cents) for l in reversal.lines} == {
            (cash.id, CREDIT, 10000),
            (revenue.id, DEBIT, 10000),
        }

        tb = app_service.get_trial_balance(ctx, TrialBalanceInput(
            from_date=date(2025, 3, 1), to_date=date(2025, 3, 31)
        )).unwrap()
        assert {row.code: row.balance_cents for row in tb.rows} == {"1000": 0, "4000": 0}
        assert tb.total_debits_cents == tb.total_credits_cents == 20000

    def test_entries_are_linked_both_ways(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        original = create_and_post(app_service, ctx, sale_lines(cash, revenue))

        reversal = app_service.reverse_journal_entry(ctx, ReverseJournalEntryInput(
            entry_id=original.id
        )).unwrap()
        reloaded = app_service.get_journal_entry(
            ctx, GetJournalEntryInput(entry_id=original.id)
        ).unwrap()

        assert reloaded.reversed_by_entry_id == reversal.id
        assert reversal.reverses_entry_id == original.id
        assert reloaded.is_reversed
        assert reloaded.status == EntryStatus.POSTED
        assert reversal.memo == "Reversal of JE-1"
        # Defaults to today
        assert reversal.posting_date == date(2025, 3, 15)

    def test_second_reversal_rejected(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        original = create_and_post(app_service, ctx, sale_lines(cash, revenue))
        request = ReverseJournalEntryInput(entry_id=original.id)
        app_service.reverse_journal_entry(ctx, request).unwrap()

        result = app_service.reverse_journal_entry(ctx, request)

        assert isinstance(result.error, ValidationError)
        assert "already been reversed" in result.error.message

    def test_draft_cannot_be_reversed(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()

        result = app_service.reverse_journal_entry(
            ctx, ReverseJournalEntryInput(entry_id=entry.id)
        )

        assert isinstance(result.error, ValidationError)

    def test_reversal_into_closed_period_rejected(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx, period_locking_enabled=True)
        original = create_and_post(app_service, ctx, sale_lines(cash, revenue))
        periods = app_service.list_periods(ctx, ListPeriodsInput()).unwrap()
        april = next(p for p in periods if p.name == "2025-04")
        app_service.close_period(ctx, ClosePeriodInput(period_id=april.id)).unwrap()

        result = app_service.reverse_journal_entry(ctx, ReverseJournalEntryInput(
            entry_id=original.id, reversal_date=date(2025, 4, 2)
        ))

        assert isinstance(result.error, ValidationError)
        reloaded = app_service.get_journal_entry(
            ctx, GetJournalEntryInput(entry_id=original.id)
        ).unwrap()
        assert reloaded.reversed_by_entry_id is None

    def test_failed_link_save_leaves_no_partial_reversal(self, db_session, clock, ctx):
        """If marking the original fails, the posted reversal is rolled back too."""

        class FailingLinkRepository(SqlAlchemyJournalEntryRepository):
            def save(self, entry):
                if entry.is_reversed:
                    raise RuntimeError("storage unavailable")
                super().save(entry)

        app = AccountingApplication(
            accounts=SqlAlchemyLedgerAccountRepository(db_session),
            entries=FailingLinkRepository(db_session),
            periods=SqlAlchemyAccountingPeriodRepository(db_session),
            settings=SqlAlchemyAccountingSettingsRepository(db_session),
            reports=SqlAlchemyReportQuery(db_session),
            idempotency=SqlAlchemyIdempotencyStore(db_session, clock),
            transactions=SqlAlchemyTransactionRunner(db_session),
            clock=clock,
            ids=UuidGenerator(),
        )
        cash, revenue = setup_tenant(app, ctx)
        original = create_and_post(app, ctx, sale_lines(cash, revenue))

        with pytest.raises(RuntimeError):
            app.reverse_journal_entry(ctx, ReverseJournalEntryInput(entry_id=original.id))

        entries = app.list_journal_entries(ctx, ListJournalEntriesInput()).unwrap()
        assert entries.total == 1
        assert entries.items[0].reversed_by_entry_id is None
        # The reversal's number was not consumed either
        assert create_and_post(app, ctx, sale_lines(cash, revenue)).entry_number == "JE-2"


# --- Idempotency ---

class TestIdempotency:

    def test_create_replays_stored_response(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)

        first = create_entry(
            app_service, ctx, sale_lines(cash, revenue), idempotency_key="k1"
        ).unwrap()
        second = create_entry(
            app_service, ctx, sale_lines(cash, revenue), idempotency_key="k1"
        ).unwrap()

        assert second == first
        total = app_service.list_journal_entries(ctx, ListJournalEntriesInput()).unwrap().total
        assert total == 1

    def test_post_replays_without_consuming_a_number(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()

        first = post(app_service, ctx, entry.id, idempotency_key="p1").unwrap()
        replay = post(app_service, ctx, entry.id, idempotency_key="p1")

        assert replay.success
        assert replay.value == first
        assert create_and_post(
            app_service, ctx, sale_lines(cash, revenue)
        ).entry_number == "JE-2"

    def test_keys_are_scoped_per_tenant(self, app_service, ctx, other_ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        other_cash, other_revenue = setup_tenant(app_service, other_ctx)

        mine = create_entry(
            app_service, ctx, sale_lines(cash, revenue), idempotency_key="same"
        ).unwrap()
        theirs = create_entry(
            app_service, other_ctx, sale_lines(other_cash, other_revenue),
            idempotency_key="same",
        ).unwrap()

        assert mine.id != theirs.id

    def test_failed_operation_is_not_stored(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        bad = create_entry(app_service, ctx, sale_lines(cash, revenue, credit=1)).unwrap()
        assert not post(app_service, ctx, bad.id, idempotency_key="p1").success

        app_service.update_journal_entry(ctx, UpdateJournalEntryInput(
            entry_id=bad.id, lines=sale_lines(cash, revenue)
        )).unwrap()

        assert post(app_service, ctx, bad.id, idempotency_key="p1").success

    def test_concurrent_first_request_replays_the_winner(
        self, app_service, db_session, clock, ctx
    ):
        """Two first requests with one key: the loser rolls back and replays."""
        cash, revenue = setup_tenant(app_service, ctx)
        first = create_entry(
            app_service, ctx, sale_lines(cash, revenue), idempotency_key="k1"
        ).unwrap()

        class LateLookupStore(SqlAlchemyIdempotencyStore):
            # Misses once, as if the winner had not committed yet
            missed = False

            def get(self, tenant_id, action_key, idempotency_key):
                if not self.missed:
                    self.missed = True
                    return None
                return super().get(tenant_id, action_key, idempotency_key)

        racer = AccountingApplication(
            accounts=SqlAlchemyLedgerAccountRepository(db_session),
            entries=SqlAlchemyJournalEntryRepository(db_session),
            periods=SqlAlchemyAccountingPeriodRepository(db_session),
            settings=SqlAlchemyAccountingSettingsRepository(db_session),
            reports=SqlAlchemyReportQuery(db_session),
            idempotency=LateLookupStore(db_session, clock),
            transactions=SqlAlchemyTransactionRunner(db_session),
            clock=clock,
            ids=UuidGenerator(),
        )

        second = create_entry(
            racer, ctx, sale_lines(cash, revenue), idempotency_key="k1"
        ).unwrap()

        assert second == first
        total = app_service.list_journal_entries(ctx, ListJournalEntriesInput()).unwrap().total
        assert total == 1


# --- Tenant isolation ---

class TestTenantIsolation:

    def test_other_tenant_cannot_see_or_post(self, app_service, ctx, other_ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        setup_tenant(app_service, other_ctx)
        entry = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()

        seen = app_service.get_journal_entry(other_ctx, GetJournalEntryInput(entry_id=entry.id))
        posted = post(app_service, other_ctx, entry.id)
        listed = app_service.list_journal_entries(other_ctx, ListJournalEntriesInput()).unwrap()

        assert isinstance(seen.error, NotFoundError)
        assert isinstance(posted.error, NotFoundError)
        assert listed.total == 0

    def test_cannot_post_to_another_tenants_account(self, app_service, ctx, other_ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        setup_tenant(app_service, other_ctx)

        result = create_entry(app_service, other_ctx, sale_lines(cash, revenue))

        assert isinstance(result.error, ValidationError)

    def test_numbering_is_per_tenant(self, app_service, ctx, other_ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        other_cash, other_revenue = setup_tenant(app_service, other_ctx)

        create_and_post(app_service, ctx, sale_lines(cash, revenue))
        theirs = create_and_post(app_service, other_ctx, sale_lines(other_cash, other_revenue))

        assert theirs.entry_number == "JE-1"


# --- Listing ---

class TestListJournalEntries:

    def test_filters_and_pagination(self, app_service, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        for day in (1, 2, 3):
            create_and_post(
                app_service, ctx, sale_lines(cash, revenue),
                posting_date=date(2025, 3, day),
            )
        create_entry(
            app_service, ctx, sale_lines(cash, revenue),
            posting_date=date(2025, 3, 4), source_type="VendorBill", source_id="b-1",
        ).unwrap()

        page = app_service.list_journal_entries(ctx, ListJournalEntriesInput(
            status=EntryStatus.POSTED, page=1, page_size=2
        )).unwrap()
        assert page.total == 3
        assert [e.posting_date.day for e in page.items] == [3, 2]

        ranged = app_service.list_journal_entries(ctx, ListJournalEntriesInput(
            from_date=date(2025, 3, 2), to_date=date(2025, 3, 3)
        )).unwrap()
        assert ranged.total == 2

        by_source = app_service.list_journal_entries(ctx, ListJournalEntriesInput(
            source_type="VendorBill", source_id="b-1"
        )).unwrap()
        assert by_source.total == 1
        assert by_source.items[0].status == EntryStatus.DRAFT

        by_account = app_service.list_journal_entries(ctx, ListJournalEntriesInput(
            account_id=cash.id
        )).unwrap()
        assert by_account.total == 4

        searched = app_service.list_journal_entries(ctx, ListJournalEntriesInput(
            search="JE-2"
        )).unwrap()
        assert [e.entry_number for e in searched.items] == ["JE-2"]


def test_missing_tenant_is_a_validation_failure(app_service):
    result = app_service.list_journal_entries(
        UseCaseContext(tenant_id=""), ListJournalEntriesInput()
    )
    assert isinstance(result.error, ValidationError)
    assert not isinstance(result.error, ConflictError)


# --- Repository ---

class TestJournalEntryRepositorySave:

    def test_number_clash_is_a_conflict(self, app_service, db_session, ctx):
        cash, revenue = setup_tenant(app_service, ctx)
        posted = create_and_post(app_service, ctx, sale_lines(cash, revenue))
        draft = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()
        repo = SqlAlchemyJournalEntryRepository(db_session)
        view = repo.find_by_id(ctx.tenant_id, draft.id).snapshot()

        clash = JournalEntry.rehydrate(replace(
            view, status=EntryStatus.POSTED, entry_number=posted.entry_number
        ))

        with pytest.raises(ConflictError, match="JE-1 is already in use"):
            repo.save(clash)
        db_session.rollback()

    def test_other_integrity_errors_are_not_reported_as_number_clashes(
        self, app_service, db_session, ctx
    ):
        cash, revenue = setup_tenant(app_service, ctx)
        draft = create_entry(app_service, ctx, sale_lines(cash, revenue)).unwrap()
        repo = SqlAlchemyJournalEntryRepository(db_session)
        view = repo.find_by_id(ctx.tenant_id, draft.id).snapshot()
        db_session.expunge_all()

        # A second entry reusing the first entry's line ids
        copy = JournalEntry.rehydrate(replace(view, id="copy-1"))

        with pytest.raises(IntegrityError):
            repo.save(copy)
        db_session.rollback()
