"""
Tests for the financial reports.

All reports read posted lines only. Scenarios post a small set of
entries and check each report's arithmetic against them.
"""

from datetime import date

from ledger_core.errors import NotFoundError
from ledger_core.models.enums import AccountType, EntryDirection
from ledger_core.schemas.journal import (
    CreateJournalEntryInput,
    JournalLineInput,
    PostJournalEntryInput,
)
from ledger_core.schemas.ledger_account import CreateLedgerAccountInput
from ledger_core.schemas.reports import (
    BalanceSheetInput,
    GeneralLedgerInput,
    ProfitLossInput,
    TrialBalanceInput,
)
from ledger_core.schemas.settings import SetupAccountingInput

DEBIT = EntryDirection.DEBIT
CREDIT = EntryDirection.CREDIT


# --- Helpers ---

def setup_books(app, ctx):
    """Set up a tenant with one account of each type; return them by code."""
    app.setup_accounting(ctx, SetupAccountingInput(
        base_currency="EUR", chart_template="empty"
    )).unwrap()
    accounts = {}
    for code, name, account_type in [
        ("1000", "Cash", AccountType.ASSET),
        ("2000", "Accounts Payable", AccountType.LIABILITY),
        ("3000", "Owner's Equity", AccountType.EQUITY),
        ("4000", "Revenue", AccountType.INCOME),
        ("6000", "Rent", AccountType.EXPENSE),
        ("6100", "Travel", AccountType.EXPENSE),
    ]:
        accounts[code] = app.create_ledger_account(ctx, CreateLedgerAccountInput(
            code=code, name=name, account_type=account_type
        )).unwrap()
    return accounts


def journal(app, ctx, day, debit_account, credit_account, amount, post=True):
    entry = app.create_journal_entry(ctx, CreateJournalEntryInput(
        posting_date=day,
        memo=f"{debit_account.code}/{credit_account.code}",
        lines=[
            JournalLineInput(
                ledger_account_id=debit_account.id, direction=DEBIT, amount_cents=amount
            ),
            JournalLineInput(
                ledger_account_id=credit_account.id, direction=CREDIT, amount_cents=amount
            ),
        ],
    )).unwrap()
    if post:
        entry = app.post_journal_entry(
            ctx, PostJournalEntryInput(entry_id=entry.id)
        ).unwrap()
    return entry


def seed_activity(app, ctx, a):
    """
    January: owner invests 50000, rent 12000 on credit.
    March: revenue 30000 in cash, rent 12000 paid, a draft for travel.
    """
    journal(app, ctx, date(2025, 1, 5), a["1000"], a["3000"], 50000)
    journal(app, ctx, date(2025, 1, 31), a["6000"], a["2000"], 12000)
    journal(app, ctx, date(2025, 3, 10), a["1000"], a["4000"], 30000)
    journal(app, ctx, date(2025, 3, 12), a["2000"], a["1000"], 12000)
    journal(app, ctx, date(2025, 3, 14), a["6100"], a["1000"], 999, post=False)


class TestTrialBalance:

    def test_trial_balance_closes(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        tb = app_service.get_trial_balance(ctx, TrialBalanceInput(
            from_date=date(2025, 1, 1), to_date=date(2025, 12, 31)
        )).unwrap()

        assert tb.total_debits_cents == tb.total_credits_cents == 104000
        assert tb.currency == "EUR"
        rows = {r.code: r for r in tb.rows}
        assert rows["1000"].balance_cents == 50000 + 30000 - 12000
        assert rows["3000"].balance_cents == -50000
        assert [r.code for r in tb.rows] == sorted(rows)

    def test_drafts_and_zero_rows_excluded(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        tb = app_service.get_trial_balance(ctx, TrialBalanceInput(
            from_date=date(2025, 3, 1), to_date=date(2025, 3, 31)
        )).unwrap()

        # Travel only has a draft; equity and rent had no March activity
        assert {r.code for r in tb.rows} == {"1000", "2000", "4000"}
        assert tb.total_debits_cents == 42000

    def test_empty_books_give_zero_totals(self, app_service, ctx):
        setup_books(app_service, ctx)
        tb = app_service.get_trial_balance(ctx, TrialBalanceInput(
            from_date=date(2025, 1, 1), to_date=date(2025, 1, 31)
        )).unwrap()
        assert tb.rows == []
        assert tb.total_debits_cents == tb.total_credits_cents == 0

    def test_not_set_up_is_not_found(self, app_service, ctx):
        result = app_service.get_trial_balance(ctx, TrialBalanceInput(
            from_date=date(2025, 1, 1), to_date=date(2025, 1, 31)
        ))
        assert isinstance(result.error, NotFoundError)

    def test_other_tenants_activity_excluded(self, app_service, ctx, other_ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)
        setup_books(app_service, other_ctx)

        tb = app_service.get_trial_balance(other_ctx, TrialBalanceInput(
            from_date=date(2025, 1, 1), to_date=date(2025, 12, 31)
        )).unwrap()

        assert tb.rows == []


class TestGeneralLedger:

    def test_opening_running_and_closing_balance(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        gl = app_service.get_general_ledger(ctx, GeneralLedgerInput(
            account_id=a["1000"].id,
            from_date=date(2025, 3, 1),
            to_date=date(2025, 3, 31),
        )).unwrap()

        assert gl.opening_balance_cents == 50000
        assert [(l.direction, l.amount_cents) for l in gl.lines] == [
            (DEBIT, 30000),
            (CREDIT, 12000),
        ]
        assert [l.running_balance_cents for l in gl.lines] == [80000, 68000]
        assert gl.closing_balance_cents == 68000
        assert gl.lines[0].entry_number == "JE-3"

    def test_no_lines_closes_at_opening(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        gl = app_service.get_general_ledger(ctx, GeneralLedgerInput(
            account_id=a["1000"].id,
            from_date=date(2025, 2, 1),
            to_date=date(2025, 2, 28),
        )).unwrap()

        assert gl.lines == []
        assert gl.opening_balance_cents == gl.closing_balance_cents == 50000

    def test_unknown_account_not_found(self, app_service, ctx):
        setup_books(app_service, ctx)
        result = app_service.get_general_ledger(ctx, GeneralLedgerInput(
            account_id="missing", from_date=date(2025, 1, 1), to_date=date(2025, 1, 31)
        ))
        assert isinstance(result.error, NotFoundError)


class TestProfitLoss:

    def test_income_expenses_and_net(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        pnl = app_service.get_profit_loss(ctx, ProfitLossInput(
            from_date=date(2025, 1, 1), to_date=date(2025, 3, 31)
        )).unwrap()

        assert [(r.code, r.balance_cents) for r in pnl.income] == [("4000", 30000)]
        # Travel only has a draft, so it is not listed
        assert [(r.code, r.balance_cents) for r in pnl.expenses] == [("6000", 12000)]
        assert pnl.total_income_cents == 30000
        assert pnl.total_expenses_cents == 12000
        assert pnl.net_profit_cents == 18000

    def test_range_limits_activity(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        pnl = app_service.get_profit_loss(ctx, ProfitLossInput(
            from_date=date(2025, 2, 1), to_date=date(2025, 2, 28)
        )).unwrap()

        assert pnl.income == []
        assert pnl.expenses == []
        assert pnl.net_profit_cents == 0


class TestBalanceSheet:

    def test_balanced_with_unclosed_earnings(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        bs = app_service.get_balance_sheet(
            ctx, BalanceSheetInput(as_of_date=date(2025, 3, 31))
        ).unwrap()

        assert bs.total_assets_cents == 68000
        # AP was incurred and paid, so it nets to zero and is not listed
        assert bs.liabilities == []
        assert bs.total_equity_cents == 50000
        assert bs.net_income_cents == 18000
        assert bs.total_liabilities_and_equity_cents == 68000
        assert bs.is_balanced

    def test_as_of_date_is_cumulative_cutoff(self, app_service, ctx):
        a = setup_books(app_service, ctx)
        seed_activity(app_service, ctx, a)

        bs = app_service.get_balance_sheet(
            ctx, BalanceSheetInput(as_of_date=date(2025, 1, 31))
        ).unwrap()

        assert bs.total_assets_cents == 50000
        assert [(r.code, r.balance_cents) for r in bs.liabilities] == [("2000", 12000)]
        assert bs.net_income_cents == -12000
        assert bs.is_balanced
