"""
Report service: trial balance, general ledger, P&L, balance sheet.

All four reports are computed from POSTED lines only. A reversed
entry is still POSTED; its effect disappears because the reversal
posts offsetting lines, not because the original is filtered out.

Balances are derived, never stored:
- Trial balance:   debits - credits, for every account
- ASSET, EXPENSE:  debits - credits (normal debit balance)
- LIABILITY, EQUITY, INCOME: credits - debits (normal credit balance)

The only failure is NotFoundError: for a tenant without accounting
settings, or (general ledger) an unknown account. Empty data gives
zero totals.
"""

import logging
from datetime import date, timedelta

from ledger_core.errors import NotFoundError
from ledger_core.models.enums import AccountType, EntryDirection
from ledger_core.ports import (
    AccountActivityTotals,
    AccountingReportQueryPort,
    LedgerAccountRepository,
)
from ledger_core.schemas.reports import (
    BalanceSheetResponse,
    GeneralLedgerLine,
    GeneralLedgerResponse,
    ProfitLossResponse,
    ReportAccountRow,
    TrialBalanceResponse,
    TrialBalanceRow,
)
from ledger_core.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

CREDIT_NORMAL = (AccountType.LIABILITY, AccountType.EQUITY, AccountType.INCOME)


class ReportService:

    def __init__(
        self,
        accounts: LedgerAccountRepository,
        reports: AccountingReportQueryPort,
        settings_service: SettingsService,
    ):
        self.accounts = accounts
        self.reports = reports
        self.settings_service = settings_service

    def _with_accounts(self, tenant_id: str, totals: list[AccountActivityTotals]):
        """Pair each activity row with its account, ordered by account code."""
        accounts = self.accounts.find_many(tenant_id, {t.account_id for t in totals})
        pairs = [(accounts[t.account_id], t) for t in totals]
        pairs.sort(key=lambda pair: pair[0].code)
        return pairs

    def _rows_of_type(self, pairs, account_type: AccountType) -> list[ReportAccountRow]:
        rows = []
        for account, totals in pairs:
            if account.account_type != account_type:
                continue
            if account_type in CREDIT_NORMAL:
                balance = totals.credits_cents - totals.debits_cents
            else:
                balance = totals.debits_cents - totals.credits_cents
            if balance == 0:
                continue
            rows.append(ReportAccountRow(
                account_id=account.id,
                code=account.code,
                name=account.name,
                balance_cents=balance,
            ))
        return rows

    def trial_balance(self, tenant_id: str, from_date: date, to_date: date) -> TrialBalanceResponse:
        settings = self.settings_service.get_required(tenant_id)
        totals = self.reports.get_account_activity_totals(
            tenant_id, from_date=from_date, to_date=to_date
        )

        rows = [
            TrialBalanceRow(
                account_id=account.id,
                code=account.code,
                name=account.name,
                account_type=account.account_type,
                debits_cents=t.debits_cents,
                credits_cents=t.credits_cents,
                balance_cents=t.debits_cents - t.credits_cents,
            )
            for account, t in self._with_accounts(tenant_id, totals)
            if t.debits_cents or t.credits_cents
        ]
        logger.debug(
            "Trial balance %s..%s for tenant %s: %d rows",
            from_date, to_date, tenant_id, len(rows),
        )
        return TrialBalanceResponse(
            from_date=from_date,
            to_date=to_date,
            currency=settings.base_currency,
            rows=rows,
            total_debits_cents=sum(r.debits_cents for r in rows),
            total_credits_cents=sum(r.credits_cents for r in rows),
        )

    def general_ledger(
        self, tenant_id: str, account_id: str, from_date: date, to_date: date
    ) -> GeneralLedgerResponse:
        """
        Lines of one account with a running balance.

        Opening balance is all activity strictly before from_date.
        Debits add to the running balance, credits subtract.
        """
        settings = self.settings_service.get_required(tenant_id)
        account = self.accounts.find_by_id(tenant_id, account_id)
        if not account:
            raise NotFoundError(f"ledger account {account_id} not found")

        opening = 0
        for t in self.reports.get_account_activity_totals(
            tenant_id,
            to_date=from_date - timedelta(days=1),
            account_ids=[account_id],
        ):
            opening += t.debits_cents - t.credits_cents

        running = opening
        lines = []
        for row in self.reports.list_ledger_lines(
            tenant_id, account_id, from_date=from_date, to_date=to_date
        ):
            if row.direction == EntryDirection.DEBIT:
                running += row.amount_cents
            else:
                running -= row.amount_cents
            lines.append(GeneralLedgerLine(
                entry_id=row.entry_id,
                entry_number=row.entry_number,
                posting_date=row.posting_date,
                memo=row.memo,
                line_memo=row.line_memo,
                reference=row.reference,
                direction=row.direction,
                amount_cents=row.amount_cents,
                running_balance_cents=running,
            ))

        logger.debug(
            "General ledger for %s %s..%s: %d lines",
            account.code, from_date, to_date, len(lines),
        )
        return GeneralLedgerResponse(
            account_id=account.id,
            code=account.code,
            name=account.name,
            account_type=account.account_type,
            from_date=from_date,
            to_date=to_date,
            currency=settings.base_currency,
            opening_balance_cents=opening,
            lines=lines,
            closing_balance_cents=running,
        )

    def profit_loss(self, tenant_id: str, from_date: date, to_date: date) -> ProfitLossResponse:
        settings = self.settings_service.get_required(tenant_id)
        pairs = self._with_accounts(tenant_id, self.reports.get_account_activity_totals(
            tenant_id, from_date=from_date, to_date=to_date
        ))

        income = self._rows_of_type(pairs, AccountType.INCOME)
        expenses = self._rows_of_type(pairs, AccountType.EXPENSE)
        total_income = sum(r.balance_cents for r in income)
        total_expenses = sum(r.balance_cents for r in expenses)

        logger.debug("Profit & loss %s..%s for tenant %s", from_date, to_date, tenant_id)
        return ProfitLossResponse(
            from_date=from_date,
            to_date=to_date,
            currency=settings.base_currency,
            income=income,
            expenses=expenses,
            total_income_cents=total_income,
            total_expenses_cents=total_expenses,
            net_profit_cents=total_income - total_expenses,
        )

    def balance_sheet(self, tenant_id: str, as_of_date: date) -> BalanceSheetResponse:
        """
        Cumulative balances through as_of_date.

        Income and expense accounts are not closed into equity by
        any entry, so their cumulative result is reported as
        net_income_cents and counted on the liabilities and equity
        side.
        """
        settings = self.settings_service.get_required(tenant_id)
        pairs = self._with_accounts(tenant_id, self.reports.get_account_activity_totals(
            tenant_id, to_date=as_of_date
        ))

        assets = self._rows_of_type(pairs, AccountType.ASSET)
        liabilities = self._rows_of_type(pairs, AccountType.LIABILITY)
        equity = self._rows_of_type(pairs, AccountType.EQUITY)
        net_income = (
            sum(r.balance_cents for r in self._rows_of_type(pairs, AccountType.INCOME))
            - sum(r.balance_cents for r in self._rows_of_type(pairs, AccountType.EXPENSE))
        )

        total_assets = sum(r.balance_cents for r in assets)
        total_liabilities = sum(r.balance_cents for r in liabilities)
        total_equity = sum(r.balance_cents for r in equity)
        total_liabilities_and_equity = total_liabilities + total_equity + net_income

        logger.debug("Balance sheet as of %s for tenant %s", as_of_date, tenant_id)
        return BalanceSheetResponse(
            as_of_date=as_of_date,
            currency=settings.base_currency,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            total_assets_cents=total_assets,
            total_liabilities_cents=total_liabilities,
            total_equity_cents=total_equity,
            net_income_cents=net_income,
            total_liabilities_and_equity_cents=total_liabilities_and_equity,
            is_balanced=total_assets == total_liabilities_and_equity,
        )
