"""
Settings service: tenant setup, settings updates and status.

A tenant "has accounting" once its settings record exists.
Reports and postings raise NotFoundError before that.

Setup is a one-shot operation that:
1. Creates the settings record (base currency, numbering)
2. Seeds a chart of accounts from a template
3. Opens the fiscal year that contains today, as monthly periods
"""

import logging
from dataclasses import dataclass

from ledger_core.config import get_settings
from ledger_core.domain import AccountingPeriod, AccountingSettings, LedgerAccount
from ledger_core.errors import ConflictError, NotFoundError
from ledger_core.models.enums import AccountType
from ledger_core.ports import AccountingSettingsRepository, Clock, IdGenerator
from ledger_core.schemas.ledger_account import CreateLedgerAccountInput
from ledger_core.schemas.settings import (
    SetupAccountingInput,
    UpdateAccountingSettingsInput,
)
from ledger_core.services.ledger_account_service import LedgerAccountService
from ledger_core.services.period_service import PeriodService

logger = logging.getLogger(__name__)


# (code, name, type, system_account_key)
ChartTemplate = list[tuple[str, str, AccountType, str | None]]

_MINIMAL: ChartTemplate = [
    ("1000", "Cash", AccountType.ASSET, None),
    ("1100", "Accounts Receivable", AccountType.ASSET, None),
    ("1200", "Inventory", AccountType.ASSET, "INVENTORY"),
    ("2000", "Accounts Payable", AccountType.LIABILITY, "AP"),
    ("3000", "Owner's Equity", AccountType.EQUITY, None),
    ("3100", "Retained Earnings", AccountType.EQUITY, None),
    ("4000", "Revenue", AccountType.INCOME, "REVENUE"),
    ("5000", "Cost of Goods Sold", AccountType.EXPENSE, "COGS"),
    ("6000", "Operating Expenses", AccountType.EXPENSE, "OPERATING_EXPENSE"),
]

# No inventory: a freelancer sells time, not goods
_FREELANCER: ChartTemplate = [
    ("1000", "Cash", AccountType.ASSET, None),
    ("1010", "Bank", AccountType.ASSET, None),
    ("1100", "Accounts Receivable", AccountType.ASSET, None),
    ("2000", "Accounts Payable", AccountType.LIABILITY, "AP"),
    ("2100", "Taxes Payable", AccountType.LIABILITY, None),
    ("3000", "Owner's Equity", AccountType.EQUITY, None),
    ("3100", "Retained Earnings", AccountType.EQUITY, None),
    ("3200", "Owner's Drawings", AccountType.EQUITY, None),
    ("4000", "Service Revenue", AccountType.INCOME, "REVENUE"),
    ("6000", "Operating Expenses", AccountType.EXPENSE, "OPERATING_EXPENSE"),
    ("6100", "Software and Subscriptions", AccountType.EXPENSE, None),
    ("6200", "Travel", AccountType.EXPENSE, None),
    ("6300", "Professional Fees", AccountType.EXPENSE, None),
]

_SMALL_BUSINESS: ChartTemplate = _MINIMAL + [
    ("1010", "Bank", AccountType.ASSET, None),
    ("1300", "Prepaid Expenses", AccountType.ASSET, None),
    ("1500", "Equipment", AccountType.ASSET, None),
    ("2100", "Accrued Liabilities", AccountType.LIABILITY, None),
    ("2200", "Sales Tax Payable", AccountType.LIABILITY, None),
    ("4100", "Other Income", AccountType.INCOME, None),
    ("6100", "Rent", AccountType.EXPENSE, None),
    ("6200", "Salaries and Wages", AccountType.EXPENSE, None),
    ("6300", "Utilities", AccountType.EXPENSE, None),
]

_STANDARD: ChartTemplate = _SMALL_BUSINESS + [
    ("1510", "Accumulated Depreciation", AccountType.ASSET, None),
    ("2500", "Long-term Debt", AccountType.LIABILITY, None),
    ("4200", "Interest Income", AccountType.INCOME, None),
    ("6400", "Depreciation Expense", AccountType.EXPENSE, None),
    ("6500", "Insurance", AccountType.EXPENSE, None),
    ("6600", "Marketing", AccountType.EXPENSE, None),
    ("7000", "Interest Expense", AccountType.EXPENSE, None),
    ("7100", "Bank Fees", AccountType.EXPENSE, None),
]

CHART_TEMPLATES: dict[str, ChartTemplate] = {
    "minimal": _MINIMAL,
    "freelancer": _FREELANCER,
    "smallBusiness": sorted(_SMALL_BUSINESS),
    "standard": sorted(_STANDARD),
    "empty": [],
}


@dataclass
class SetupResult:
    settings: AccountingSettings
    accounts: list[LedgerAccount]
    periods: list[AccountingPeriod]


class SettingsService:

    def __init__(
        self,
        settings_repo: AccountingSettingsRepository,
        account_service: LedgerAccountService,
        period_service: PeriodService,
        clock: Clock,
        ids: IdGenerator,
    ):
        self.settings_repo = settings_repo
        self.account_service = account_service
        self.period_service = period_service
        self.clock = clock
        self.ids = ids

    def get_required(self, tenant_id: str, for_update: bool = False) -> AccountingSettings:
        settings = self.settings_repo.find_by_tenant(tenant_id, for_update=for_update)
        if not settings:
            raise NotFoundError(
                f"accounting is not set up for tenant {tenant_id}"
            )
        return settings

    def find(self, tenant_id: str) -> AccountingSettings | None:
        return self.settings_repo.find_by_tenant(tenant_id)

    def setup(self, tenant_id: str, request: SetupAccountingInput) -> SetupResult:
        """
        Set up accounting for a tenant.

        Raises ConflictError if the tenant already has settings.
        Template accounts whose code already exists are left alone,
        and no periods are created if the tenant already has some.
        """
        if self.settings_repo.find_by_tenant(tenant_id):
            raise ConflictError(
                f"accounting is already set up for tenant {tenant_id}"
            )

        config = get_settings()
        settings = AccountingSettings.create(
            id=self.ids.new_id(),
            tenant_id=tenant_id,
            base_currency=(
                request.base_currency or config.DEFAULT_BASE_CURRENCY
            ).upper(),
            fiscal_year_start_month_day=request.fiscal_year_start_month_day,
            period_locking_enabled=request.period_locking_enabled,
            entry_number_prefix=(
                request.entry_number_prefix
                if request.entry_number_prefix is not None
                else config.DEFAULT_ENTRY_NUMBER_PREFIX
            ),
            now=self.clock.now(),
        )
        self.settings_repo.save(settings)

        accounts = []
        for code, name, account_type, key in CHART_TEMPLATES[request.chart_template]:
            if self.account_service.accounts.find_by_code(tenant_id, code):
                continue
            accounts.append(self.account_service.create(
                tenant_id,
                CreateLedgerAccountInput(
                    code=code,
                    name=name,
                    account_type=account_type,
                    system_account_key=key,
                ),
            ))

        periods = []
        if not self.period_service.list_periods(tenant_id):
            today = self.clock.now().date()
            periods = self.period_service.create_fiscal_year(
                tenant_id, settings.fiscal_year_start_for(today)
            )

        logger.info(
            "Accounting set up for tenant %s (%s, template=%s, %d accounts)",
            tenant_id, settings.base_currency, request.chart_template, len(accounts),
        )
        return SetupResult(settings=settings, accounts=accounts, periods=periods)

    def update(
        self, tenant_id: str, request: UpdateAccountingSettingsInput
    ) -> AccountingSettings:
        settings = self.get_required(tenant_id, for_update=True)
        settings.update(
            now=self.clock.now(),
            base_currency=request.base_currency.upper() if request.base_currency else None,
            fiscal_year_start_month_day=request.fiscal_year_start_month_day,
            period_locking_enabled=request.period_locking_enabled,
            entry_number_prefix=request.entry_number_prefix,
        )
        self.settings_repo.save(settings)
        logger.info("Updated accounting settings for tenant %s", tenant_id)
        return settings
