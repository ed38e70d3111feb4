"""
Period service: closing, reopening and the posting gate.

Closing a period never touches the entries inside it. It only
changes what ensure_open_for_posting() answers, and that check
is applied only while the tenant has period locking enabled.
"""

import calendar
import logging
from datetime import date, timedelta

from ledger_core.domain import AccountingPeriod, AccountingSettings
from ledger_core.errors import NotFoundError, ValidationError
from ledger_core.models.enums import PeriodStatus
from ledger_core.ports import AccountingPeriodRepository, Clock, IdGenerator

logger = logging.getLogger(__name__)


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class PeriodService:

    def __init__(
        self,
        periods: AccountingPeriodRepository,
        clock: Clock,
        ids: IdGenerator,
    ):
        self.periods = periods
        self.clock = clock
        self.ids = ids

    def get(self, tenant_id: str, period_id: str) -> AccountingPeriod:
        period = self.periods.find_by_id(tenant_id, period_id)
        if not period:
            raise NotFoundError(f"accounting period {period_id} not found")
        return period

    def close(self, tenant_id: str, period_id: str, closed_by: str | None) -> AccountingPeriod:
        period = self.get(tenant_id, period_id)
        period.close(closed_by=closed_by, now=self.clock.now())
        self.periods.save(period)
        logger.info("Closed period %s for tenant %s", period.name, tenant_id)
        return period

    def reopen(self, tenant_id: str, period_id: str) -> AccountingPeriod:
        period = self.get(tenant_id, period_id)
        period.reopen(now=self.clock.now())
        self.periods.save(period)
        logger.info("Reopened period %s for tenant %s", period.name, tenant_id)
        return period

    def list_periods(
        self, tenant_id: str, status: PeriodStatus | None = None
    ) -> list[AccountingPeriod]:
        periods = self.periods.list(tenant_id)
        if status is not None:
            periods = [p for p in periods if p.snapshot().status == status]
        return periods

    def create_fiscal_year(self, tenant_id: str, start: date) -> list[AccountingPeriod]:
        """Create twelve consecutive monthly periods beginning at `start`."""
        fiscal_year_id = self.ids.new_id()
        now = self.clock.now()
        created = []
        for index in range(12):
            period_start = add_months(start, index)
            period_end = add_months(start, index + 1) - timedelta(days=1)
            period = AccountingPeriod.create(
                id=self.ids.new_id(),
                tenant_id=tenant_id,
                fiscal_year_id=fiscal_year_id,
                name=period_start.strftime("%Y-%m"),
                start_date=period_start,
                end_date=period_end,
                now=now,
            )
            self.periods.save(period)
            created.append(period)
        logger.info(
            "Created fiscal year starting %s (12 periods) for tenant %s",
            start, tenant_id,
        )
        return created

    def ensure_open_for_posting(self, settings: AccountingSettings, posting_date: date) -> None:
        """
        Raise ValidationError if posting on posting_date is blocked.

        No-op unless the tenant has period locking enabled.
        """
        if not settings.period_locking_enabled:
            return
        period = self.periods.find_period_containing_date(
            settings.tenant_id, posting_date
        )
        if period is None:
            raise ValidationError(
                f"no accounting period covers posting date {posting_date}"
            )
        if period.is_closed:
            raise ValidationError(
                f"posting date {posting_date} is in closed period {period.name}"
            )
