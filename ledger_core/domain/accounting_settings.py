"""
Per-tenant accounting settings, including the entry number counter.

allocate_entry_number() mutates the counter. The mutation has to
be saved in the same transaction as the entry that takes the
number, otherwise numbers can be skipped or handed out twice.
"""

import re
from dataclasses import dataclass, replace
from datetime import date, datetime

from ledger_core.errors import ValidationError

MONTH_DAY_PATTERN = re.compile(r"^(\d{2})-(\d{2})$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class AccountingSettingsView:
    id: str
    tenant_id: str
    base_currency: str
    fiscal_year_start_month_day: str
    period_locking_enabled: bool
    entry_number_prefix: str
    next_entry_number: int
    created_at: datetime
    updated_at: datetime


def parse_month_day(value: str) -> tuple[int, int]:
    """Parse "MM-DD" into (month, day), rejecting impossible dates."""
    match = MONTH_DAY_PATTERN.match(value or "")
    if not match:
        raise ValidationError(
            f"fiscal year start must look like MM-DD, got {value!r}"
        )
    month, day = int(match.group(1)), int(match.group(2))
    try:
        # 2001 is not a leap year, so 02-29 is rejected too
        date(2001, month, day)
    except ValueError:
        raise ValidationError(f"fiscal year start {value!r} is not a valid date")
    return month, day


def _check_currency(currency: str) -> str:
    if not CURRENCY_PATTERN.match(currency or ""):
        raise ValidationError(
            f"currency must be a 3-letter ISO code, got {currency!r}"
        )
    return currency


class AccountingSettings:

    def __init__(self, state: AccountingSettingsView):
        self._state = state

    @classmethod
    def create(
        cls,
        *,
        id: str,
        tenant_id: str,
        base_currency: str,
        now: datetime,
        fiscal_year_start_month_day: str = "01-01",
        period_locking_enabled: bool = False,
        entry_number_prefix: str = "JE-",
    ) -> "AccountingSettings":
        parse_month_day(fiscal_year_start_month_day)
        return cls(AccountingSettingsView(
            id=id,
            tenant_id=tenant_id,
            base_currency=_check_currency(base_currency),
            fiscal_year_start_month_day=fiscal_year_start_month_day,
            period_locking_enabled=period_locking_enabled,
            entry_number_prefix=entry_number_prefix,
            next_entry_number=1,
            created_at=now,
            updated_at=now,
        ))

    @classmethod
    def rehydrate(cls, state: AccountingSettingsView) -> "AccountingSettings":
        return cls(state)

    @property
    def tenant_id(self) -> str:
        return self._state.tenant_id

    @property
    def base_currency(self) -> str:
        return self._state.base_currency

    @property
    def period_locking_enabled(self) -> bool:
        return self._state.period_locking_enabled

    def snapshot(self) -> AccountingSettingsView:
        return self._state

    def allocate_entry_number(self) -> str:
        number = f"{self._state.entry_number_prefix}{self._state.next_entry_number}"
        self._state = replace(
            self._state, next_entry_number=self._state.next_entry_number + 1
        )
        return number

    def fiscal_year_start_for(self, day: date) -> date:
        """First day of the fiscal year that contains `day`."""
        month, start_day = parse_month_day(self._state.fiscal_year_start_month_day)
        start = date(day.year, month, start_day)
        if start > day:
            start = date(day.year - 1, month, start_day)
        return start

    def update(
        self,
        *,
        now: datetime,
        base_currency: str | None = None,
        fiscal_year_start_month_day: str | None = None,
        period_locking_enabled: bool | None = None,
        entry_number_prefix: str | None = None,
    ) -> None:
        changes = {}
        if base_currency is not None:
            changes["base_currency"] = _check_currency(base_currency)
        if fiscal_year_start_month_day is not None:
            parse_month_day(fiscal_year_start_month_day)
            changes["fiscal_year_start_month_day"] = fiscal_year_start_month_day
        if period_locking_enabled is not None:
            changes["period_locking_enabled"] = period_locking_enabled
        if entry_number_prefix is not None:
            changes["entry_number_prefix"] = entry_number_prefix
        if changes:
            self._state = replace(self._state, updated_at=now, **changes)
