"""
Accounting period aggregate.

A closed period blocks posting into its date range, but only
when the tenant has period locking enabled, and only through
the journal entry posting check. Closing never touches the
entries already inside the period.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime

from ledger_core.errors import ValidationError
from ledger_core.models.enums import PeriodStatus


@dataclass(frozen=True)
class AccountingPeriodView:
    id: str
    tenant_id: str
    fiscal_year_id: str
    name: str
    start_date: date
    end_date: date
    status: PeriodStatus
    closed_at: datetime | None
    closed_by: str | None
    created_at: datetime
    updated_at: datetime


class AccountingPeriod:

    def __init__(self, state: AccountingPeriodView):
        self._state = state

    @classmethod
    def create(
        cls,
        *,
        id: str,
        tenant_id: str,
        fiscal_year_id: str,
        name: str,
        start_date: date,
        end_date: date,
        now: datetime,
    ) -> "AccountingPeriod":
        if end_date < start_date:
            raise ValidationError(
                f"period {name} ends ({end_date}) before it starts ({start_date})"
            )
        return cls(AccountingPeriodView(
            id=id,
            tenant_id=tenant_id,
            fiscal_year_id=fiscal_year_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
            status=PeriodStatus.OPEN,
            closed_at=None,
            closed_by=None,
            created_at=now,
            updated_at=now,
        ))

    @classmethod
    def rehydrate(cls, state: AccountingPeriodView) -> "AccountingPeriod":
        return cls(state)

    @property
    def id(self) -> str:
        return self._state.id

    @property
    def name(self) -> str:
        return self._state.name

    @property
    def is_closed(self) -> bool:
        return self._state.status == PeriodStatus.CLOSED

    def snapshot(self) -> AccountingPeriodView:
        return self._state

    def contains(self, day: date) -> bool:
        return self._state.start_date <= day <= self._state.end_date

    def close(self, *, closed_by: str | None, now: datetime) -> None:
        if self.is_closed:
            raise ValidationError(f"period {self._state.name} is already closed")
        self._state = replace(
            self._state,
            status=PeriodStatus.CLOSED,
            closed_at=now,
            closed_by=closed_by,
            updated_at=now,
        )

    def reopen(self, *, now: datetime) -> None:
        if not self.is_closed:
            raise ValidationError(f"period {self._state.name} is not closed")
        self._state = replace(
            self._state,
            status=PeriodStatus.OPEN,
            closed_at=None,
            closed_by=None,
            updated_at=now,
        )

    def __repr__(self) -> str:
        return f"<AccountingPeriod {self._state.name} ({self._state.status.value})>"
