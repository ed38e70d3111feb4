"""Pydantic schemas for accounting periods."""

from datetime import date, datetime

from pydantic import BaseModel

from ledger_core.models.enums import PeriodStatus


class ClosePeriodInput(BaseModel):
    period_id: str


class ReopenPeriodInput(BaseModel):
    period_id: str


class ListPeriodsInput(BaseModel):
    status: PeriodStatus | None = None


class AccountingPeriodResponse(BaseModel):
    id: str
    tenant_id: str
    fiscal_year_id: str
    name: str
    start_date: date
    end_date: date
    status: PeriodStatus
    closed_at: datetime | None
    closed_by: str | None

    model_config = {"from_attributes": True}
