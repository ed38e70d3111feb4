"""
Shared FastAPI dependencies for the accounting routers.

Tenant and user identity come from the X-Tenant-Id and X-User-Id
headers. Resolving them from real credentials is the job of
whatever sits in front of this service.
"""

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ledger_core.context import UseCaseContext
from ledger_core.errors import ConflictError, NotFoundError, ValidationError
from ledger_core.models.base import get_db
from ledger_core.results import Result
from ledger_core.services.accounting_application import AccountingApplication
from ledger_core.wiring import build_accounting_application

STATUS_BY_ERROR = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
]


def get_accounting_app(db: Session = Depends(get_db)) -> AccountingApplication:
    return build_accounting_application(db)


def get_context(
    x_tenant_id: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> UseCaseContext:
    # A missing tenant is reported by the application as a
    # ValidationError, which maps to 400 like every other one.
    return UseCaseContext(tenant_id=x_tenant_id or "", user_id=x_user_id)


def unwrap_or_raise(result: Result):
    """Return the result value, or raise the matching HTTPException."""
    if result.success:
        return result.value
    status_code = 400
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(result.error, error_type):
            status_code = code
            break
    raise HTTPException(status_code=status_code, detail=result.error.message)
