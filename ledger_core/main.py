"""
Ledger Core: FastAPI application.

This is the entry point for the HTTP surface of the ledger.
All routers are registered here.
"""

from fastapi import FastAPI

from ledger_core.config import get_settings
from ledger_core.logging_config import configure_logging
from ledger_core.api.health import router as health_router
from ledger_core.api.accounts import router as accounts_router
from ledger_core.api.journal_entries import router as journal_entries_router
from ledger_core.api.periods import router as periods_router
from ledger_core.api.reports import router as reports_router
from ledger_core.api.setup import router as setup_router

settings = get_settings()
configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Multi-tenant double-entry accounting ledger",
)

# Register routers
app.include_router(health_router)
app.include_router(setup_router)
app.include_router(accounts_router)
app.include_router(journal_entries_router)
app.include_router(periods_router)
app.include_router(reports_router)
