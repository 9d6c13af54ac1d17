"""
Contractor Books, FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

from fastapi import FastAPI

from contractor_books.config import configure_logging, get_settings
from contractor_books.api.health import router as health_router
from contractor_books.api.accounts import router as accounts_router
from contractor_books.api.transactions import router as transactions_router
from contractor_books.api.flips import router as flips_router
from contractor_books.api.reports import router as reports_router
from contractor_books.api.cc import router as cc_router
from contractor_books.api.periods import router as periods_router
from contractor_books.api.reference import router as reference_router
from contractor_books.api.bank_sync import router as bank_sync_router

settings = get_settings()
configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry books for a contracting business with rentals and flips",
    debug=settings.DEBUG,
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(flips_router)
app.include_router(reports_router)
app.include_router(cc_router)
app.include_router(periods_router)
app.include_router(reference_router)
app.include_router(bank_sync_router)
