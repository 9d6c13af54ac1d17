"""
Report endpoints: balances, pending, year-to-date, ledger and jobs.

All figures are computed fresh from transaction lines on each call.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from contractor_books.models.base import get_db
from contractor_books.schemas.reports import (
    AccountBalanceResponse,
    JobProfitResponse,
    LedgerRowResponse,
    PendingResponse,
    YtdSummaryResponse,
)
from contractor_books.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/balances", response_model=list[AccountBalanceResponse])
def account_balances(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
):
    """
    Balance per account.

    Bank (asset) balances include pending lines; every other account
    counts cleared lines only.
    """
    return ReportService(db).account_balances(include_inactive)


@router.get("/pending", response_model=PendingResponse)
def pending_transactions(db: Session = Depends(get_db)):
    """Uncleared lines, split into pending bank and pending card."""
    return PendingResponse.model_validate(ReportService(db).pending_transactions())


@router.get("/ytd", response_model=YtdSummaryResponse)
def ytd_income(
    year: int | None = None,
    include_pending: bool | None = None,
    db: Session = Depends(get_db),
):
    """Year-to-date profit buckets, in total and by month and quarter."""
    return YtdSummaryResponse.model_validate(ReportService(db).ytd_income(year, include_pending))


@router.get("/ledger", response_model=list[LedgerRowResponse])
def ledger(
    account_id: int | None = None,
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
    cleared: bool | None = None,
    job_id: int | None = None,
    db: Session = Depends(get_db),
):
    return ReportService(db).ledger(
        account_id=account_id,
        start_date=start_date,
        end_date=end_date,
        cleared=cleared,
        job_id=job_id,
    )


@router.get("/jobs", response_model=list[JobProfitResponse])
def job_summary(db: Session = Depends(get_db)):
    """Income, labor, materials and profit per job."""
    return [JobProfitResponse.model_validate(s) for s in ReportService(db).job_summary()]


@router.get("/jobs/{job_id}", response_model=JobProfitResponse)
def job_profit(
    job_id: int,
    db: Session = Depends(get_db),
):
    summaries = ReportService(db).job_summary(job_id)
    if not summaries:
        raise HTTPException(status_code=404, detail=f"Job {job_id} not found")
    return JobProfitResponse.model_validate(summaries[0])
