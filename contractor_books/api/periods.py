"""
Period close endpoints.

The period to close is always computed on the server; clients can
only ask to close "the next one".
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from contractor_books.api.errors import http_error
from contractor_books.models.base import get_db
from contractor_books.schemas.period import (
    ClosePeriodRequest,
    PeriodOverviewResponse,
    PeriodStatusResponse,
    ReopenPeriodRequest,
)
from contractor_books.services.period_service import PeriodService

router = APIRouter(prefix="/periods", tags=["Periods"])


def _overview(service: PeriodService) -> PeriodOverviewResponse:
    periods = service.period_close_status()
    return PeriodOverviewResponse(
        latest_closed=periods[0].year_month if periods else None,
        next_period=service.next_period_to_close(),
        periods=periods,
    )


@router.get("", response_model=PeriodOverviewResponse)
def period_close_status(db: Session = Depends(get_db)):
    """Closed periods newest first, plus the next period to close."""
    return _overview(PeriodService(db))


@router.post("/close", response_model=PeriodStatusResponse, status_code=201)
def close_next_period(
    request: ClosePeriodRequest,
    db: Session = Depends(get_db),
):
    service = PeriodService(db)
    try:
        period = service.close_next_period(closed_by=request.closed_by, notes=request.notes)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise http_error(e)
    return PeriodStatusResponse(
        year_month=period.year_month,
        closed_at=period.closed_at,
        closed_by=period.closed_by,
        notes=period.notes,
        is_latest=True,
    )


@router.post("/reopen", response_model=PeriodOverviewResponse)
def reopen_period(
    request: ReopenPeriodRequest,
    db: Session = Depends(get_db),
):
    """Reopen the latest closed period. A reason is required and logged."""
    service = PeriodService(db)
    try:
        service.reopen_period(request.year_month, request.reason)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise http_error(e)
    return _overview(service)
