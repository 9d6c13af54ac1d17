"""
Flip deal lifecycle endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from contractor_books.api.errors import http_error
from contractor_books.models.base import get_db
from contractor_books.schemas.transaction import FlipEventRequest, TransactionResponse
from contractor_books.services.transaction_service import TransactionService

router = APIRouter(prefix="/flips", tags=["Flips"])


@router.post("/events", response_model=TransactionResponse, status_code=201)
def record_flip_event(
    request: FlipEventRequest,
    db: Session = Depends(get_db),
):
    """
    Record a flip event: acquisition, rehab cost, loan draw, holding
    cost, interest, refund or sale.

    Every event is written as one balanced transaction.
    """
    service = TransactionService(db)
    try:
        txn = service.record_flip_event(request)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)
