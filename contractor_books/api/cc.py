"""
Credit-card settlement endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from contractor_books.api.errors import http_error
from contractor_books.models.base import get_db
from contractor_books.schemas.cc import CcBalanceResponse, CcSettleRequest, CcSettleResponse
from contractor_books.services.cc_settlement import CcSettlementService

router = APIRouter(prefix="/cc", tags=["Credit Cards"])


@router.get("/balances", response_model=list[CcBalanceResponse])
def cc_balances(
    job_id: int | None = None,
    db: Session = Depends(get_db),
):
    """Unsettled card charges per card, largest first."""
    return CcSettlementService(db).cc_balances(job_id)


@router.post("/settle", response_model=CcSettleResponse)
def settle_lines(
    request: CcSettleRequest,
    db: Session = Depends(get_db),
):
    """
    Mark card lines settled.

    All lines must be unsettled charges on the same card. With
    pay_from_account_id, the matching bank-to-card transfer is
    created in the same commit.
    """
    service = CcSettlementService(db)
    try:
        settlement = service.settle_lines(
            request.line_ids,
            pay_from_account_id=request.pay_from_account_id,
            date=request.date,
            description=request.description,
        )
        db.commit()
        return settlement
    except ValueError as e:
        db.rollback()
        raise http_error(e)
