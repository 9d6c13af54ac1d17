"""
Transaction API endpoints.

Routes are thin: they call a service, commit on success and roll
back on any domain error.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from contractor_books.api.errors import http_error
from contractor_books.models.base import get_db
from contractor_books.schemas.reports import IntegrityResponse
from contractor_books.schemas.transaction import (
    BankToCardTransferRequest,
    CreateTransactionMultiRequest,
    CreateTransactionRequest,
    EditTransactionRequest,
    EntryRequest,
    MarkClearedRequest,
    MortgagePaymentRequest,
    MortgagePaymentResponse,
    MortgageSplitResponse,
    TransactionResponse,
)
from contractor_books.services.ledger_service import LedgerService
from contractor_books.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request: CreateTransactionRequest,
    db: Session = Depends(get_db),
):
    """Create a balanced two-line transaction."""
    service = LedgerService(db)
    try:
        txn = service.create_transaction(
            request.date, request.description, request.line1, request.line2, request.purpose
        )
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/multi", response_model=TransactionResponse, status_code=201)
def create_transaction_multi(
    request: CreateTransactionMultiRequest,
    db: Session = Depends(get_db),
):
    """Create a balanced transaction with any number of lines."""
    service = LedgerService(db)
    try:
        txn = service.create_transaction_multi(
            request.date, request.description, request.lines, request.purpose
        )
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/entries", response_model=TransactionResponse, status_code=201)
def create_entry(
    request: EntryRequest,
    db: Session = Depends(get_db),
):
    """Record income, an expense or a transfer."""
    service = TransactionService(db)
    try:
        txn = service.create_entry(request)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/bank-to-card", response_model=TransactionResponse, status_code=201)
def bank_to_card_transfer(
    request: BankToCardTransferRequest,
    db: Session = Depends(get_db),
):
    """Pay down a credit card from a bank account."""
    service = TransactionService(db)
    try:
        txn = service.create_bank_to_card_transfer(request)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/mortgage-split", response_model=MortgageSplitResponse)
def preview_mortgage_split(
    deal_id: int,
    total_payment: Decimal = Query(gt=0),
    db: Session = Depends(get_db),
):
    """Preview how a payment would split into principal, interest and escrow."""
    try:
        split = TransactionService(db).preview_mortgage_split(deal_id, total_payment)
    except ValueError as e:
        raise http_error(e)
    return MortgageSplitResponse.model_validate(split)


@router.post("/mortgage-payment", response_model=MortgagePaymentResponse, status_code=201)
def mortgage_payment(
    request: MortgagePaymentRequest,
    db: Session = Depends(get_db),
):
    service = TransactionService(db)
    try:
        txn, split = service.create_mortgage_payment(request)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise http_error(e)
    return MortgagePaymentResponse(
        transaction=TransactionResponse.model_validate(txn),
        split=MortgageSplitResponse.model_validate(split),
    )


@router.get("/integrity", response_model=IntegrityResponse)
def check_integrity(db: Session = Depends(get_db)):
    """Verify every transaction's lines sum to zero."""
    return LedgerService(db).check_integrity()


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    try:
        return LedgerService(db).get_transaction(transaction_id)
    except ValueError as e:
        raise http_error(e)


@router.post("/{transaction_id}/clear", response_model=TransactionResponse)
def mark_transaction_cleared(
    transaction_id: int,
    request: MarkClearedRequest,
    db: Session = Depends(get_db),
):
    """
    Mark a transaction cleared from the line the user clicked.

    Optionally revises the amount (each line keeps its sign), the
    date and the description.
    """
    service = LedgerService(db)
    try:
        txn = service.mark_transaction_cleared(transaction_id, request)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def edit_transaction(
    transaction_id: int,
    request: EditTransactionRequest,
    db: Session = Depends(get_db),
):
    service = LedgerService(db)
    try:
        txn = service.edit_transaction(transaction_id, request)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """Delete a transaction and its lines. Refused in a closed period."""
    service = LedgerService(db)
    try:
        service.delete_transaction(transaction_id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise http_error(e)
    return Response(status_code=204)
