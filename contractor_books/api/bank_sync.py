"""
Bank aggregator sync endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from contractor_books.api.errors import http_error
from contractor_books.models.base import get_db
from contractor_books.schemas.bank_sync import (
    BankLinkCreate,
    BankLinkResponse,
    ImportedTransactionResponse,
    PostImportedRequest,
    SyncResultResponse,
)
from contractor_books.schemas.transaction import TransactionResponse
from contractor_books.services.bank_sync_service import BankSyncService

router = APIRouter(prefix="/bank-sync", tags=["Bank Sync"])


@router.post("/links", response_model=BankLinkResponse, status_code=201)
def create_link(
    request: BankLinkCreate,
    db: Session = Depends(get_db),
):
    """Store an aggregator access token for incremental sync."""
    link = BankSyncService(db).create_link(request)
    db.commit()
    return link


@router.get("/links", response_model=list[BankLinkResponse])
def list_links(db: Session = Depends(get_db)):
    return BankSyncService(db).list_links()


@router.post("/links/{link_id}/sync", response_model=SyncResultResponse)
def sync_link(
    link_id: int,
    db: Session = Depends(get_db),
):
    """
    Pull new transactions since the stored cursor.

    On an aggregator error nothing is staged and the cursor stays put.
    """
    service = BankSyncService(db)
    try:
        result = service.sync_link(link_id)
        db.commit()
        return result
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/imported", response_model=list[ImportedTransactionResponse])
def list_imported(
    unposted_only: bool = True,
    db: Session = Depends(get_db),
):
    return BankSyncService(db).list_imported(unposted_only)


@router.post(
    "/imported/{imported_id}/post",
    response_model=TransactionResponse,
    status_code=201,
)
def post_imported(
    imported_id: int,
    request: PostImportedRequest,
    db: Session = Depends(get_db),
):
    """Post a staged bank row to the ledger as income or expense."""
    service = BankSyncService(db)
    try:
        txn = service.post_imported_transaction(imported_id, request)
        db.commit()
        return txn
    except ValueError as e:
        db.rollback()
        raise http_error(e)
