"""
Chart of accounts endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from contractor_books.api.errors import http_error
from contractor_books.models.base import get_db
from contractor_books.models.enums import AccountType
from contractor_books.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountStatusUpdate,
    AccountUpdate,
)
from contractor_books.schemas.reports import AccountBalanceResponse
from contractor_books.services.account_service import AccountService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """Add an account to the chart of accounts."""
    service = AccountService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    account_type: AccountType | None = None,
    active_only: bool = True,
    db: Session = Depends(get_db),
):
    return AccountService(db).list_accounts(account_type, active_only)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    try:
        return AccountService(db).get_account(account_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
):
    """Rename an account or change its purpose or report category."""
    service = AccountService(db)
    try:
        account = service.update_account(account_id, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.patch("/{account_id}/status", response_model=AccountResponse)
def change_account_status(
    account_id: int,
    request: AccountStatusUpdate,
    db: Session = Depends(get_db),
):
    """Activate or deactivate an account. Accounts are never deleted."""
    service = AccountService(db)
    try:
        account = service.change_status(account_id, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/{account_id}/balance", response_model=AccountBalanceResponse)
def get_account_balance(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Balance derived from the account's lines; never stored."""
    try:
        return AccountService(db).get_balance(account_id)
    except ValueError as e:
        raise http_error(e)
