"""
Account service: the chart of accounts.

Accounts are created, renamed and deactivated here; balances are
never stored and always come from the report rules.
"""

import json
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractor_books.errors import NotFoundError, ValidationError, account_not_found
from contractor_books.models.account import Account
from contractor_books.models.audit_log import AuditLog
from contractor_books.models.enums import AccountType
from contractor_books.schemas.account import (
    AccountCreate,
    AccountStatusUpdate,
    AccountUpdate,
)
from contractor_books.services.balance_rules import AccountBalance
from contractor_books.services.report_service import ReportService

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, request: AccountCreate) -> Account:
        """
        Create a new account.

        Raises ValidationError if the code is already in use.
        """
        if request.code:
            existing = self.db.execute(
                select(Account).where(Account.code == request.code)
            ).scalar_one_or_none()
            if existing:
                raise ValidationError(f"Account with code '{request.code}' already exists")

        account = Account(
            name=request.name,
            code=request.code,
            account_type=request.account_type,
            default_purpose=request.default_purpose,
            report_category=request.report_category,
        )
        self.db.add(account)
        self.db.flush()
        logger.info("Created account %s %s", account.code or "-", account.name)
        return account

    def get_account(self, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_code(self, code: str) -> Account:
        account = self.db.execute(
            select(Account).where(Account.code == code)
        ).scalar_one_or_none()
        if not account:
            raise NotFoundError(f"Account with code '{code}' not found")
        return account

    def list_accounts(
        self,
        account_type: AccountType | None = None,
        active_only: bool = True,
    ) -> list[Account]:
        stmt = select(Account).order_by(Account.code, Account.name)
        if account_type:
            stmt = stmt.where(Account.account_type == account_type)
        if active_only:
            stmt = stmt.where(Account.is_active.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def update_account(self, account_id: int, request: AccountUpdate) -> Account:
        account = self.get_account(account_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            setattr(account, field, value)
        self.db.flush()
        return account

    def change_status(self, account_id: int, request: AccountStatusUpdate) -> Account:
        account = self.get_account(account_id)
        if account.is_active == request.is_active:
            state = "active" if account.is_active else "inactive"
            raise ValidationError(f"Account {account.name} is already {state}")

        account.is_active = request.is_active
        self.db.add(AuditLog(
            event_type="account_activated" if request.is_active else "account_deactivated",
            details=json.dumps({"account_id": account.id, "reason": request.reason}),
        ))
        self.db.flush()
        logger.info(
            "Account %s %s: %s",
            account.id, "activated" if request.is_active else "deactivated", request.reason,
        )
        return account

    def get_balance(self, account_id: int) -> AccountBalance:
        """Balance derived from the account's counted lines."""
        self.get_account(account_id)
        return ReportService(self.db).get_account_balance(account_id)
