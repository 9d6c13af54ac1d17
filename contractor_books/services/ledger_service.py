"""
Ledger service, the single write path for transactions.

This service enforces the bookkeeping rules:
1. Every transaction has at least two lines that sum to zero
2. Every referenced account exists and is active
3. Nothing dated in a closed period is created, cleared, edited or deleted

The caller controls the transaction boundary: methods flush, the
route commits or rolls back.
"""

import datetime as dt
import json
import logging
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from contractor_books.config import get_settings
from contractor_books.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
)
from contractor_books.models.account import Account
from contractor_books.models.audit_log import AuditLog
from contractor_books.models.enums import AccountType, Purpose
from contractor_books.models.transaction import Transaction, TransactionLine
from contractor_books.schemas.transaction import (
    EditTransactionRequest,
    MarkClearedRequest,
    TransactionLineCreate,
)
from contractor_books.services.entry_builder import to_money, verify_balanced
from contractor_books.services.period_service import PeriodService

logger = logging.getLogger(__name__)


def derive_purpose(accounts: list[Account], purpose: Purpose | None = None) -> Purpose:
    """Explicit purpose wins; otherwise personal if any account defaults to personal."""
    if purpose:
        return purpose
    if any(a.default_purpose == Purpose.PERSONAL for a in accounts):
        return Purpose.PERSONAL
    return Purpose.BUSINESS


def _sign(amount: Decimal) -> int:
    return -1 if amount < 0 else 1


class LedgerService:
    """
    All transaction writes pass through this service.

    The service takes a database session as a constructor
    argument and never commits.
    """

    def __init__(self, db: Session):
        self.db = db
        self.periods = PeriodService(db)

    # --- Lookups ---

    def get_transaction(self, transaction_id: int) -> Transaction:
        txn = self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.lines))
            .where(Transaction.id == transaction_id)
        ).scalar_one_or_none()
        if not txn:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def get_line(self, line_id: int) -> TransactionLine:
        line = self.db.get(TransactionLine, line_id)
        if not line:
            raise NotFoundError(f"Transaction line {line_id} not found")
        return line

    def get_active_accounts(self, account_ids: set[int]) -> dict[int, Account]:
        """Load accounts by id. Raises if any is missing or inactive."""
        accounts = self.db.execute(
            select(Account).where(Account.id.in_(account_ids))
        ).scalars().all()
        accounts_by_id = {a.id: a for a in accounts}

        missing = sorted(account_ids - set(accounts_by_id))
        if missing:
            raise NotFoundError(
                ", ".join(account_not_found(account_id) for account_id in missing)
            )
        for account in accounts_by_id.values():
            if not account.is_active:
                raise ValidationError(f"Account {account.name} is not active")
        return accounts_by_id

    # --- Persistence procedures ---

    def create_transaction(
        self,
        date: dt.date,
        description: str | None,
        line1: TransactionLineCreate,
        line2: TransactionLineCreate,
        purpose: Purpose | None = None,
    ) -> Transaction:
        """Create a two-line transaction atomically."""
        return self.create_transaction_multi(date, description, [line1, line2], purpose)

    def create_transaction_multi(
        self,
        date: dt.date,
        description: str | None,
        lines: list[TransactionLineCreate],
        purpose: Purpose | None = None,
    ) -> Transaction:
        """
        Create a balanced transaction of two or more lines.

        Checks line count, accounts, balance and period before
        anything is added to the session. If any check fails,
        nothing is written.
        """
        verify_balanced(lines, get_settings().BALANCE_TOLERANCE)
        accounts = self.get_active_accounts({line.account_id for line in lines})
        self.periods.assert_period_open(date)

        txn_purpose = derive_purpose(list(accounts.values()), purpose)
        txn = Transaction(date=date, description=description)
        for draft in lines:
            txn.lines.append(TransactionLine(
                account_id=draft.account_id,
                amount=to_money(draft.amount),
                is_cleared=draft.is_cleared,
                cleared_date=date if draft.is_cleared else None,
                purpose=draft.purpose or txn_purpose,
                job_id=draft.job_id,
                vendor_id=draft.vendor_id,
                installer_id=draft.installer_id,
                real_estate_deal_id=draft.real_estate_deal_id,
                rehab_category_id=draft.rehab_category_id,
                cost_type=draft.cost_type,
            ))
        self.db.add(txn)
        self.db.flush()
        logger.info(
            "Created transaction %s dated %s with %d lines",
            txn.id, date.isoformat(), len(lines),
        )
        return txn

    def mark_transaction_cleared(
        self,
        transaction_id: int,
        request: MarkClearedRequest,
        today: dt.date | None = None,
    ) -> Transaction:
        """
        Clear a transaction starting from the line the user clicked.

        The clicked line and any income/expense lines are marked
        cleared. A new amount is a magnitude: each line keeps its
        sign. Other cash-side lines keep their own status, since the
        other side may clear on a different statement.
        """
        today = today or dt.date.today()
        txn = self.get_transaction(transaction_id)
        clicked = self.get_line(request.clicked_line_id)
        if clicked.transaction_id != txn.id:
            raise ValidationError(
                f"Line {clicked.id} does not belong to transaction {txn.id}"
            )

        self.periods.assert_period_open(txn.date)
        if request.new_date and request.new_date != txn.date:
            self.periods.assert_period_open(request.new_date)

        if request.new_amount is not None:
            new_amount = to_money(request.new_amount)
            if len(txn.lines) == 2:
                other = next(line for line in txn.lines if line.id != clicked.id)
                clicked.amount = _sign(clicked.amount) * new_amount
                other.amount = -clicked.amount
            elif new_amount != abs(clicked.amount):
                raise ValidationError(
                    "Amount can only be changed on two-line transactions; "
                    "edit the split lines instead"
                )

        for line in txn.lines:
            is_category = line.account.account_type in (AccountType.INCOME, AccountType.EXPENSE)
            if line.id == clicked.id or is_category:
                line.is_cleared = True
                line.cleared_date = today

        if request.new_date:
            txn.date = request.new_date
        if request.new_description is not None:
            txn.description = request.new_description

        verify_balanced(txn.lines, get_settings().BALANCE_TOLERANCE)
        self.db.flush()
        logger.info("Cleared transaction %s from line %s", txn.id, clicked.id)
        return txn

    def edit_transaction(
        self,
        transaction_id: int,
        request: EditTransactionRequest,
    ) -> Transaction:
        """
        Edit a two-line transaction.

        The balance-sheet line is the cash side and the other one the
        category side. A new amount keeps each line's sign.
        """
        txn = self.get_transaction(transaction_id)
        self.periods.assert_period_open(txn.date)
        if request.date and request.date != txn.date:
            self.periods.assert_period_open(request.date)

        if len(txn.lines) != 2:
            raise ValidationError("Only two-line transactions can be edited here")

        cash_line = next(
            (line for line in txn.lines if line.account.is_balance_sheet),
            txn.lines[0],
        )
        category_line = next(line for line in txn.lines if line is not cash_line)

        new_ids = {
            account_id
            for account_id in (request.cash_account_id, request.category_account_id)
            if account_id is not None
        }
        if new_ids:
            self.get_active_accounts(new_ids)
        if request.cash_account_id is not None:
            cash_line.account_id = request.cash_account_id
        if request.category_account_id is not None:
            category_line.account_id = request.category_account_id
        if cash_line.account_id == category_line.account_id:
            raise ValidationError("The two lines must post to different accounts.")

        if request.amount is not None:
            amount = to_money(request.amount)
            cash_line.amount = _sign(cash_line.amount) * amount
            category_line.amount = -cash_line.amount
        if request.date:
            txn.date = request.date
        if request.description is not None:
            txn.description = request.description

        verify_balanced(txn.lines, get_settings().BALANCE_TOLERANCE)
        self.db.flush()
        logger.info("Edited transaction %s", txn.id)
        return txn

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its lines. Refused in a closed period."""
        txn = self.get_transaction(transaction_id)
        self.periods.assert_period_open(txn.date)

        self.db.add(AuditLog(
            event_type="transaction_deleted",
            details=json.dumps({
                "transaction_id": txn.id,
                "date": txn.date.isoformat(),
                "description": txn.description,
                "lines": [
                    {"account_id": line.account_id, "amount": str(line.amount)}
                    for line in txn.lines
                ],
            }),
        ))
        self.db.delete(txn)
        self.db.flush()
        logger.info("Deleted transaction %s", transaction_id)

    # --- Integrity ---

    def check_integrity(self) -> dict:
        """
        Verify every transaction's lines sum to zero.

        Returns the overall flag and the ids of any transaction
        that does not balance.
        """
        tolerance = get_settings().BALANCE_TOLERANCE
        totals = self.db.execute(
            select(TransactionLine.transaction_id, func.sum(TransactionLine.amount))
            .group_by(TransactionLine.transaction_id)
        ).all()

        unbalanced = sorted(
            transaction_id
            for transaction_id, total in totals
            if abs(Decimal(str(total))) >= tolerance
        )
        if unbalanced:
            logger.error("Unbalanced transactions found: %s", unbalanced)
        return {
            "is_balanced": not unbalanced,
            "transactions_checked": len(totals),
            "unbalanced_transaction_ids": unbalanced,
        }
