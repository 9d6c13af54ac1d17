"""
Tests for the LedgerService.

Tests cover:
- Balanced transaction creation
- Unbalanced and inactive-account rejection with nothing written
- Purpose derivation
- Mark cleared with a revised amount
- Editing and deleting two-line transactions
- Closed period locks
- Ledger integrity check
"""

import datetime as dt
import json
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from contractor_books.errors import (
    NotFoundError,
    PeriodClosedError,
    UnbalancedTransactionError,
    ValidationError,
)
from contractor_books.models.audit_log import AuditLog
from contractor_books.models.enums import AccountType, Purpose
from contractor_books.models.transaction import Transaction, TransactionLine
from contractor_books.schemas.account import AccountCreate, AccountStatusUpdate
from contractor_books.schemas.transaction import (
    EditTransactionRequest,
    MarkClearedRequest,
    TransactionLineCreate,
)
from contractor_books.services.account_service import AccountService
from contractor_books.services.ledger_service import LedgerService
from contractor_books.services.period_service import PeriodService

DAY = dt.date(2024, 3, 15)


# --- Helpers to reduce repetition ---

def make_account(db, code, name, account_type, default_purpose=None):
    """Create an account and return it."""
    return AccountService(db).create_account(AccountCreate(
        code=code,
        name=name,
        account_type=account_type,
        default_purpose=default_purpose,
    ))


def line(account, amount, **kwargs):
    return TransactionLineCreate(account_id=account.id, amount=Decimal(amount), **kwargs)


def post_expense(service, bank, expense, amount="100.00", date=DAY, **kwargs):
    return service.create_transaction(
        date, "Lumber", line(expense, amount, **kwargs), line(bank, f"-{amount}", **kwargs)
    )


def count_transactions(db):
    return db.execute(select(func.count(Transaction.id))).scalar_one()


@pytest.fixture
def accounts(db_session):
    bank = make_account(db_session, "1000", "Checking", AccountType.ASSET)
    card = make_account(db_session, "2000", "Visa", AccountType.LIABILITY)
    expense = make_account(db_session, "50000", "Materials", AccountType.EXPENSE)
    income = make_account(db_session, "40000", "Job Income", AccountType.INCOME)
    db_session.commit()
    return {"bank": bank, "card": card, "expense": expense, "income": income}


# --- Create ---

class TestCreateTransaction:

    def test_balanced_transaction_succeeds(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"])
        db_session.commit()

        assert txn.id is not None
        assert len(txn.lines) == 2
        assert sum(l.amount for l in txn.lines) == 0
        assert all(l.purpose == Purpose.BUSINESS for l in txn.lines)

    def test_unbalanced_transaction_writes_nothing(self, db_session, accounts):
        service = LedgerService(db_session)

        with pytest.raises(UnbalancedTransactionError):
            service.create_transaction(
                DAY, "Bad",
                line(accounts["expense"], "100.00"),
                line(accounts["bank"], "-99.00"),
            )
        db_session.rollback()

        assert count_transactions(db_session) == 0

    def test_multi_line_transaction(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = service.create_transaction_multi(DAY, "Split", [
            line(accounts["expense"], "60.00"),
            line(accounts["expense"], "40.00"),
            line(accounts["bank"], "-100.00"),
        ])
        db_session.commit()

        assert len(txn.lines) == 3

    def test_inactive_account_rejected(self, db_session, accounts):
        AccountService(db_session).change_status(
            accounts["card"].id, AccountStatusUpdate(is_active=False, reason="Closed card")
        )
        db_session.commit()

        service = LedgerService(db_session)
        with pytest.raises(ValidationError, match="not active"):
            post_expense(service, accounts["card"], accounts["expense"])
        db_session.rollback()

        assert count_transactions(db_session) == 0

    def test_missing_account_rejected(self, db_session, accounts):
        service = LedgerService(db_session)

        with pytest.raises(NotFoundError, match="Account 999 not found"):
            service.create_transaction(
                DAY, None,
                line(accounts["bank"], "10.00"),
                TransactionLineCreate(account_id=999, amount=Decimal("-10.00")),
            )

    def test_personal_default_makes_transaction_personal(self, db_session, accounts):
        groceries = make_account(
            db_session, "70000", "Groceries", AccountType.EXPENSE,
            default_purpose=Purpose.PERSONAL,
        )
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], groceries)

        assert all(l.purpose == Purpose.PERSONAL for l in txn.lines)

    def test_explicit_purpose_wins(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = service.create_transaction(
            DAY, None,
            line(accounts["expense"], "10.00"),
            line(accounts["bank"], "-10.00"),
            purpose=Purpose.MIXED,
        )

        assert all(l.purpose == Purpose.MIXED for l in txn.lines)

    def test_cleared_line_gets_cleared_date(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"], is_cleared=True)

        assert all(l.cleared_date == DAY for l in txn.lines)


# --- Mark cleared ---

class TestMarkCleared:

    def test_clicked_and_category_lines_clear(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["card"], accounts["expense"])
        card_line = next(l for l in txn.lines if l.account_id == accounts["card"].id)
        db_session.commit()

        service.mark_transaction_cleared(
            txn.id,
            MarkClearedRequest(clicked_line_id=card_line.id),
            today=dt.date(2024, 3, 20),
        )
        db_session.commit()

        assert all(l.is_cleared for l in txn.lines)
        assert all(l.cleared_date == dt.date(2024, 3, 20) for l in txn.lines)

    def test_other_cash_line_keeps_status(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = service.create_transaction(
            DAY, "Pay card",
            line(accounts["card"], "250.00"),
            line(accounts["bank"], "-250.00"),
        )
        bank_line = next(l for l in txn.lines if l.account_id == accounts["bank"].id)
        card_line = next(l for l in txn.lines if l.account_id == accounts["card"].id)
        db_session.commit()

        service.mark_transaction_cleared(txn.id, MarkClearedRequest(clicked_line_id=bank_line.id))

        assert bank_line.is_cleared
        assert not card_line.is_cleared

    def test_revised_amount_keeps_signs(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"], amount="100.00")
        bank_line = next(l for l in txn.lines if l.account_id == accounts["bank"].id)
        expense_line = next(l for l in txn.lines if l.account_id == accounts["expense"].id)
        db_session.commit()

        service.mark_transaction_cleared(
            txn.id,
            MarkClearedRequest(
                clicked_line_id=bank_line.id,
                new_amount=Decimal("103.25"),
                new_description="Lumber (final)",
            ),
        )
        db_session.commit()

        assert bank_line.amount == Decimal("-103.25")
        assert expense_line.amount == Decimal("103.25")
        assert txn.description == "Lumber (final)"

    def test_line_from_other_transaction_rejected(self, db_session, accounts):
        service = LedgerService(db_session)
        first = post_expense(service, accounts["bank"], accounts["expense"])
        second = post_expense(service, accounts["bank"], accounts["expense"])
        db_session.commit()

        with pytest.raises(ValidationError, match="does not belong"):
            service.mark_transaction_cleared(
                first.id, MarkClearedRequest(clicked_line_id=second.lines[0].id)
            )

    def test_amount_change_on_split_rejected(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = service.create_transaction_multi(DAY, "Split", [
            line(accounts["expense"], "60.00"),
            line(accounts["expense"], "40.00"),
            line(accounts["bank"], "-100.00"),
        ])
        bank_line = next(l for l in txn.lines if l.account_id == accounts["bank"].id)
        db_session.commit()

        with pytest.raises(ValidationError, match="two-line"):
            service.mark_transaction_cleared(
                txn.id,
                MarkClearedRequest(clicked_line_id=bank_line.id, new_amount=Decimal("90")),
            )


# --- Edit / delete ---

class TestEditAndDelete:

    def test_edit_amount_and_category(self, db_session, accounts):
        other_expense = make_account(db_session, "58000", "Office", AccountType.EXPENSE)
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"])
        db_session.commit()

        service.edit_transaction(txn.id, EditTransactionRequest(
            amount=Decimal("80.00"),
            category_account_id=other_expense.id,
            description="Printer paper",
        ))
        db_session.commit()

        by_account = {l.account_id: l.amount for l in txn.lines}
        assert by_account == {
            other_expense.id: Decimal("80.00"),
            accounts["bank"].id: Decimal("-80.00"),
        }
        assert txn.description == "Printer paper"

    def test_edit_to_same_account_rejected(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"])
        db_session.commit()

        with pytest.raises(ValidationError, match="different accounts"):
            service.edit_transaction(
                txn.id, EditTransactionRequest(category_account_id=accounts["bank"].id)
            )

    def test_delete_writes_audit_log(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"])
        db_session.commit()
        txn_id = txn.id

        service.delete_transaction(txn_id)
        db_session.commit()

        assert count_transactions(db_session) == 0
        assert db_session.execute(select(func.count(TransactionLine.id))).scalar_one() == 0
        entry = db_session.execute(select(AuditLog)).scalar_one()
        assert entry.event_type == "transaction_deleted"
        assert json.loads(entry.details)["transaction_id"] == txn_id

    def test_delete_unknown_transaction(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService(db_session).delete_transaction(42)


# --- Period lock ---

class TestPeriodLock:

    def close_march(self, db):
        PeriodService(db).close_period("2024-03", closed_by="owner", today=dt.date(2024, 5, 1))
        db.commit()

    def test_create_in_closed_period_rejected(self, db_session, accounts):
        self.close_march(db_session)
        service = LedgerService(db_session)

        with pytest.raises(PeriodClosedError, match="2024-03 is closed"):
            post_expense(service, accounts["bank"], accounts["expense"])

    def test_create_after_closed_period_allowed(self, db_session, accounts):
        self.close_march(db_session)
        service = LedgerService(db_session)

        txn = post_expense(service, accounts["bank"], accounts["expense"], date=dt.date(2024, 4, 1))
        assert txn.id is not None

    def test_locked_transaction_cannot_be_cleared_edited_or_deleted(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"])
        db_session.commit()
        self.close_march(db_session)

        with pytest.raises(PeriodClosedError):
            service.mark_transaction_cleared(
                txn.id, MarkClearedRequest(clicked_line_id=txn.lines[0].id)
            )
        with pytest.raises(PeriodClosedError):
            service.edit_transaction(txn.id, EditTransactionRequest(amount=Decimal("5")))
        with pytest.raises(PeriodClosedError):
            service.delete_transaction(txn.id)

    def test_cannot_move_transaction_into_closed_period(self, db_session, accounts):
        self.close_march(db_session)
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"], date=dt.date(2024, 4, 2))
        db_session.commit()

        with pytest.raises(PeriodClosedError):
            service.edit_transaction(txn.id, EditTransactionRequest(date=dt.date(2024, 3, 30)))


# --- Integrity ---

class TestIntegrity:

    def test_clean_ledger_is_balanced(self, db_session, accounts):
        service = LedgerService(db_session)
        post_expense(service, accounts["bank"], accounts["expense"])
        post_expense(service, accounts["card"], accounts["expense"])
        db_session.commit()

        result = service.check_integrity()

        assert result["is_balanced"] is True
        assert result["transactions_checked"] == 2
        assert result["unbalanced_transaction_ids"] == []

    def test_corrupted_transaction_reported(self, db_session, accounts):
        service = LedgerService(db_session)
        txn = post_expense(service, accounts["bank"], accounts["expense"])
        db_session.commit()
        # Bypass the service to simulate a bad write
        txn.lines[0].amount = Decimal("1.00")
        db_session.commit()

        result = service.check_integrity()

        assert result["is_balanced"] is False
        assert result["unbalanced_transaction_ids"] == [txn.id]
