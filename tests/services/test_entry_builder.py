"""
Tests for the double-entry line builders.

The builders are pure, so these tests need no database.
"""

from decimal import Decimal

import pytest

from contractor_books.errors import UnbalancedTransactionError, ValidationError
from contractor_books.models.enums import CostType, ExpenseKind, Purpose
from contractor_books.schemas.transaction import TransactionLineCreate
from contractor_books.services.entry_builder import (
    build_acquisition_lines,
    build_deal_expense_lines,
    build_expense_lines,
    build_income_lines,
    build_loan_draw_lines,
    build_mortgage_payment_lines,
    build_refund_lines,
    build_sale_lines,
    build_transfer_lines,
    lines_total,
    verify_balanced,
)

CASH, CATEGORY, OTHER_CASH = 1, 2, 3
ASSET, LOAN, CLOSING, GAIN, EXPENSE = 10, 11, 12, 13, 14


def amounts(lines):
    return {line.account_id: line.amount for line in lines}


class TestVerifyBalanced:

    def test_balanced_lines_pass(self):
        verify_balanced([
            TransactionLineCreate(account_id=CASH, amount=Decimal("10.00")),
            TransactionLineCreate(account_id=CATEGORY, amount=Decimal("-10.00")),
        ])

    def test_unbalanced_lines_rejected(self):
        with pytest.raises(UnbalancedTransactionError, match="does not balance"):
            verify_balanced([
                TransactionLineCreate(account_id=CASH, amount=Decimal("10.00")),
                TransactionLineCreate(account_id=CATEGORY, amount=Decimal("-9.98")),
            ])

    def test_single_line_rejected(self):
        with pytest.raises(UnbalancedTransactionError, match="at least two lines"):
            verify_balanced([TransactionLineCreate(account_id=CASH, amount=Decimal("10.00"))])

    def test_unbalanced_error_is_a_value_error(self):
        assert issubclass(UnbalancedTransactionError, ValueError)


class TestIncomeExpenseTransfer:

    def test_income_credits_category(self):
        lines = build_income_lines(CASH, CATEGORY, Decimal("500"), job_id=7)
        assert amounts(lines) == {CASH: Decimal("500.00"), CATEGORY: Decimal("-500.00")}
        category_line = next(l for l in lines if l.account_id == CATEGORY)
        assert category_line.job_id == 7

    def test_expense_debits_category(self):
        lines = build_expense_lines(CASH, CATEGORY, Decimal("120.50"))
        assert amounts(lines) == {CATEGORY: Decimal("120.50"), CASH: Decimal("-120.50")}
        assert lines_total(lines) == 0

    def test_transfer_moves_between_cash_accounts(self):
        lines = build_transfer_lines(CASH, OTHER_CASH, Decimal("75"))
        assert amounts(lines) == {CASH: Decimal("-75.00"), OTHER_CASH: Decimal("75.00")}

    def test_transfer_to_same_account_rejected(self):
        with pytest.raises(ValidationError, match="must be different"):
            build_transfer_lines(CASH, CASH, Decimal("75"))

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_non_positive_amount_rejected(self, amount):
        with pytest.raises(ValidationError, match="positive"):
            build_expense_lines(CASH, CATEGORY, amount)

    def test_material_job_expense_requires_vendor(self):
        with pytest.raises(ValidationError, match="Vendor is required"):
            build_expense_lines(
                CASH, CATEGORY, Decimal("40"), job_id=1, expense_kind=ExpenseKind.MATERIAL
            )

    def test_labor_job_expense_requires_installer(self):
        with pytest.raises(ValidationError, match="Installer is required"):
            build_expense_lines(
                CASH, CATEGORY, Decimal("40"), job_id=1, expense_kind=ExpenseKind.LABOR
            )

    def test_expense_kind_ignored_without_job(self):
        lines = build_expense_lines(
            CASH, CATEGORY, Decimal("40"), expense_kind=ExpenseKind.LABOR
        )
        assert len(lines) == 2

    def test_labor_expense_drops_vendor(self):
        lines = build_expense_lines(
            CASH, CATEGORY, Decimal("40"),
            job_id=1, vendor_id=5, installer_id=6, expense_kind=ExpenseKind.LABOR,
        )
        category_line = next(l for l in lines if l.account_id == CATEGORY)
        assert category_line.installer_id == 6
        assert category_line.vendor_id is None


class TestFlipBuilders:

    def test_acquisition_cash_to_close(self):
        lines = build_acquisition_lines(
            1,
            asset_account_id=ASSET,
            cash_account_id=CASH,
            purchase=Decimal("146000"),
            loan=Decimal("128223"),
            closing=Decimal("18000"),
            loan_account_id=LOAN,
            closing_account_id=CLOSING,
        )
        assert amounts(lines) == {
            ASSET: Decimal("146000.00"),
            CLOSING: Decimal("18000.00"),
            LOAN: Decimal("-128223.00"),
            CASH: Decimal("-35777.00"),
        }
        assert lines_total(lines) == 0
        assert all(l.real_estate_deal_id == 1 for l in lines)
        assert all(l.purpose == Purpose.BUSINESS for l in lines)

    def test_acquisition_without_loan_or_closing(self):
        lines = build_acquisition_lines(
            1, asset_account_id=ASSET, cash_account_id=CASH, purchase=Decimal("90000"),
        )
        assert amounts(lines) == {ASSET: Decimal("90000.00"), CASH: Decimal("-90000.00")}

    def test_acquisition_requires_asset_account(self):
        with pytest.raises(ValidationError, match="no asset account"):
            build_acquisition_lines(
                1, asset_account_id=None, cash_account_id=CASH, purchase=Decimal("90000"),
            )

    def test_acquisition_with_loan_requires_loan_account(self):
        with pytest.raises(ValidationError, match="no loan account"):
            build_acquisition_lines(
                1, asset_account_id=ASSET, cash_account_id=CASH,
                purchase=Decimal("90000"), loan=Decimal("50000"),
            )

    def test_rehab_labor_requires_installer(self):
        with pytest.raises(ValidationError, match="Installer is required"):
            build_deal_expense_lines(
                1, expense_account_id=EXPENSE, cash_account_id=CASH,
                amount=Decimal("800"), cost_type=CostType.LABOR,
            )

    def test_rehab_material_carries_cost_type(self):
        lines = build_deal_expense_lines(
            1, expense_account_id=EXPENSE, cash_account_id=CASH,
            amount=Decimal("800"), cost_type=CostType.MATERIALS,
            rehab_category_id=3, vendor_id=9,
        )
        assert amounts(lines) == {EXPENSE: Decimal("800.00"), CASH: Decimal("-800.00")}
        assert all(l.cost_type == CostType.MATERIALS for l in lines)
        assert all(l.rehab_category_id == 3 for l in lines)

    def test_loan_draw_credits_loan(self):
        lines = build_loan_draw_lines(
            1, cash_account_id=CASH, loan_account_id=LOAN, amount=Decimal("20000"),
        )
        assert amounts(lines) == {CASH: Decimal("20000.00"), LOAN: Decimal("-20000.00")}

    def test_refund_offsets_expense(self):
        lines = build_refund_lines(
            1, cash_account_id=CASH, expense_account_id=EXPENSE, amount=Decimal("60"),
        )
        assert amounts(lines) == {CASH: Decimal("60.00"), EXPENSE: Decimal("-60.00")}

    def test_sale_books_gain(self):
        lines = build_sale_lines(
            1,
            cash_account_id=CASH,
            sale_price=Decimal("250000"),
            asset_account_id=ASSET,
            asset_basis=Decimal("146000"),
            loan_account_id=LOAN,
            loan_balance=Decimal("128223"),
            selling_costs=Decimal("15000"),
            closing_account_id=CLOSING,
            gain_account_id=GAIN,
        )
        result = amounts(lines)
        assert result[CASH] == Decimal("106777.00")
        assert result[LOAN] == Decimal("128223.00")
        assert result[CLOSING] == Decimal("15000.00")
        assert result[ASSET] == Decimal("-146000.00")
        assert result[GAIN] == Decimal("-104000.00")
        assert lines_total(lines) == 0

    def test_sale_at_a_loss_debits_gain_account(self):
        lines = build_sale_lines(
            1,
            cash_account_id=CASH,
            sale_price=Decimal("100000"),
            asset_account_id=ASSET,
            asset_basis=Decimal("120000"),
            gain_account_id=GAIN,
        )
        assert amounts(lines)[GAIN] == Decimal("20000.00")

    def test_mortgage_payment_skips_zero_escrow(self):
        lines = build_mortgage_payment_lines(
            1,
            bank_account_id=CASH,
            loan_account_id=LOAN,
            interest_account_id=EXPENSE,
            escrow_account_id=CLOSING,
            total_payment=Decimal("1000"),
            principal=Decimal("400"),
            interest=Decimal("600"),
            escrow=Decimal("0"),
        )
        assert amounts(lines) == {
            CASH: Decimal("-1000.00"),
            LOAN: Decimal("400.00"),
            EXPENSE: Decimal("600.00"),
        }
        assert all(l.is_cleared for l in lines)
