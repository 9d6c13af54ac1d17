"""
Double-entry line builders.

Pure functions: given user-entered amounts and resolved account ids,
produce the signed lines of one transaction. Every builder re-verifies
that its lines sum to zero before returning, so an unbalanced draft
never reaches the database.

Sign convention: positive increases assets and expenses (debit),
negative increases liabilities and income (credit).
"""

from decimal import Decimal, ROUND_HALF_UP

from contractor_books.errors import ValidationError, UnbalancedTransactionError
from contractor_books.models.enums import CostType, ExpenseKind, Purpose
from contractor_books.schemas.transaction import TransactionLineCreate

CENT = Decimal("0.01")
BALANCE_TOLERANCE = Decimal("0.01")


def to_money(value) -> Decimal:
    """Round a number to cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def require_positive(amount: Decimal | None, message: str = "Amount must be a positive number.") -> Decimal:
    if amount is None or amount <= 0:
        raise ValidationError(message)
    return to_money(amount)


def lines_total(lines: list[TransactionLineCreate]) -> Decimal:
    return sum((line.amount for line in lines), Decimal("0"))


def verify_balanced(
    lines: list[TransactionLineCreate],
    tolerance: Decimal = BALANCE_TOLERANCE,
) -> None:
    """Raise UnbalancedTransactionError unless lines sum to zero within tolerance."""
    if len(lines) < 2:
        raise UnbalancedTransactionError(
            f"A transaction needs at least two lines, got {len(lines)}"
        )
    total = lines_total(lines)
    if abs(total) >= tolerance:
        raise UnbalancedTransactionError(
            f"Transaction does not balance: lines sum to {total}"
        )


def effective_expense_kind(kind: ExpenseKind, job_id: int | None) -> ExpenseKind:
    """Expense kind only applies to job expenses."""
    return kind if job_id else ExpenseKind.OTHER


def validate_expense_links(
    kind: ExpenseKind,
    job_id: int | None,
    vendor_id: int | None,
    installer_id: int | None,
) -> ExpenseKind:
    kind = effective_expense_kind(kind, job_id)
    if kind == ExpenseKind.MATERIAL and not vendor_id:
        raise ValidationError("Vendor is required for material expenses.")
    if kind == ExpenseKind.LABOR and not installer_id:
        raise ValidationError("Installer is required for labor expenses.")
    return kind


def _line(account_id: int, amount: Decimal, **links) -> TransactionLineCreate:
    return TransactionLineCreate(account_id=account_id, amount=to_money(amount), **links)


# --- Income / expense / transfer ---

def build_income_lines(
    cash_account_id: int,
    category_account_id: int,
    amount: Decimal,
    *,
    job_id: int | None = None,
    vendor_id: int | None = None,
    installer_id: int | None = None,
    real_estate_deal_id: int | None = None,
    purpose: Purpose | None = None,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """Cash +amount, category -amount. Attribution rides on the category line."""
    amount = require_positive(amount)
    lines = [
        _line(
            cash_account_id, amount,
            real_estate_deal_id=real_estate_deal_id,
            purpose=purpose, is_cleared=is_cleared,
        ),
        _line(
            category_account_id, -amount,
            job_id=job_id, vendor_id=vendor_id, installer_id=installer_id,
            real_estate_deal_id=real_estate_deal_id,
            purpose=purpose, is_cleared=is_cleared,
        ),
    ]
    verify_balanced(lines)
    return lines


def build_expense_lines(
    cash_account_id: int,
    category_account_id: int,
    amount: Decimal,
    *,
    job_id: int | None = None,
    vendor_id: int | None = None,
    installer_id: int | None = None,
    real_estate_deal_id: int | None = None,
    expense_kind: ExpenseKind = ExpenseKind.OTHER,
    purpose: Purpose | None = None,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """Category +amount, cash -amount."""
    amount = require_positive(amount)
    kind = validate_expense_links(expense_kind, job_id, vendor_id, installer_id)
    # Job expenses keep only the counterparty matching their kind
    if job_id:
        vendor_id = vendor_id if kind == ExpenseKind.MATERIAL else None
        installer_id = installer_id if kind == ExpenseKind.LABOR else None
    lines = [
        _line(
            category_account_id, amount,
            job_id=job_id, vendor_id=vendor_id, installer_id=installer_id,
            real_estate_deal_id=real_estate_deal_id,
            purpose=purpose, is_cleared=is_cleared,
        ),
        _line(
            cash_account_id, -amount,
            real_estate_deal_id=real_estate_deal_id,
            purpose=purpose, is_cleared=is_cleared,
        ),
    ]
    verify_balanced(lines)
    return lines


def build_transfer_lines(
    from_account_id: int,
    to_account_id: int,
    amount: Decimal,
    *,
    purpose: Purpose | None = None,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """From -amount, to +amount. No category line."""
    amount = require_positive(amount, "Transfer amount must be a positive number.")
    if from_account_id == to_account_id:
        raise ValidationError("From and To accounts must be different.")
    lines = [
        _line(from_account_id, -amount, purpose=purpose, is_cleared=is_cleared),
        _line(to_account_id, amount, purpose=purpose, is_cleared=is_cleared),
    ]
    verify_balanced(lines)
    return lines


# --- Flip deal lifecycle ---

def build_acquisition_lines(
    deal_id: int,
    *,
    asset_account_id: int | None,
    cash_account_id: int,
    purchase: Decimal,
    loan: Decimal | None = None,
    closing: Decimal | None = None,
    loan_account_id: int | None = None,
    closing_account_id: int | None = None,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """
    Asset +purchase, closing costs +closing, loan -loan,
    cash -(purchase + closing - loan).
    """
    purchase = require_positive(purchase, "Purchase amount is required.")
    loan = to_money(loan or 0)
    closing = to_money(closing or 0)
    if not asset_account_id:
        raise ValidationError("Deal has no asset account. Please edit the deal first.")
    if loan > 0 and not loan_account_id:
        raise ValidationError("Deal has no loan account.")
    if closing > 0 and not closing_account_id:
        raise ValidationError("Closing costs account not found.")

    common = dict(
        real_estate_deal_id=deal_id,
        purpose=Purpose.BUSINESS,
        is_cleared=is_cleared,
    )
    lines = [_line(asset_account_id, purchase, **common)]
    if closing > 0:
        lines.append(_line(closing_account_id, closing, **common))
    if loan > 0:
        lines.append(_line(loan_account_id, -loan, **common))
    cash_to_close = purchase + closing - loan
    if cash_to_close != 0:
        lines.append(_line(cash_account_id, -cash_to_close, **common))
    verify_balanced(lines)
    return lines


def build_deal_expense_lines(
    deal_id: int,
    *,
    expense_account_id: int,
    cash_account_id: int,
    amount: Decimal,
    cost_type: CostType | None = None,
    rehab_category_id: int | None = None,
    vendor_id: int | None = None,
    installer_id: int | None = None,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """Rehab, holding and interest costs: expense +amount, cash -amount."""
    amount = require_positive(amount, "Amount is required.")
    if cost_type == CostType.LABOR and not installer_id:
        raise ValidationError("Installer is required for labor expenses.")
    common = dict(
        real_estate_deal_id=deal_id,
        rehab_category_id=rehab_category_id,
        cost_type=cost_type,
        purpose=Purpose.BUSINESS,
        is_cleared=is_cleared,
    )
    lines = [
        _line(
            expense_account_id, amount,
            vendor_id=vendor_id, installer_id=installer_id, **common,
        ),
        _line(cash_account_id, -amount, **common),
    ]
    verify_balanced(lines)
    return lines


def build_loan_draw_lines(
    deal_id: int,
    *,
    cash_account_id: int,
    loan_account_id: int | None,
    amount: Decimal,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """Cash +amount, loan -amount."""
    amount = require_positive(amount, "Amount is required.")
    if not loan_account_id:
        raise ValidationError("Deal has no loan account.")
    common = dict(real_estate_deal_id=deal_id, purpose=Purpose.BUSINESS, is_cleared=is_cleared)
    lines = [
        _line(cash_account_id, amount, **common),
        _line(loan_account_id, -amount, **common),
    ]
    verify_balanced(lines)
    return lines


def build_refund_lines(
    deal_id: int,
    *,
    cash_account_id: int,
    expense_account_id: int,
    amount: Decimal,
    rehab_category_id: int | None = None,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """Cash +amount, expense -amount (refund offsets the original cost)."""
    amount = require_positive(amount, "Amount is required.")
    common = dict(
        real_estate_deal_id=deal_id,
        rehab_category_id=rehab_category_id,
        purpose=Purpose.BUSINESS,
        is_cleared=is_cleared,
    )
    lines = [
        _line(cash_account_id, amount, **common),
        _line(expense_account_id, -amount, **common),
    ]
    verify_balanced(lines)
    return lines


def build_sale_lines(
    deal_id: int,
    *,
    cash_account_id: int,
    sale_price: Decimal,
    asset_account_id: int | None,
    asset_basis: Decimal,
    loan_account_id: int | None = None,
    loan_balance: Decimal | None = None,
    selling_costs: Decimal | None = None,
    closing_account_id: int | None = None,
    gain_account_id: int | None = None,
    is_cleared: bool = False,
) -> list[TransactionLineCreate]:
    """
    Close out a flip.

    Cash +(sale - costs - loan), loan +loan balance, closing costs
    +selling costs, asset -basis. The remaining difference
    (sale price - basis) is booked to the gain account, negative
    for a gain, positive for a loss.
    """
    sale_price = require_positive(sale_price, "Sale price is required.")
    selling_costs = to_money(selling_costs or 0)
    loan_balance = to_money(abs(loan_balance or 0))
    asset_basis = to_money(asset_basis)
    if not asset_account_id:
        raise ValidationError("Deal has no asset account.")
    if loan_balance > 0 and not loan_account_id:
        raise ValidationError("Deal has no loan account.")
    if selling_costs > 0 and not closing_account_id:
        raise ValidationError("Closing costs account not found.")

    common = dict(real_estate_deal_id=deal_id, purpose=Purpose.BUSINESS, is_cleared=is_cleared)
    lines = []
    net_proceeds = sale_price - selling_costs - loan_balance
    if net_proceeds != 0:
        lines.append(_line(cash_account_id, net_proceeds, **common))
    if loan_balance > 0:
        lines.append(_line(loan_account_id, loan_balance, **common))
    if selling_costs > 0:
        lines.append(_line(closing_account_id, selling_costs, **common))
    if asset_basis != 0:
        lines.append(_line(asset_account_id, -asset_basis, **common))

    difference = lines_total(lines)
    if difference != 0:
        if not gain_account_id:
            raise ValidationError("Flip sale gain account not found.")
        lines.append(_line(gain_account_id, -difference, **common))
    verify_balanced(lines)
    return lines


def build_mortgage_payment_lines(
    deal_id: int,
    *,
    bank_account_id: int,
    loan_account_id: int,
    interest_account_id: int,
    escrow_account_id: int,
    total_payment: Decimal,
    principal: Decimal,
    interest: Decimal,
    escrow: Decimal,
    purpose: Purpose = Purpose.BUSINESS,
) -> list[TransactionLineCreate]:
    """Bank -total, loan +principal, interest +interest, escrow +escrow."""
    total_payment = require_positive(total_payment, "Payment amount is required.")
    common = dict(real_estate_deal_id=deal_id, purpose=purpose, is_cleared=True)
    lines = [_line(bank_account_id, -total_payment, **common)]
    for account_id, amount in (
        (loan_account_id, principal),
        (interest_account_id, interest),
        (escrow_account_id, escrow),
    ):
        if to_money(amount) != 0:
            lines.append(_line(account_id, amount, **common))
    verify_balanced(lines)
    return lines
