"""Mortgage payment split: principal, interest and escrow."""

from dataclasses import dataclass
from decimal import Decimal

from contractor_books.errors import ValidationError
from contractor_books.services.entry_builder import to_money

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class MortgageSplit:
    principal: Decimal
    interest: Decimal
    escrow: Decimal
    escrow_inferred: bool = True

    @property
    def total(self) -> Decimal:
        return self.principal + self.interest + self.escrow


def compute_mortgage_split(
    total_payment: Decimal,
    original_loan_amount: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
    principal_paid: Decimal = Decimal("0"),
    known_escrow: Decimal | None = None,
) -> MortgageSplit:
    """
    Split a payment using the standard amortization formula.

    Interest accrues on the remaining balance and is paid first.
    Principal is the constant P&I payment minus interest, never more
    than the remaining balance or what is left of the payment. When
    the deal carries monthly taxes and insurance (``known_escrow``)
    that amount is reserved as escrow; otherwise escrow is whatever
    the payment has left over. The three parts always add up to the
    payment exactly and none of them is negative.
    """
    total_payment = to_money(total_payment)
    if total_payment <= 0:
        raise ValidationError("Payment amount is required.")
    if not original_loan_amount or not term_months:
        raise ValidationError(
            "Deal is missing original_loan_amount, interest_rate, or loan_term_months."
        )

    loan = Decimal(str(original_loan_amount))
    remaining = max(to_money(loan - Decimal(str(principal_paid))), ZERO)
    monthly_rate = Decimal(str(annual_rate_percent or 0)) / Decimal("100") / Decimal("12")

    reserved = min(to_money(known_escrow or 0), total_payment)
    escrow_inferred = reserved <= 0
    available = total_payment - max(reserved, ZERO)

    if monthly_rate <= 0:
        interest = ZERO
        principal = min(available, remaining)
    else:
        payment_pi = (loan * monthly_rate) / (1 - (1 + monthly_rate) ** -term_months)
        interest = min(to_money(remaining * monthly_rate), available)
        if escrow_inferred:
            principal = to_money(payment_pi) - interest
        else:
            principal = available - interest
        principal = max(min(principal, remaining, available - interest), ZERO)

    escrow = to_money(total_payment - principal - interest)
    return MortgageSplit(
        principal=to_money(principal),
        interest=to_money(interest),
        escrow=escrow,
        escrow_inferred=escrow_inferred,
    )
