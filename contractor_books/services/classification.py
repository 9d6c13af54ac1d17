"""
Account classification by code range and explicit report category.

Codes are numeric strings. Ranges are inclusive. An account's explicit
``report_category`` always wins over its code range; code ranges are
the fallback for accounts created without one.
"""

import re
from dataclasses import dataclass

from contractor_books.models.enums import AccountType, Purpose, ReportCategory

BANK = (1000, 1999)
CREDIT_CARD = (2000, 2999)
MARKETING = (55000, 55999)
RENTAL_INCOME = (61000, 61999)
RENTAL_EXPENSE = (62005, 62011)
FLIP_EXPENSE = (62013, 62019)

# Specific accounts the flip and mortgage builders post to
FLIP_REHAB_LABOR = "62013"
FLIP_REHAB_MATERIALS = "62014"
FLIP_SERVICES = "62015"
FLIP_CLOSING_COSTS = "62016"
FLIP_HOLDING_COSTS = "62017"
FLIP_INTEREST = "62018"
FLIP_SALE_GAIN = "49000"
MORTGAGE_INTEREST = "62010"
TAXES_AND_INSURANCE = "62011"

COST_TYPE_ACCOUNT_CODES = {
    "L": FLIP_REHAB_LABOR,
    "M": FLIP_REHAB_MATERIALS,
    "S": FLIP_SERVICES,
    "I": FLIP_INTEREST,
    "H": FLIP_HOLDING_COSTS,
}

_NON_DIGITS = re.compile(r"\D")


def parse_account_code(code: str | None) -> int | None:
    """Return the numeric value of an account code, or None."""
    if not code:
        return None
    digits = _NON_DIGITS.sub("", code)
    if not digits:
        return None
    return int(digits)


def code_in_range(code: str | None, bounds: tuple[int, int]) -> bool:
    n = parse_account_code(code)
    return n is not None and bounds[0] <= n <= bounds[1]


def is_bank_code(code: str | None) -> bool:
    return code_in_range(code, BANK)


def is_credit_card_code(code: str | None) -> bool:
    return code_in_range(code, CREDIT_CARD)


def is_cash_account_code(code: str | None) -> bool:
    """Bank or credit card: the accounts money can move between."""
    return is_bank_code(code) or is_credit_card_code(code)


@dataclass(frozen=True)
class LineClassification:
    income_category: str | None
    expense_category: str | None
    is_business: bool
    is_personal: bool


def _income_category(code: str | None, category: ReportCategory | None) -> str:
    if category == ReportCategory.RENTAL_INCOME:
        return "rental"
    if category == ReportCategory.JOB_INCOME:
        return "job"
    return "rental" if code_in_range(code, RENTAL_INCOME) else "job"


def _expense_category(
    code: str | None,
    category: ReportCategory | None,
    has_job: bool,
) -> str:
    explicit = {
        ReportCategory.FLIP_EXPENSE: "flip",
        ReportCategory.RENTAL_EXPENSE: "rental",
        ReportCategory.JOB_EXPENSE: "job",
        ReportCategory.MARKETING: "marketing",
        ReportCategory.OVERHEAD: "overhead",
    }
    if category in explicit:
        return explicit[category]
    if code_in_range(code, FLIP_EXPENSE):
        return "flip"
    if code_in_range(code, RENTAL_EXPENSE):
        return "rental"
    if has_job:
        return "job"
    if code_in_range(code, MARKETING):
        return "marketing"
    return "overhead"


def classify_line(
    account_type: AccountType,
    code: str | None,
    purpose: Purpose | None,
    has_job: bool,
    report_category: ReportCategory | None = None,
) -> LineClassification:
    """
    Classify one transaction line for income/expense reporting.

    Balance-sheet lines get no category. A missing purpose counts
    as business. Personal expenses are always bucketed "personal".
    """
    purpose = purpose or Purpose.BUSINESS
    is_personal = purpose == Purpose.PERSONAL
    is_business = purpose in (Purpose.BUSINESS, Purpose.MIXED)

    if account_type == AccountType.INCOME:
        return LineClassification(
            income_category=_income_category(code, report_category),
            expense_category=None,
            is_business=is_business,
            is_personal=is_personal,
        )

    if account_type == AccountType.EXPENSE:
        if is_personal:
            expense = "personal"
        else:
            expense = _expense_category(code, report_category, has_job)
        return LineClassification(
            income_category=None,
            expense_category=expense,
            is_business=is_business,
            is_personal=is_personal,
        )

    return LineClassification(None, None, is_business, is_personal)
