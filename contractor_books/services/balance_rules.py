"""
Aggregation rules shared by every report.

Pure functions over flat LineRow records. The report service loads the
rows with one query and hands them here, so balances, pending lists,
year-to-date buckets and job profit all follow the same rules.

Balance rule: asset lines always count toward the balance (the register
shows money already committed); every other account type counts only
once the line has cleared.
"""

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal

from contractor_books.models.enums import AccountType, Purpose, ReportCategory
from contractor_books.services.classification import classify_line

ZERO = Decimal("0.00")

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


@dataclass(frozen=True)
class LineRow:
    """One transaction line joined with its transaction and account."""
    line_id: int
    transaction_id: int
    date: dt.date
    description: str | None
    account_id: int
    account_name: str
    account_code: str | None
    account_type: AccountType
    amount: Decimal
    is_cleared: bool
    purpose: Purpose | None = None
    report_category: ReportCategory | None = None
    cleared_date: dt.date | None = None
    job_id: int | None = None
    vendor_id: int | None = None
    installer_id: int | None = None
    real_estate_deal_id: int | None = None
    cc_settled: bool = False


@dataclass
class AccountBalance:
    account_id: int
    name: str
    code: str | None
    account_type: AccountType
    balance: Decimal = ZERO


@dataclass
class PendingSummary:
    bank: list[LineRow] = field(default_factory=list)
    card: list[LineRow] = field(default_factory=list)

    @property
    def bank_total(self) -> Decimal:
        return sum((r.amount for r in self.bank), ZERO)

    @property
    def card_total(self) -> Decimal:
        return sum((r.amount for r in self.card), ZERO)


@dataclass
class ProfitBucket:
    label: str
    job_income: Decimal = ZERO
    job_expenses: Decimal = ZERO
    rental_income: Decimal = ZERO
    rental_expenses: Decimal = ZERO
    flip_expenses: Decimal = ZERO
    marketing: Decimal = ZERO
    overhead: Decimal = ZERO
    personal: Decimal = ZERO

    @property
    def job_profit(self) -> Decimal:
        return self.job_income - self.job_expenses

    @property
    def rental_profit(self) -> Decimal:
        return self.rental_income - self.rental_expenses

    @property
    def taxable_net(self) -> Decimal:
        # Flip spend is inventory until the sale, so it stays out
        return self.job_profit + self.rental_profit - self.marketing - self.overhead

    @property
    def economic_net(self) -> Decimal:
        return self.taxable_net - self.flip_expenses

    @property
    def true_net(self) -> Decimal:
        return self.economic_net - self.personal

    def add(self, other: "ProfitBucket") -> None:
        for name in ("job_income", "job_expenses", "rental_income", "rental_expenses",
                     "flip_expenses", "marketing", "overhead", "personal"):
            setattr(self, name, getattr(self, name) + getattr(other, name))


@dataclass
class YearSummary:
    year: int
    cleared_only: bool
    total: ProfitBucket
    months: list[ProfitBucket]

    @property
    def quarters(self) -> list[ProfitBucket]:
        quarters = [ProfitBucket(label=f"Q{i + 1}") for i in range(4)]
        for index, month in enumerate(self.months):
            quarters[index // 3].add(month)
        return quarters


@dataclass
class JobProfit:
    job_id: int | None
    job_name: str | None = None
    income: Decimal = ZERO
    labor: Decimal = ZERO
    materials: Decimal = ZERO
    other_expenses: Decimal = ZERO

    @property
    def total_expenses(self) -> Decimal:
        return self.labor + self.materials + self.other_expenses

    @property
    def profit(self) -> Decimal:
        return self.income - self.total_expenses


def counts_toward_balance(account_type: AccountType, is_cleared: bool) -> bool:
    return account_type == AccountType.ASSET or is_cleared


def account_balances(accounts, lines: list[LineRow]) -> list[AccountBalance]:
    """
    Per-account balance from counted lines.

    Every account passed in gets a row, zero if it has no counted
    lines. Accounts need id, name, code and account_type.
    """
    balances = {
        a.id: AccountBalance(
            account_id=a.id, name=a.name, code=a.code, account_type=a.account_type,
        )
        for a in accounts
    }
    for row in lines:
        balance = balances.get(row.account_id)
        if balance is None:
            continue
        if counts_toward_balance(row.account_type, row.is_cleared):
            balance.balance += row.amount
    return list(balances.values())


def pending_lines(lines: list[LineRow]) -> PendingSummary:
    """Uncleared cash-side lines: assets are pending bank, liabilities pending card."""
    summary = PendingSummary()
    for row in sorted(lines, key=lambda r: (r.date, r.line_id)):
        if row.is_cleared:
            continue
        if row.account_type == AccountType.ASSET:
            summary.bank.append(row)
        elif row.account_type == AccountType.LIABILITY:
            summary.card.append(row)
    return summary


def _bucket_line(bucket: ProfitBucket, row: LineRow) -> None:
    classification = classify_line(
        row.account_type,
        row.account_code,
        row.purpose,
        has_job=row.job_id is not None,
        report_category=row.report_category,
    )

    # Income lines are credits, so take the magnitude
    if classification.income_category and classification.is_business:
        if classification.income_category == "rental":
            bucket.rental_income += abs(row.amount)
        else:
            bucket.job_income += abs(row.amount)

    # Expenses keep their sign so refunds offset
    category = classification.expense_category
    if category == "personal":
        bucket.personal += row.amount
    elif category == "flip":
        bucket.flip_expenses += row.amount
    elif category == "rental":
        bucket.rental_expenses += row.amount
    elif category == "job":
        bucket.job_expenses += row.amount
    elif category == "marketing":
        bucket.marketing += row.amount
    elif category == "overhead":
        bucket.overhead += row.amount


def summarize_year(lines: list[LineRow], year: int, cleared_only: bool = True) -> YearSummary:
    """Bucket a year's income and expense lines, in total and per month."""
    months = [ProfitBucket(label=label) for label in MONTH_LABELS]
    for row in lines:
        if row.date.year != year:
            continue
        if cleared_only and not row.is_cleared:
            continue
        _bucket_line(months[row.date.month - 1], row)

    total = ProfitBucket(label=str(year))
    for month in months:
        total.add(month)
    return YearSummary(year=year, cleared_only=cleared_only, total=total, months=months)


def job_profit(lines: list[LineRow], job_id: int | None = None) -> JobProfit:
    """
    Profit for one job from its lines.

    Income is the negated income-line amount. Expense lines with an
    installer are labor, with a vendor are materials, anything else
    is other.
    """
    result = JobProfit(job_id=job_id)
    for row in lines:
        if job_id is not None and row.job_id != job_id:
            continue
        if row.account_type == AccountType.INCOME:
            result.income += -row.amount
        elif row.account_type == AccountType.EXPENSE:
            if row.installer_id:
                result.labor += row.amount
            elif row.vendor_id:
                result.materials += row.amount
            else:
                result.other_expenses += row.amount
    return result
