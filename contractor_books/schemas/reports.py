"""
Pydantic schemas for report views.

The report service returns plain dataclasses; from_attributes lets
these schemas read them, properties included.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel

from contractor_books.models.enums import AccountType, Purpose


class AccountBalanceResponse(BaseModel):
    account_id: int
    name: str
    code: str | None
    account_type: AccountType
    balance: Decimal

    model_config = {"from_attributes": True}


class PendingLineResponse(BaseModel):
    line_id: int
    transaction_id: int
    date: dt.date
    description: str | None
    account_id: int
    account_name: str
    amount: Decimal

    model_config = {"from_attributes": True}


class PendingResponse(BaseModel):
    bank: list[PendingLineResponse]
    card: list[PendingLineResponse]
    bank_total: Decimal
    card_total: Decimal

    model_config = {"from_attributes": True}


class ProfitBucketResponse(BaseModel):
    label: str
    job_income: Decimal
    job_expenses: Decimal
    job_profit: Decimal
    rental_income: Decimal
    rental_expenses: Decimal
    rental_profit: Decimal
    flip_expenses: Decimal
    marketing: Decimal
    overhead: Decimal
    taxable_net: Decimal
    economic_net: Decimal
    personal: Decimal
    true_net: Decimal

    model_config = {"from_attributes": True}


class YtdSummaryResponse(BaseModel):
    year: int
    cleared_only: bool
    total: ProfitBucketResponse
    months: list[ProfitBucketResponse]
    quarters: list[ProfitBucketResponse]

    model_config = {"from_attributes": True}


class LedgerRowResponse(BaseModel):
    """One cash-side line with the accounts on the other side."""
    line_id: int
    transaction_id: int
    date: dt.date
    description: str | None
    account_id: int
    account_name: str
    amount: Decimal
    is_cleared: bool
    cleared_date: dt.date | None
    purpose: Purpose | None
    cc_settled: bool
    category: str | None


class JobProfitResponse(BaseModel):
    job_id: int | None
    job_name: str | None = None
    income: Decimal
    labor: Decimal
    materials: Decimal
    other_expenses: Decimal
    total_expenses: Decimal
    profit: Decimal

    model_config = {"from_attributes": True}


class IntegrityResponse(BaseModel):
    is_balanced: bool
    transactions_checked: int
    unbalanced_transaction_ids: list[int]
