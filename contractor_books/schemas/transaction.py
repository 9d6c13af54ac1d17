"""
Pydantic schemas for transaction construction.

TransactionLineCreate is the draft of one line; the builders produce
lists of them and LedgerService persists them.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from contractor_books.models.enums import (
    CostType,
    EntryKind,
    ExpenseKind,
    FlipEventType,
    Purpose,
)


# --- Request Schemas ---

class TransactionLineCreate(BaseModel):
    """One signed line of a transaction."""
    account_id: int
    amount: Decimal = Field(decimal_places=2)
    is_cleared: bool = False
    purpose: Purpose | None = None
    job_id: int | None = None
    vendor_id: int | None = None
    installer_id: int | None = None
    real_estate_deal_id: int | None = None
    rehab_category_id: int | None = None
    cost_type: CostType | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_nonzero(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("line amount must be non-zero")
        return v


class CreateTransactionRequest(BaseModel):
    """Two-line transaction, the common income/expense/transfer shape."""
    date: dt.date
    description: str | None = Field(default=None, max_length=255)
    line1: TransactionLineCreate
    line2: TransactionLineCreate
    purpose: Purpose | None = None


class CreateTransactionMultiRequest(BaseModel):
    """Any balanced set of two or more lines."""
    date: dt.date
    description: str | None = Field(default=None, max_length=255)
    lines: list[TransactionLineCreate] = Field(min_length=2)
    purpose: Purpose | None = None


class EntryRequest(BaseModel):
    """
    User-entered income, expense or transfer.

    For transfers, cash_account_id is the from-account and
    to_account_id the destination; there is no category.
    """
    kind: EntryKind
    date: dt.date
    description: str | None = Field(default=None, max_length=255)
    amount: Decimal = Field(gt=0, decimal_places=2)
    cash_account_id: int
    category_account_id: int | None = None
    to_account_id: int | None = None
    job_id: int | None = None
    vendor_id: int | None = None
    installer_id: int | None = None
    real_estate_deal_id: int | None = None
    expense_kind: ExpenseKind = ExpenseKind.OTHER
    purpose: Purpose | None = None
    is_cleared: bool = False


class FlipEventRequest(BaseModel):
    """A flip-deal lifecycle event; which amounts apply depends on event_type."""
    event_type: FlipEventType
    deal_id: int
    date: dt.date
    description: str | None = Field(default=None, max_length=255)
    cash_account_id: int
    amount: Decimal | None = Field(default=None, decimal_places=2)
    purchase_amount: Decimal | None = Field(default=None, decimal_places=2)
    loan_amount: Decimal | None = Field(default=None, decimal_places=2)
    closing_costs: Decimal | None = Field(default=None, decimal_places=2)
    sale_price: Decimal | None = Field(default=None, decimal_places=2)
    selling_costs: Decimal | None = Field(default=None, decimal_places=2)
    rehab_category_id: int | None = None
    vendor_id: int | None = None
    installer_id: int | None = None
    is_cleared: bool = False


class BankToCardTransferRequest(BaseModel):
    date: dt.date
    description: str = Field(min_length=1, max_length=255)
    bank_account_id: int
    card_account_id: int
    amount: Decimal = Field(gt=0, decimal_places=2)
    purpose: Purpose = Purpose.BUSINESS


class MortgagePaymentRequest(BaseModel):
    date: dt.date
    description: str | None = Field(default=None, max_length=255)
    deal_id: int
    bank_account_id: int
    total_payment: Decimal = Field(gt=0, decimal_places=2)
    purpose: Purpose = Purpose.BUSINESS


class MarkClearedRequest(BaseModel):
    """
    Mark a transaction cleared from one of its lines.

    new_amount is a magnitude; the sign of each line is preserved.
    """
    clicked_line_id: int
    new_amount: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    new_date: dt.date | None = None
    new_description: str | None = Field(default=None, max_length=255)


class EditTransactionRequest(BaseModel):
    """Edit a two-line transaction's date, description, amount or accounts."""
    date: dt.date | None = None
    description: str | None = Field(default=None, max_length=255)
    amount: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    cash_account_id: int | None = None
    category_account_id: int | None = None


# --- Response Schemas ---

class TransactionLineResponse(BaseModel):
    id: int
    transaction_id: int
    account_id: int
    amount: Decimal
    is_cleared: bool
    cleared_date: dt.date | None
    purpose: Purpose
    job_id: int | None
    vendor_id: int | None
    installer_id: int | None
    real_estate_deal_id: int | None
    rehab_category_id: int | None
    cost_type: CostType | None
    cc_settled: bool

    model_config = {"from_attributes": True}


class TransactionResponse(BaseModel):
    id: int
    date: dt.date
    description: str | None
    created_at: dt.datetime
    updated_at: dt.datetime
    lines: list[TransactionLineResponse]

    model_config = {"from_attributes": True}


class MortgageSplitResponse(BaseModel):
    principal: Decimal
    interest: Decimal
    escrow: Decimal
    escrow_inferred: bool

    model_config = {"from_attributes": True}


class MortgagePaymentResponse(BaseModel):
    transaction: TransactionResponse
    split: MortgageSplitResponse
