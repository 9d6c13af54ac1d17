"""
Pydantic schemas for the bank aggregator sync.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from contractor_books.models.enums import Purpose


class BankLinkCreate(BaseModel):
    access_token: str = Field(min_length=1, max_length=255)
    institution_name: str | None = Field(default=None, max_length=100)


class BankLinkResponse(BaseModel):
    id: int
    institution_name: str | None
    cursor: str | None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class SyncResultResponse(BaseModel):
    bank_link_id: int
    pages: int
    added: int
    staged: int
    duplicates: int
    cursor: str | None

    model_config = {"from_attributes": True}


class ImportedTransactionResponse(BaseModel):
    id: int
    bank_link_id: int
    external_id: str
    external_account_id: str | None
    date: dt.date
    amount: Decimal
    name: str
    merchant_name: str | None
    category: str | None
    pending: bool
    transaction_id: int | None

    model_config = {"from_attributes": True}


class PostImportedRequest(BaseModel):
    """
    Post a staged row to the ledger.

    A positive aggregator amount is money out and becomes an expense;
    a negative one becomes income.
    """
    cash_account_id: int
    category_account_id: int
    description: str | None = Field(default=None, max_length=255)
    purpose: Purpose | None = None
    job_id: int | None = None
    vendor_id: int | None = None
