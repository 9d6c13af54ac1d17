"""
Pydantic schemas for credit-card settlement tracking.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class CcBalanceResponse(BaseModel):
    account_id: int
    account_name: str
    unsettled_amount: Decimal
    line_ids: list[int]

    model_config = {"from_attributes": True}


class CcSettleRequest(BaseModel):
    """
    Mark card lines settled.

    With pay_from_account_id set, a bank-to-card transfer for the
    summed amount is created in the same transaction.
    """
    line_ids: list[int] = Field(min_length=1)
    pay_from_account_id: int | None = None
    date: dt.date | None = None
    description: str | None = Field(default=None, max_length=255)


class CcSettleResponse(BaseModel):
    account_id: int
    account_name: str
    amount: Decimal
    line_ids: list[int]
    description: str
    transfer_transaction_id: int | None = None

    model_config = {"from_attributes": True}
