"""
Pydantic schemas for the chart of accounts.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from contractor_books.models.enums import AccountType, Purpose, ReportCategory


class AccountCreate(BaseModel):
    """Request to add an account to the chart of accounts."""
    name: str = Field(min_length=1, max_length=100)
    code: str | None = Field(default=None, max_length=20)
    account_type: AccountType
    default_purpose: Purpose | None = None
    report_category: ReportCategory | None = None

    @field_validator("code")
    @classmethod
    def code_must_be_numeric(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        if not v.isdigit():
            raise ValueError("account code must be numeric, e.g. '1010'")
        return v


class AccountUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    default_purpose: Purpose | None = None
    report_category: ReportCategory | None = None


class AccountStatusUpdate(BaseModel):
    """Activate or deactivate an account. Accounts are never deleted."""
    is_active: bool
    reason: str = Field(min_length=1, max_length=255)


class AccountResponse(BaseModel):
    id: int
    name: str
    code: str | None
    account_type: AccountType
    default_purpose: Purpose | None
    report_category: ReportCategory | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
