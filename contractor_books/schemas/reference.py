"""
Pydantic schemas for reference data: jobs, vendors, installers,
lead sources, real estate deals and rehab categories.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from contractor_books.models.enums import DealStatus, DealType, JobStatus


# --- Lead sources / vendors / installers ---

class LeadSourceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    nick_name: str | None = Field(default=None, max_length=50)


class LeadSourceResponse(BaseModel):
    id: int
    name: str
    nick_name: str | None
    is_active: bool

    model_config = {"from_attributes": True}


class VendorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class VendorResponse(BaseModel):
    id: int
    name: str
    is_active: bool

    model_config = {"from_attributes": True}


class InstallerCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class InstallerResponse(BaseModel):
    id: int
    first_name: str
    last_name: str | None
    full_name: str
    is_active: bool

    model_config = {"from_attributes": True}


# --- Jobs ---

class JobCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    address: str | None = Field(default=None, max_length=255)
    start_date: date | None = None
    lead_source_id: int | None = None


class JobStatusUpdate(BaseModel):
    status: JobStatus
    end_date: date | None = None


class JobResponse(BaseModel):
    id: int
    name: str
    address: str | None
    status: JobStatus
    start_date: date | None
    end_date: date | None
    lead_source_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Real estate ---

class DealCreate(BaseModel):
    nickname: str = Field(min_length=1, max_length=100)
    address: str | None = Field(default=None, max_length=255)
    deal_type: DealType
    asset_account_id: int | None = None
    loan_account_id: int | None = None
    purchase_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    arv: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    original_loan_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    interest_rate: Decimal | None = Field(default=None, ge=0, le=100)
    loan_term_months: int | None = Field(default=None, gt=0)
    monthly_taxes: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    monthly_insurance: Decimal | None = Field(default=None, ge=0, decimal_places=2)

    @model_validator(mode="after")
    def accounts_must_differ(self):
        if self.asset_account_id and self.asset_account_id == self.loan_account_id:
            raise ValueError("asset and loan accounts must be different")
        return self


class DealUpdate(BaseModel):
    nickname: str | None = Field(default=None, min_length=1, max_length=100)
    address: str | None = Field(default=None, max_length=255)
    status: DealStatus | None = None
    asset_account_id: int | None = None
    loan_account_id: int | None = None
    arv: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    original_loan_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    interest_rate: Decimal | None = Field(default=None, ge=0, le=100)
    loan_term_months: int | None = Field(default=None, gt=0)
    monthly_taxes: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    monthly_insurance: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class DealResponse(BaseModel):
    id: int
    nickname: str
    address: str | None
    deal_type: DealType
    status: DealStatus
    asset_account_id: int | None
    loan_account_id: int | None
    purchase_price: Decimal | None
    arv: Decimal | None
    original_loan_amount: Decimal | None
    interest_rate: Decimal | None
    loan_term_months: int | None
    monthly_taxes: Decimal | None
    monthly_insurance: Decimal | None
    created_at: datetime

    model_config = {"from_attributes": True}


class RehabCategoryCreate(BaseModel):
    code: str = Field(min_length=1, max_length=10)
    name: str = Field(min_length=1, max_length=100)
    category_group: str | None = Field(default=None, max_length=50)


class RehabCategoryResponse(BaseModel):
    id: int
    code: str
    name: str
    category_group: str | None

    model_config = {"from_attributes": True}
