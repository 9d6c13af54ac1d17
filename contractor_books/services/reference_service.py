"""
Reference data service: jobs, vendors, installers, lead sources,
real estate deals and rehab categories.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractor_books.errors import NotFoundError, ValidationError, deal_not_found
from contractor_books.models.account import Account
from contractor_books.models.enums import AccountType, JobStatus
from contractor_books.models.job import Installer, Job, LeadSource, Vendor
from contractor_books.models.real_estate import RealEstateDeal, RehabCategory
from contractor_books.schemas.reference import (
    DealCreate,
    DealUpdate,
    InstallerCreate,
    JobCreate,
    JobStatusUpdate,
    LeadSourceCreate,
    RehabCategoryCreate,
    VendorCreate,
)


class ReferenceService:

    def __init__(self, db: Session):
        self.db = db

    def _get(self, model, row_id: int, label: str):
        row = self.db.get(model, row_id)
        if not row:
            raise NotFoundError(f"{label} {row_id} not found")
        return row

    def _list(self, model, order_by, active_only: bool = False):
        stmt = select(model).order_by(order_by)
        if active_only:
            stmt = stmt.where(model.is_active.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def _add(self, row):
        self.db.add(row)
        self.db.flush()
        return row

    # --- Lead sources / vendors / installers ---

    def create_lead_source(self, request: LeadSourceCreate) -> LeadSource:
        return self._add(LeadSource(name=request.name, nick_name=request.nick_name))

    def list_lead_sources(self, active_only: bool = True) -> list[LeadSource]:
        return self._list(LeadSource, LeadSource.name, active_only)

    def create_vendor(self, request: VendorCreate) -> Vendor:
        return self._add(Vendor(name=request.name))

    def list_vendors(self, active_only: bool = True) -> list[Vendor]:
        return self._list(Vendor, Vendor.name, active_only)

    def create_installer(self, request: InstallerCreate) -> Installer:
        return self._add(Installer(first_name=request.first_name, last_name=request.last_name))

    def list_installers(self, active_only: bool = True) -> list[Installer]:
        return self._list(Installer, Installer.first_name, active_only)

    # --- Jobs ---

    def create_job(self, request: JobCreate) -> Job:
        if request.lead_source_id is not None:
            self._get(LeadSource, request.lead_source_id, "Lead source")
        return self._add(Job(
            name=request.name,
            address=request.address,
            start_date=request.start_date,
            lead_source_id=request.lead_source_id,
        ))

    def get_job(self, job_id: int) -> Job:
        return self._get(Job, job_id, "Job")

    def list_jobs(self, status: JobStatus | None = None) -> list[Job]:
        stmt = select(Job).order_by(Job.name)
        if status:
            stmt = stmt.where(Job.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def update_job_status(self, job_id: int, request: JobStatusUpdate) -> Job:
        job = self.get_job(job_id)
        job.status = request.status
        if request.status == JobStatus.CLOSED:
            job.end_date = request.end_date or job.end_date
        else:
            job.end_date = None
        self.db.flush()
        return job

    # --- Real estate deals ---

    def _check_deal_accounts(self, asset_account_id: int | None, loan_account_id: int | None) -> None:
        if asset_account_id is not None:
            asset = self._get(Account, asset_account_id, "Account")
            if asset.account_type != AccountType.ASSET:
                raise ValidationError(f"Account {asset.name} is not an asset account")
        if loan_account_id is not None:
            loan = self._get(Account, loan_account_id, "Account")
            if loan.account_type != AccountType.LIABILITY:
                raise ValidationError(f"Account {loan.name} is not a liability account")

    def create_deal(self, request: DealCreate) -> RealEstateDeal:
        self._check_deal_accounts(request.asset_account_id, request.loan_account_id)
        return self._add(RealEstateDeal(**request.model_dump()))

    def get_deal(self, deal_id: int) -> RealEstateDeal:
        deal = self.db.get(RealEstateDeal, deal_id)
        if not deal:
            raise NotFoundError(deal_not_found(deal_id))
        return deal

    def list_deals(self) -> list[RealEstateDeal]:
        return list(self.db.execute(
            select(RealEstateDeal).order_by(RealEstateDeal.nickname)
        ).scalars().all())

    def update_deal(self, deal_id: int, request: DealUpdate) -> RealEstateDeal:
        deal = self.get_deal(deal_id)
        changes = request.model_dump(exclude_unset=True)
        self._check_deal_accounts(changes.get("asset_account_id"), changes.get("loan_account_id"))
        for field, value in changes.items():
            setattr(deal, field, value)
        self.db.flush()
        return deal

    # --- Rehab categories ---

    def create_rehab_category(self, request: RehabCategoryCreate) -> RehabCategory:
        existing = self.db.execute(
            select(RehabCategory).where(RehabCategory.code == request.code)
        ).scalar_one_or_none()
        if existing:
            raise ValidationError(f"Rehab category '{request.code}' already exists")
        return self._add(RehabCategory(**request.model_dump()))

    def list_rehab_categories(self) -> list[RehabCategory]:
        return list(self.db.execute(
            select(RehabCategory).order_by(RehabCategory.code)
        ).scalars().all())
