"""
Reference data endpoints: jobs, vendors, installers, lead sources,
real estate deals and rehab categories.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from contractor_books.api.errors import http_error
from contractor_books.models.base import get_db
from contractor_books.models.enums import JobStatus
from contractor_books.schemas.reference import (
    DealCreate,
    DealResponse,
    DealUpdate,
    InstallerCreate,
    InstallerResponse,
    JobCreate,
    JobResponse,
    JobStatusUpdate,
    LeadSourceCreate,
    LeadSourceResponse,
    RehabCategoryCreate,
    RehabCategoryResponse,
    VendorCreate,
    VendorResponse,
)
from contractor_books.services.reference_service import ReferenceService

router = APIRouter(tags=["Reference"])


# --- Jobs ---

@router.post("/jobs", response_model=JobResponse, status_code=201)
def create_job(
    request: JobCreate,
    db: Session = Depends(get_db),
):
    service = ReferenceService(db)
    try:
        job = service.create_job(request)
        db.commit()
        return job
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/jobs", response_model=list[JobResponse])
def list_jobs(
    status: JobStatus | None = None,
    db: Session = Depends(get_db),
):
    return ReferenceService(db).list_jobs(status)


@router.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
):
    try:
        return ReferenceService(db).get_job(job_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/jobs/{job_id}/status", response_model=JobResponse)
def update_job_status(
    job_id: int,
    request: JobStatusUpdate,
    db: Session = Depends(get_db),
):
    service = ReferenceService(db)
    try:
        job = service.update_job_status(job_id, request)
        db.commit()
        return job
    except ValueError as e:
        db.rollback()
        raise http_error(e)


# --- Vendors / installers / lead sources ---

@router.post("/vendors", response_model=VendorResponse, status_code=201)
def create_vendor(
    request: VendorCreate,
    db: Session = Depends(get_db),
):
    vendor = ReferenceService(db).create_vendor(request)
    db.commit()
    return vendor


@router.get("/vendors", response_model=list[VendorResponse])
def list_vendors(active_only: bool = True, db: Session = Depends(get_db)):
    return ReferenceService(db).list_vendors(active_only)


@router.post("/installers", response_model=InstallerResponse, status_code=201)
def create_installer(
    request: InstallerCreate,
    db: Session = Depends(get_db),
):
    installer = ReferenceService(db).create_installer(request)
    db.commit()
    return installer


@router.get("/installers", response_model=list[InstallerResponse])
def list_installers(active_only: bool = True, db: Session = Depends(get_db)):
    return ReferenceService(db).list_installers(active_only)


@router.post("/lead-sources", response_model=LeadSourceResponse, status_code=201)
def create_lead_source(
    request: LeadSourceCreate,
    db: Session = Depends(get_db),
):
    lead_source = ReferenceService(db).create_lead_source(request)
    db.commit()
    return lead_source


@router.get("/lead-sources", response_model=list[LeadSourceResponse])
def list_lead_sources(active_only: bool = True, db: Session = Depends(get_db)):
    return ReferenceService(db).list_lead_sources(active_only)


# --- Real estate deals ---

@router.post("/deals", response_model=DealResponse, status_code=201)
def create_deal(
    request: DealCreate,
    db: Session = Depends(get_db),
):
    service = ReferenceService(db)
    try:
        deal = service.create_deal(request)
        db.commit()
        return deal
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/deals", response_model=list[DealResponse])
def list_deals(db: Session = Depends(get_db)):
    return ReferenceService(db).list_deals()


@router.get("/deals/{deal_id}", response_model=DealResponse)
def get_deal(
    deal_id: int,
    db: Session = Depends(get_db),
):
    try:
        return ReferenceService(db).get_deal(deal_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/deals/{deal_id}", response_model=DealResponse)
def update_deal(
    deal_id: int,
    request: DealUpdate,
    db: Session = Depends(get_db),
):
    service = ReferenceService(db)
    try:
        deal = service.update_deal(deal_id, request)
        db.commit()
        return deal
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/rehab-categories", response_model=RehabCategoryResponse, status_code=201)
def create_rehab_category(
    request: RehabCategoryCreate,
    db: Session = Depends(get_db),
):
    service = ReferenceService(db)
    try:
        category = service.create_rehab_category(request)
        db.commit()
        return category
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/rehab-categories", response_model=list[RehabCategoryResponse])
def list_rehab_categories(db: Session = Depends(get_db)):
    return ReferenceService(db).list_rehab_categories()
