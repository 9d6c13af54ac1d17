"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from contractor_books.models.base import Base
from contractor_books.models.enums import (
    AccountType,
    Purpose,
    ReportCategory,
    CostType,
    JobStatus,
    DealType,
    DealStatus,
    EntryKind,
    ExpenseKind,
    FlipEventType,
)
from contractor_books.models.audit_log import AuditLog
from contractor_books.models.account import Account
from contractor_books.models.job import Job, LeadSource, Vendor, Installer
from contractor_books.models.real_estate import RealEstateDeal, RehabCategory
from contractor_books.models.transaction import Transaction, TransactionLine
from contractor_books.models.period import ClosedPeriod
from contractor_books.models.bank_sync import BankLink, ImportedBankTransaction

__all__ = [
    "Base",
    "AccountType",
    "Purpose",
    "ReportCategory",
    "CostType",
    "JobStatus",
    "DealType",
    "DealStatus",
    "EntryKind",
    "ExpenseKind",
    "FlipEventType",
    "AuditLog",
    "Account",
    "Job",
    "LeadSource",
    "Vendor",
    "Installer",
    "RealEstateDeal",
    "RehabCategory",
    "Transaction",
    "TransactionLine",
    "ClosedPeriod",
    "BankLink",
    "ImportedBankTransaction",
]
