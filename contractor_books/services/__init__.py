"""Business logic services."""

from contractor_books.services.ledger_service import LedgerService
from contractor_books.services.period_service import PeriodService
from contractor_books.services.account_service import AccountService
from contractor_books.services.transaction_service import TransactionService
from contractor_books.services.report_service import ReportService
from contractor_books.services.cc_settlement import CcSettlementService
from contractor_books.services.reference_service import ReferenceService
from contractor_books.services.bank_sync_service import BankSyncService

__all__ = [
    "LedgerService",
    "PeriodService",
    "AccountService",
    "TransactionService",
    "ReportService",
    "CcSettlementService",
    "ReferenceService",
    "BankSyncService",
]
