"""
Incremental bank transaction sync against Plaid.

The sync pages through /transactions/sync from the stored cursor while
the aggregator reports has_more, then stages the added rows and stores
the new cursor. The cursor only moves after every page succeeded, so
a failed sync is simply repeated from the same place.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal

import requests
from sqlalchemy import select
from sqlalchemy.orm import Session

from contractor_books.config import Settings, get_settings
from contractor_books.errors import BankSyncError, NotFoundError, ValidationError
from contractor_books.models.bank_sync import BankLink, ImportedBankTransaction
from contractor_books.models.enums import ExpenseKind
from contractor_books.models.transaction import Transaction
from contractor_books.schemas.bank_sync import BankLinkCreate, PostImportedRequest
from contractor_books.services.entry_builder import build_expense_lines, build_income_lines
from contractor_books.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    bank_link_id: int
    pages: int
    added: int
    staged: int
    duplicates: int
    cursor: str | None


class BankSyncService:

    def __init__(
        self,
        db: Session,
        http=None,
        settings: Settings | None = None,
    ):
        self.db = db
        # Anything with a requests-style post()
        self.http = http or requests
        self.settings = settings or get_settings()

    # --- Links ---

    def create_link(self, request: BankLinkCreate) -> BankLink:
        link = BankLink(
            access_token=request.access_token,
            institution_name=request.institution_name,
        )
        self.db.add(link)
        self.db.flush()
        return link

    def get_link(self, link_id: int) -> BankLink:
        link = self.db.get(BankLink, link_id)
        if not link:
            raise NotFoundError(f"Bank link {link_id} not found")
        return link

    def list_links(self) -> list[BankLink]:
        return list(self.db.execute(select(BankLink).order_by(BankLink.id)).scalars().all())

    # --- Sync ---

    def _fetch_page(self, access_token: str, cursor: str | None) -> dict:
        payload = {
            "client_id": self.settings.PLAID_CLIENT_ID,
            "secret": self.settings.PLAID_SECRET,
            "access_token": access_token,
            "cursor": cursor,
            "count": self.settings.PLAID_PAGE_SIZE,
        }
        try:
            response = self.http.post(
                f"{self.settings.plaid_base_url}/transactions/sync",
                json=payload,
                timeout=self.settings.PLAID_TIMEOUT_SECONDS,
            )
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise BankSyncError(f"Bank sync request failed: {exc}") from exc

        if data.get("error_code"):
            raise BankSyncError(
                data.get("error_message") or f"Bank sync failed: {data['error_code']}"
            )
        return data

    def fetch_all(self, link: BankLink) -> tuple[list[dict], str | None, int]:
        """Fetch every page from the link's cursor. Returns (added, next_cursor, pages)."""
        added: list[dict] = []
        cursor = link.cursor
        pages = 0
        has_more = True
        while has_more:
            data = self._fetch_page(link.access_token, cursor)
            pages += 1
            added.extend(data.get("added") or [])
            has_more = bool(data.get("has_more"))
            cursor = data.get("next_cursor")
        return added, cursor, pages

    def sync_link(self, link_id: int) -> SyncResult:
        """Sync one link and stage new rows, deduplicated by aggregator id."""
        link = self.get_link(link_id)
        try:
            added, next_cursor, pages = self.fetch_all(link)
        except BankSyncError:
            logger.error("Bank sync for link %s failed; cursor left at %r", link.id, link.cursor)
            raise

        external_ids = [tx["transaction_id"] for tx in added]
        existing = set(
            self.db.execute(
                select(ImportedBankTransaction.external_id)
                .where(ImportedBankTransaction.external_id.in_(external_ids))
            ).scalars().all()
        ) if external_ids else set()

        staged = 0
        for tx in added:
            if tx["transaction_id"] in existing:
                continue
            existing.add(tx["transaction_id"])
            self.db.add(ImportedBankTransaction(
                bank_link_id=link.id,
                external_id=tx["transaction_id"],
                external_account_id=tx.get("account_id"),
                date=dt.date.fromisoformat(tx["date"]),
                amount=Decimal(str(tx["amount"])),
                name=tx.get("name") or "",
                merchant_name=tx.get("merchant_name"),
                category=" > ".join(tx.get("category") or []) or None,
                pending=bool(tx.get("pending")),
            ))
            staged += 1

        link.cursor = next_cursor
        link.updated_at = dt.datetime.utcnow()
        self.db.flush()

        logger.info(
            "Bank sync for link %s: %d pages, %d added, %d staged",
            link.id, pages, len(added), staged,
        )
        return SyncResult(
            bank_link_id=link.id,
            pages=pages,
            added=len(added),
            staged=staged,
            duplicates=len(added) - staged,
            cursor=next_cursor,
        )

    # --- Staged rows ---

    def list_imported(self, unposted_only: bool = True) -> list[ImportedBankTransaction]:
        stmt = select(ImportedBankTransaction).order_by(
            ImportedBankTransaction.date.desc(), ImportedBankTransaction.id.desc()
        )
        if unposted_only:
            stmt = stmt.where(ImportedBankTransaction.transaction_id.is_(None))
        return list(self.db.execute(stmt).scalars().all())

    def post_imported_transaction(
        self, imported_id: int, request: PostImportedRequest
    ) -> Transaction:
        """
        Post a staged row as an income or expense transaction.

        Positive amounts are money out (expense), negative are money
        in (income). Pending rows post uncleared.
        """
        row = self.db.get(ImportedBankTransaction, imported_id)
        if not row:
            raise NotFoundError(f"Imported transaction {imported_id} not found")
        if row.transaction_id is not None:
            raise ValidationError(
                f"Imported transaction {imported_id} was already posted "
                f"as transaction {row.transaction_id}"
            )
        if row.amount == 0:
            raise ValidationError("Cannot post a zero-amount bank transaction.")

        common = dict(
            job_id=request.job_id,
            vendor_id=request.vendor_id,
            purpose=request.purpose,
            is_cleared=not row.pending,
        )
        if row.amount > 0:
            lines = build_expense_lines(
                request.cash_account_id, request.category_account_id, row.amount,
                expense_kind=ExpenseKind.MATERIAL if request.job_id and request.vendor_id else ExpenseKind.OTHER,
                **common,
            )
        else:
            lines = build_income_lines(
                request.cash_account_id, request.category_account_id, -row.amount, **common
            )

        description = request.description or row.merchant_name or row.name
        txn = LedgerService(self.db).create_transaction_multi(
            row.date, description, lines, request.purpose
        )
        row.transaction_id = txn.id
        self.db.flush()
        logger.info("Posted imported row %s as transaction %s", row.id, txn.id)
        return txn
