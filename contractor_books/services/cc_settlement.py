"""
Credit-card settlement tracking.

A card charge is "settled" once it has been reimbursed or paid off.
Settlement is tracked per line with cc_settled, independently of
is_cleared, and stays editable in closed periods.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractor_books.errors import NotFoundError, SettlementError
from contractor_books.models.enums import AccountType, Purpose
from contractor_books.models.transaction import TransactionLine
from contractor_books.schemas.transaction import BankToCardTransferRequest
from contractor_books.services.balance_rules import LineRow
from contractor_books.services.report_service import ReportService
from contractor_books.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)


@dataclass
class CcBalance:
    account_id: int
    account_name: str
    unsettled_amount: Decimal = Decimal("0.00")
    line_ids: list[int] = field(default_factory=list)


@dataclass
class CcSettlement:
    account_id: int
    account_name: str
    amount: Decimal
    line_ids: list[int]
    description: str
    transfer_transaction_id: int | None = None


def is_unsettled_cc(row: LineRow) -> bool:
    return row.account_type == AccountType.LIABILITY and not row.cc_settled


def compute_cc_balances(lines: list[LineRow]) -> list[CcBalance]:
    """Unsettled liability lines grouped per card, largest balance first."""
    balances: dict[int, CcBalance] = {}
    for row in lines:
        if not is_unsettled_cc(row):
            continue
        balance = balances.setdefault(
            row.account_id, CcBalance(account_id=row.account_id, account_name=row.account_name)
        )
        balance.unsettled_amount += abs(row.amount)
        balance.line_ids.append(row.line_id)

    result = [b for b in balances.values() if b.unsettled_amount > 0]
    result.sort(key=lambda b: b.unsettled_amount, reverse=True)
    return result


def validate_settlement_selection(lines: list[LineRow]) -> CcBalance:
    """
    Check a selection can be settled in one go.

    Every line must be an unsettled card line and all must be on the
    same card. Returns the selection's balance.
    """
    if not lines:
        raise SettlementError("Select at least one credit card line to settle.")

    not_card = [r.line_id for r in lines if r.account_type != AccountType.LIABILITY]
    if not_card:
        raise SettlementError(f"Lines {not_card} are not credit card lines.")

    already = [r.line_id for r in lines if r.cc_settled]
    if already:
        raise SettlementError(f"Lines {already} are already settled.")

    names = {}
    for row in lines:
        names.setdefault(row.account_id, row.account_name)
    if len(names) > 1:
        raise SettlementError(
            "Selected lines span multiple credit card accounts: "
            + ", ".join(sorted(names.values()))
            + ". Settle one card at a time."
        )

    balances = compute_cc_balances(lines)
    if balances:
        return balances[0]
    account_id, account_name = next(iter(names.items()))
    return CcBalance(account_id=account_id, account_name=account_name)


class CcSettlementService:

    def __init__(self, db: Session):
        self.db = db
        self.reports = ReportService(db)

    def cc_balances(self, job_id: int | None = None) -> list[CcBalance]:
        return compute_cc_balances(self.reports.load_rows(job_id=job_id))

    def settle_lines(
        self,
        line_ids: list[int],
        pay_from_account_id: int | None = None,
        date: dt.date | None = None,
        description: str | None = None,
    ) -> CcSettlement:
        """
        Mark the selected card lines settled.

        The whole selection is validated before any line is touched.
        """
        requested = set(line_ids)
        rows = [r for r in self.reports.load_rows() if r.line_id in requested]
        missing = sorted(requested - {r.line_id for r in rows})
        if missing:
            raise NotFoundError(f"Transaction lines not found: {missing}")

        selection = validate_settlement_selection(rows)
        description = description or f"CC settle: {selection.account_name}"

        settlement = CcSettlement(
            account_id=selection.account_id,
            account_name=selection.account_name,
            amount=selection.unsettled_amount,
            line_ids=sorted(requested),
            description=description,
        )

        if pay_from_account_id is not None:
            transfer = TransactionService(self.db).create_bank_to_card_transfer(
                BankToCardTransferRequest(
                    date=date or dt.date.today(),
                    description=description,
                    bank_account_id=pay_from_account_id,
                    card_account_id=selection.account_id,
                    amount=selection.unsettled_amount,
                    purpose=Purpose.BUSINESS,
                )
            )
            settlement.transfer_transaction_id = transfer.id
            # The payment line is the settlement itself
            for line in transfer.lines:
                if line.account_id == selection.account_id:
                    line.cc_settled = True

        lines = self.db.execute(
            select(TransactionLine).where(TransactionLine.id.in_(requested))
        ).scalars().all()
        for line in lines:
            line.cc_settled = True
        self.db.flush()

        logger.info(
            "Settled %d lines on %s for %s",
            len(lines), selection.account_name, selection.unsettled_amount,
        )
        return settlement
