"""
Transaction service: income, expense, transfers, flip events and
mortgage payments.

Each operation:
1. Resolves the deal and the accounts it posts to
2. Builds balanced lines with the entry builders
3. Persists them through LedgerService in one flush

Validation errors are raised before anything is written. The caller
controls the commit.
"""

import logging
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from contractor_books.errors import NotFoundError, ValidationError, deal_not_found
from contractor_books.models.account import Account
from contractor_books.models.enums import (
    AccountType,
    CostType,
    DealStatus,
    DealType,
    EntryKind,
    FlipEventType,
)
from contractor_books.models.real_estate import RealEstateDeal
from contractor_books.models.transaction import Transaction, TransactionLine
from contractor_books.schemas.transaction import (
    BankToCardTransferRequest,
    EntryRequest,
    FlipEventRequest,
    MortgagePaymentRequest,
)
from contractor_books.services import classification
from contractor_books.services.entry_builder import (
    build_acquisition_lines,
    build_deal_expense_lines,
    build_expense_lines,
    build_income_lines,
    build_loan_draw_lines,
    build_mortgage_payment_lines,
    build_refund_lines,
    build_sale_lines,
    build_transfer_lines,
    to_money,
)
from contractor_books.services.ledger_service import LedgerService
from contractor_books.services.mortgage import MortgageSplit, compute_mortgage_split

logger = logging.getLogger(__name__)

REHAB_COST_TYPES = {
    FlipEventType.REHAB_LABOR: CostType.LABOR,
    FlipEventType.REHAB_MATERIAL: CostType.MATERIALS,
    FlipEventType.REHAB_SERVICE: CostType.SERVICES,
}

EVENT_LABELS = {
    FlipEventType.ACQUISITION: "Purchase",
    FlipEventType.REHAB_LABOR: "Rehab labor",
    FlipEventType.REHAB_MATERIAL: "Rehab materials",
    FlipEventType.REHAB_SERVICE: "Rehab services",
    FlipEventType.LOAN_DRAW: "Loan draw",
    FlipEventType.HOLDING: "Holding costs",
    FlipEventType.INTEREST: "Loan interest",
    FlipEventType.REFUND: "Refund",
    FlipEventType.SALE: "Sale",
}


class TransactionService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger_service = LedgerService(db)

    # --- Lookups ---

    def _get_deal(self, deal_id: int) -> RealEstateDeal:
        deal = self.db.get(RealEstateDeal, deal_id)
        if not deal:
            raise NotFoundError(deal_not_found(deal_id))
        return deal

    def _account_by_code(self, code: str, label: str) -> Account:
        account = self.db.execute(
            select(Account).where(Account.code == code, Account.is_active.is_(True))
        ).scalar_one_or_none()
        if not account:
            raise ValidationError(f"{label} account ({code}) not found.")
        return account

    def _account_total(self, account_id: int) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(TransactionLine.amount), 0))
            .where(TransactionLine.account_id == account_id)
        ).scalar()
        return Decimal(str(total))

    def _principal_paid(self, loan_account_id: int) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(TransactionLine.amount), 0))
            .where(
                TransactionLine.account_id == loan_account_id,
                TransactionLine.amount > 0,
            )
        ).scalar()
        return Decimal(str(total))

    # --- Income / expense / transfer ---

    def create_entry(self, request: EntryRequest) -> Transaction:
        """Record a user-entered income, expense or transfer."""
        if request.kind == EntryKind.TRANSFER:
            if not request.to_account_id:
                raise ValidationError("To account is required for transfers.")
            lines = build_transfer_lines(
                request.cash_account_id,
                request.to_account_id,
                request.amount,
                purpose=request.purpose,
                is_cleared=request.is_cleared,
            )
        else:
            if not request.category_account_id:
                raise ValidationError("Category is required.")
            links = dict(
                job_id=request.job_id,
                vendor_id=request.vendor_id,
                installer_id=request.installer_id,
                real_estate_deal_id=request.real_estate_deal_id,
                purpose=request.purpose,
                is_cleared=request.is_cleared,
            )
            if request.kind == EntryKind.INCOME:
                lines = build_income_lines(
                    request.cash_account_id, request.category_account_id, request.amount, **links
                )
            else:
                lines = build_expense_lines(
                    request.cash_account_id, request.category_account_id, request.amount,
                    expense_kind=request.expense_kind, **links
                )

        return self.ledger_service.create_transaction_multi(
            request.date, request.description, lines, request.purpose
        )

    def create_bank_to_card_transfer(self, request: BankToCardTransferRequest) -> Transaction:
        """Pay down a card from a bank account. Both lines post cleared."""
        accounts = self.ledger_service.get_active_accounts(
            {request.bank_account_id, request.card_account_id}
        )
        if accounts[request.bank_account_id].account_type != AccountType.ASSET:
            raise ValidationError("Pay-from account must be a bank account.")
        if accounts[request.card_account_id].account_type != AccountType.LIABILITY:
            raise ValidationError("Pay-to account must be a credit card account.")

        lines = build_transfer_lines(
            request.bank_account_id,
            request.card_account_id,
            request.amount,
            purpose=request.purpose,
            is_cleared=True,
        )
        return self.ledger_service.create_transaction_multi(
            request.date, request.description, lines, request.purpose
        )

    # --- Flip deals ---

    def record_flip_event(self, request: FlipEventRequest) -> Transaction:
        """
        Record one flip lifecycle event as a single balanced transaction.

        A sale also closes out the deal's asset and loan balances and
        marks the deal sold.
        """
        deal = self._get_deal(request.deal_id)
        if deal.deal_type != DealType.FLIP:
            raise ValidationError(f"Deal {deal.nickname} is not a flip.")

        event = request.event_type
        if event == FlipEventType.ACQUISITION:
            closing = None
            if request.closing_costs:
                closing = self._account_by_code(classification.FLIP_CLOSING_COSTS, "Closing costs")
            lines = build_acquisition_lines(
                deal.id,
                asset_account_id=deal.asset_account_id,
                cash_account_id=request.cash_account_id,
                purchase=request.purchase_amount,
                loan=request.loan_amount,
                closing=request.closing_costs,
                loan_account_id=deal.loan_account_id,
                closing_account_id=closing.id if closing else None,
                is_cleared=request.is_cleared,
            )

        elif event in REHAB_COST_TYPES:
            if not request.rehab_category_id:
                raise ValidationError("Rehab category is required for flip expenses.")
            cost_type = REHAB_COST_TYPES[event]
            expense = self._account_by_code(
                classification.COST_TYPE_ACCOUNT_CODES[cost_type.value], EVENT_LABELS[event]
            )
            lines = build_deal_expense_lines(
                deal.id,
                expense_account_id=expense.id,
                cash_account_id=request.cash_account_id,
                amount=request.amount,
                cost_type=cost_type,
                rehab_category_id=request.rehab_category_id,
                vendor_id=request.vendor_id,
                installer_id=request.installer_id,
                is_cleared=request.is_cleared,
            )

        elif event in (FlipEventType.HOLDING, FlipEventType.INTEREST):
            cost_type = CostType.HOLDING if event == FlipEventType.HOLDING else CostType.INTEREST
            expense = self._account_by_code(
                classification.COST_TYPE_ACCOUNT_CODES[cost_type.value], EVENT_LABELS[event]
            )
            lines = build_deal_expense_lines(
                deal.id,
                expense_account_id=expense.id,
                cash_account_id=request.cash_account_id,
                amount=request.amount,
                cost_type=cost_type,
                vendor_id=request.vendor_id,
                is_cleared=request.is_cleared,
            )

        elif event == FlipEventType.LOAN_DRAW:
            lines = build_loan_draw_lines(
                deal.id,
                cash_account_id=request.cash_account_id,
                loan_account_id=deal.loan_account_id,
                amount=request.amount,
                is_cleared=request.is_cleared,
            )

        elif event == FlipEventType.REFUND:
            materials = self._account_by_code(classification.FLIP_REHAB_MATERIALS, "Rehab materials")
            lines = build_refund_lines(
                deal.id,
                cash_account_id=request.cash_account_id,
                expense_account_id=materials.id,
                amount=request.amount,
                rehab_category_id=request.rehab_category_id,
                is_cleared=request.is_cleared,
            )

        else:
            lines = self._sale_lines(deal, request)

        description = request.description or f"{deal.nickname} - {EVENT_LABELS[event]}"
        txn = self.ledger_service.create_transaction_multi(request.date, description, lines)
        if event == FlipEventType.SALE:
            deal.status = DealStatus.SOLD
            self.db.flush()
        logger.info("Recorded %s for deal %s as transaction %s", event.value, deal.id, txn.id)
        return txn

    def _sale_lines(self, deal: RealEstateDeal, request: FlipEventRequest):
        if not deal.asset_account_id:
            raise ValidationError("Deal has no asset account.")
        closing = None
        if request.selling_costs:
            closing = self._account_by_code(classification.FLIP_CLOSING_COSTS, "Closing costs")
        asset_basis = self._account_total(deal.asset_account_id)
        # Sale lines net to sale price minus basis; any difference is gain or loss
        gain = None
        if to_money(request.sale_price or 0) != to_money(asset_basis):
            gain = self._account_by_code(classification.FLIP_SALE_GAIN, "Flip sale gain")
        loan_balance = Decimal("0")
        if deal.loan_account_id:
            loan_balance = -self._account_total(deal.loan_account_id)

        return build_sale_lines(
            deal.id,
            cash_account_id=request.cash_account_id,
            sale_price=request.sale_price,
            asset_account_id=deal.asset_account_id,
            asset_basis=asset_basis,
            loan_account_id=deal.loan_account_id,
            loan_balance=max(loan_balance, Decimal("0")),
            selling_costs=request.selling_costs,
            closing_account_id=closing.id if closing else None,
            gain_account_id=gain.id if gain else None,
            is_cleared=request.is_cleared,
        )

    # --- Mortgage ---

    def preview_mortgage_split(self, deal_id: int, total_payment: Decimal) -> MortgageSplit:
        deal = self._get_deal(deal_id)
        if not deal.loan_account_id:
            raise ValidationError("Deal has no loan account.")
        return compute_mortgage_split(
            total_payment,
            deal.original_loan_amount,
            deal.interest_rate,
            deal.loan_term_months,
            principal_paid=self._principal_paid(deal.loan_account_id),
            known_escrow=(deal.monthly_taxes or 0) + (deal.monthly_insurance or 0),
        )

    def create_mortgage_payment(
        self, request: MortgagePaymentRequest
    ) -> tuple[Transaction, MortgageSplit]:
        """Split a payment into principal, interest and escrow and post it cleared."""
        deal = self._get_deal(request.deal_id)
        split = self.preview_mortgage_split(deal.id, request.total_payment)
        interest = self._account_by_code(classification.MORTGAGE_INTEREST, "Mortgage interest")
        escrow = self._account_by_code(classification.TAXES_AND_INSURANCE, "Taxes & insurance")

        lines = build_mortgage_payment_lines(
            deal.id,
            bank_account_id=request.bank_account_id,
            loan_account_id=deal.loan_account_id,
            interest_account_id=interest.id,
            escrow_account_id=escrow.id,
            total_payment=request.total_payment,
            principal=split.principal,
            interest=split.interest,
            escrow=split.escrow,
            purpose=request.purpose,
        )
        description = request.description or f"{deal.nickname} - Mortgage payment"
        txn = self.ledger_service.create_transaction_multi(
            request.date, description, lines, request.purpose
        )
        logger.info(
            "Mortgage payment for deal %s: principal=%s interest=%s escrow=%s",
            deal.id, split.principal, split.interest, split.escrow,
        )
        return txn, split
