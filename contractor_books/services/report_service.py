"""
Report views: balances, pending, year-to-date, ledger and job summary.

Each view loads flat LineRow records with one joined query and
aggregates them with the rules in balance_rules.
"""

import datetime as dt
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractor_books.config import get_settings
from contractor_books.models.account import Account
from contractor_books.models.enums import AccountType
from contractor_books.models.job import Job
from contractor_books.models.transaction import Transaction, TransactionLine
from contractor_books.schemas.reports import LedgerRowResponse
from contractor_books.services.balance_rules import (
    AccountBalance,
    JobProfit,
    LineRow,
    PendingSummary,
    YearSummary,
    account_balances,
    job_profit,
    pending_lines,
    summarize_year,
)


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    def load_rows(
        self,
        *,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        account_id: int | None = None,
        job_id: int | None = None,
    ) -> list[LineRow]:
        stmt = (
            select(TransactionLine, Transaction, Account)
            .join(Transaction, TransactionLine.transaction_id == Transaction.id)
            .join(Account, TransactionLine.account_id == Account.id)
            .order_by(Transaction.date, TransactionLine.id)
        )
        if start_date:
            stmt = stmt.where(Transaction.date >= start_date)
        if end_date:
            stmt = stmt.where(Transaction.date <= end_date)
        if account_id is not None:
            stmt = stmt.where(TransactionLine.account_id == account_id)
        if job_id is not None:
            stmt = stmt.where(TransactionLine.job_id == job_id)

        return [
            LineRow(
                line_id=line.id,
                transaction_id=txn.id,
                date=txn.date,
                description=txn.description,
                account_id=account.id,
                account_name=account.name,
                account_code=account.code,
                account_type=account.account_type,
                amount=line.amount,
                is_cleared=line.is_cleared,
                purpose=line.purpose,
                report_category=account.report_category,
                cleared_date=line.cleared_date,
                job_id=line.job_id,
                vendor_id=line.vendor_id,
                installer_id=line.installer_id,
                real_estate_deal_id=line.real_estate_deal_id,
                cc_settled=line.cc_settled,
            )
            for line, txn, account in self.db.execute(stmt).all()
        ]

    def account_balances(self, include_inactive: bool = False) -> list[AccountBalance]:
        stmt = select(Account).order_by(Account.code, Account.name)
        if not include_inactive:
            stmt = stmt.where(Account.is_active.is_(True))
        accounts = self.db.execute(stmt).scalars().all()
        return account_balances(accounts, self.load_rows())

    def get_account_balance(self, account_id: int):
        """Balance of one account; None if the account does not exist."""
        account = self.db.get(Account, account_id)
        if account is None:
            return None
        return account_balances([account], self.load_rows(account_id=account_id))[0]

    def pending_transactions(self) -> PendingSummary:
        return pending_lines(self.load_rows())

    def ytd_income(self, year: int | None = None, include_pending: bool | None = None) -> YearSummary:
        """
        Year-to-date profit buckets.

        Only cleared lines count unless YTD_CLEARED_ONLY is off or the
        caller asks to include pending lines.
        """
        year = year or dt.date.today().year
        if include_pending is None:
            cleared_only = get_settings().YTD_CLEARED_ONLY
        else:
            cleared_only = not include_pending
        rows = self.load_rows(
            start_date=dt.date(year, 1, 1),
            end_date=dt.date(year, 12, 31),
        )
        return summarize_year(rows, year, cleared_only=cleared_only)

    def ledger(
        self,
        *,
        account_id: int | None = None,
        start_date: dt.date | None = None,
        end_date: dt.date | None = None,
        cleared: bool | None = None,
        job_id: int | None = None,
    ) -> list[LedgerRowResponse]:
        """
        One row per cash-side line, newest first.

        The category column lists the accounts on the other side of
        the transaction.
        """
        rows = self.load_rows(start_date=start_date, end_date=end_date)
        by_txn: dict[int, list[LineRow]] = defaultdict(list)
        for row in rows:
            by_txn[row.transaction_id].append(row)

        if job_id is not None:
            job_txns = {r.transaction_id for r in rows if r.job_id == job_id}
            by_txn = {k: v for k, v in by_txn.items() if k in job_txns}

        result = []
        for txn_rows in by_txn.values():
            for row in txn_rows:
                if row.account_type not in (AccountType.ASSET, AccountType.LIABILITY):
                    continue
                if account_id is not None and row.account_id != account_id:
                    continue
                if cleared is not None and row.is_cleared != cleared:
                    continue
                others = [r.account_name for r in txn_rows if r.line_id != row.line_id]
                result.append(LedgerRowResponse(
                    line_id=row.line_id,
                    transaction_id=row.transaction_id,
                    date=row.date,
                    description=row.description,
                    account_id=row.account_id,
                    account_name=row.account_name,
                    amount=row.amount,
                    is_cleared=row.is_cleared,
                    cleared_date=row.cleared_date,
                    purpose=row.purpose,
                    cc_settled=row.cc_settled,
                    category=", ".join(others) if others else None,
                ))
        result.sort(key=lambda r: (r.date, r.line_id), reverse=True)
        return result

    def job_summary(self, job_id: int | None = None) -> list[JobProfit]:
        """Profit per job, for one job or all of them."""
        stmt = select(Job).order_by(Job.name)
        if job_id is not None:
            stmt = stmt.where(Job.id == job_id)
        jobs = self.db.execute(stmt).scalars().all()

        rows = self.load_rows(job_id=job_id)
        summaries = []
        for job in jobs:
            summary = job_profit(rows, job.id)
            summary.job_name = job.name
            summaries.append(summary)
        return summaries
