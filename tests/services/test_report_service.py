import datetime as dt
from decimal import Decimal

import pytest

from contractor_books.models.enums import AccountType
from contractor_books.schemas.account import AccountCreate
from contractor_books.schemas.reference import InstallerCreate, JobCreate, VendorCreate
from contractor_books.schemas.transaction import TransactionLineCreate
from contractor_books.services.account_service import AccountService
from contractor_books.services.ledger_service import LedgerService
from contractor_books.services.reference_service import ReferenceService
from contractor_books.services.report_service import ReportService


def post(db, date, description, *lines):
    return LedgerService(db).create_transaction_multi(date, description, [
        TransactionLineCreate(account_id=account.id, amount=Decimal(amount), **links)
        for account, amount, links in lines
    ])


@pytest.fixture
def books(db_session):
    service = AccountService(db_session)
    accounts = {
        "bank": service.create_account(
            AccountCreate(code="1000", name="Checking", account_type=AccountType.ASSET)),
        "card": service.create_account(
            AccountCreate(code="2000", name="Visa", account_type=AccountType.LIABILITY)),
        "income": service.create_account(
            AccountCreate(code="40000", name="Job Income", account_type=AccountType.INCOME)),
        "materials": service.create_account(
            AccountCreate(code="50000", name="Materials", account_type=AccountType.EXPENSE)),
    }
    db_session.commit()
    return accounts


class TestBalances:

    def test_asset_includes_pending_liability_does_not(self, db_session, books):
        post(db_session, dt.date(2024, 2, 1), "Deposit",
             (books["bank"], "1000.00", {"is_cleared": True}),
             (books["income"], "-1000.00", {"is_cleared": True}))
        post(db_session, dt.date(2024, 2, 2), "Check",
             (books["materials"], "200.00", {}),
             (books["bank"], "-200.00", {}))
        post(db_session, dt.date(2024, 2, 3), "Card",
             (books["materials"], "75.00", {}),
             (books["card"], "-75.00", {}))
        db_session.commit()

        balances = {b.name: b.balance for b in ReportService(db_session).account_balances()}

        assert balances["Checking"] == Decimal("800.00")
        assert balances["Visa"] == Decimal("0.00")
        assert balances["Job Income"] == Decimal("-1000.00")

    def test_inactive_accounts_hidden_by_default(self, db_session, books):
        books["card"].is_active = False
        db_session.commit()

        service = ReportService(db_session)

        assert "Visa" not in {b.name for b in service.account_balances()}
        assert "Visa" in {b.name for b in service.account_balances(include_inactive=True)}

    def test_missing_account_balance_is_none(self, db_session):
        assert ReportService(db_session).get_account_balance(404) is None


class TestPendingAndLedger:

    def test_pending_transactions(self, db_session, books):
        post(db_session, dt.date(2024, 2, 2), "Check",
             (books["materials"], "200.00", {}),
             (books["bank"], "-200.00", {}))
        post(db_session, dt.date(2024, 2, 3), "Card",
             (books["materials"], "75.00", {}),
             (books["card"], "-75.00", {}))
        db_session.commit()

        pending = ReportService(db_session).pending_transactions()

        assert pending.bank_total == Decimal("-200.00")
        assert pending.card_total == Decimal("-75.00")

    def test_ledger_rows_newest_first_with_category(self, db_session, books):
        post(db_session, dt.date(2024, 2, 1), "Deposit",
             (books["bank"], "1000.00", {"is_cleared": True}),
             (books["income"], "-1000.00", {"is_cleared": True}))
        post(db_session, dt.date(2024, 2, 5), "Lumber",
             (books["materials"], "200.00", {}),
             (books["bank"], "-200.00", {}))
        db_session.commit()

        rows = ReportService(db_session).ledger(account_id=books["bank"].id)

        assert [r.description for r in rows] == ["Lumber", "Deposit"]
        assert rows[0].category == "Materials"
        assert rows[1].category == "Job Income"

    def test_ledger_filters(self, db_session, books):
        post(db_session, dt.date(2024, 1, 10), "Deposit",
             (books["bank"], "1000.00", {"is_cleared": True}),
             (books["income"], "-1000.00", {"is_cleared": True}))
        post(db_session, dt.date(2024, 2, 5), "Lumber",
             (books["materials"], "200.00", {}),
             (books["bank"], "-200.00", {}))
        db_session.commit()
        service = ReportService(db_session)

        assert [r.description for r in service.ledger(cleared=False)] == ["Lumber"]
        assert [r.description for r in service.ledger(start_date=dt.date(2024, 2, 1))] == ["Lumber"]


class TestYtdAndJobs:

    def test_ytd_respects_include_pending(self, db_session, books):
        post(db_session, dt.date(2024, 2, 1), "Deposit",
             (books["bank"], "1000.00", {"is_cleared": True}),
             (books["income"], "-1000.00", {"is_cleared": True}))
        post(db_session, dt.date(2024, 3, 1), "Deposit",
             (books["bank"], "500.00", {}),
             (books["income"], "-500.00", {}))
        db_session.commit()
        service = ReportService(db_session)

        cleared = service.ytd_income(2024, include_pending=False)
        everything = service.ytd_income(2024, include_pending=True)

        assert cleared.total.job_income == Decimal("1000.00")
        assert everything.total.job_income == Decimal("1500.00")
        assert everything.cleared_only is False

    def test_job_summary(self, db_session, books):
        reference = ReferenceService(db_session)
        job = reference.create_job(JobCreate(name="Smith kitchen"))
        other = reference.create_job(JobCreate(name="Jones bath"))
        installer = reference.create_installer(InstallerCreate(first_name="Ray"))
        vendor = reference.create_vendor(VendorCreate(name="Lumber Yard"))
        day = dt.date(2024, 4, 1)
        post(db_session, day, "Deposit",
             (books["bank"], "4000.00", {}),
             (books["income"], "-4000.00", {"job_id": job.id}))
        post(db_session, day, "Labor",
             (books["materials"], "1500.00", {"job_id": job.id, "installer_id": installer.id}),
             (books["bank"], "-1500.00", {}))
        post(db_session, day, "Tile",
             (books["materials"], "600.00", {"job_id": job.id, "vendor_id": vendor.id}),
             (books["card"], "-600.00", {}))
        db_session.commit()
        service = ReportService(db_session)

        summaries = {s.job_name: s for s in service.job_summary()}

        assert summaries["Smith kitchen"].profit == Decimal("1900.00")
        assert summaries["Smith kitchen"].labor == Decimal("1500.00")
        assert summaries["Jones bath"].profit == Decimal("0.00")
        assert [s.job_id for s in service.job_summary(other.id)] == [other.id]
