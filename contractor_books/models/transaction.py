"""
Transaction and transaction line models.

A transaction is a container for two or more lines. Each line posts
a signed amount to one account; the amounts of a transaction's lines
always sum to zero. That invariant is enforced by LedgerService,
which is the only writer of these tables.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, Date, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contractor_books.models.base import Base
from contractor_books.models.enums import Purpose, CostType


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow
    )

    lines: Mapped[list["TransactionLine"]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionLine.id",
    )

    def __repr__(self) -> str:
        return f"<Transaction {self.id} {self.date} {self.description!r}>"


class TransactionLine(Base):
    __tablename__ = "transaction_lines"

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    is_cleared: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    cleared_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    purpose: Mapped[Purpose] = mapped_column(
        SAEnum(Purpose, name="purpose_enum"),
        nullable=False,
        default=Purpose.BUSINESS,
    )
    job_id: Mapped[int | None] = mapped_column(
        ForeignKey("jobs.id"), nullable=True, index=True
    )
    vendor_id: Mapped[int | None] = mapped_column(
        ForeignKey("vendors.id"), nullable=True
    )
    installer_id: Mapped[int | None] = mapped_column(
        ForeignKey("installers.id"), nullable=True
    )
    real_estate_deal_id: Mapped[int | None] = mapped_column(
        ForeignKey("real_estate_deals.id"), nullable=True, index=True
    )
    rehab_category_id: Mapped[int | None] = mapped_column(
        ForeignKey("rehab_categories.id"), nullable=True
    )
    cost_type: Mapped[CostType | None] = mapped_column(
        SAEnum(CostType, name="cost_type_enum"),
        nullable=True,
    )
    # Credit-card reimbursement status, independent of is_cleared
    cc_settled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    transaction: Mapped["Transaction"] = relationship(back_populates="lines")
    account: Mapped["Account"] = relationship(back_populates="lines")
    job: Mapped["Job | None"] = relationship()
    vendor: Mapped["Vendor | None"] = relationship()
    installer: Mapped["Installer | None"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<TransactionLine {self.id} account={self.account_id} "
            f"{self.amount} cleared={self.is_cleared}>"
        )
