"""
Bank aggregator link and staged transactions.

A BankLink stores the aggregator access token and the sync cursor
returned by the last successful sync. Synced rows are staged in
imported_bank_transactions until they are posted to the ledger.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import String, Boolean, Date, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from contractor_books.models.base import Base


class BankLink(Base):
    __tablename__ = "bank_links"

    id: Mapped[int] = mapped_column(primary_key=True)
    institution_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    access_token: Mapped[str] = mapped_column(String(255), nullable=False)
    cursor: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow
    )


class ImportedBankTransaction(Base):
    __tablename__ = "imported_bank_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    bank_link_id: Mapped[int] = mapped_column(
        ForeignKey("bank_links.id"), nullable=False, index=True
    )
    external_id: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False
    )
    external_account_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # Aggregator convention: positive is money out
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    merchant_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    transaction_id: Mapped[int | None] = mapped_column(
        ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )
