"""
Chart of accounts.

Bank and credit-card accounts (asset / liability) hold the cash side
of a transaction; income and expense accounts hold the category side.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contractor_books.models.base import Base
from contractor_books.models.enums import AccountType, Purpose, ReportCategory


class Account(Base):
    """
    A single account in the chart of accounts.

    Accounts are never deleted, only deactivated via is_active=False.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    code: Mapped[str | None] = mapped_column(
        String(20), unique=True, nullable=True
    )
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    default_purpose: Mapped[Purpose | None] = mapped_column(
        SAEnum(Purpose, name="purpose_enum"),
        nullable=True,
    )
    report_category: Mapped[ReportCategory | None] = mapped_column(
        SAEnum(ReportCategory, name="report_category_enum"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    lines: Mapped[list["TransactionLine"]] = relationship(
        back_populates="account"
    )

    @property
    def is_balance_sheet(self) -> bool:
        return self.account_type in (AccountType.ASSET, AccountType.LIABILITY)

    def __repr__(self) -> str:
        return f"<Account {self.code or '-'} {self.name} ({self.account_type.value})>"
