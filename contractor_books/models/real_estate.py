"""
Real estate deals and rehab categories.

A deal links to its own asset account (cost basis of the property)
and loan account, so lines can be scoped to one property.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, DateTime, Integer, Numeric, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contractor_books.models.base import Base
from contractor_books.models.enums import DealType, DealStatus


class RealEstateDeal(Base):
    __tablename__ = "real_estate_deals"

    id: Mapped[int] = mapped_column(primary_key=True)
    nickname: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    deal_type: Mapped[DealType] = mapped_column(
        SAEnum(DealType, name="deal_type_enum"), nullable=False
    )
    status: Mapped[DealStatus] = mapped_column(
        SAEnum(DealStatus, name="deal_status_enum"),
        nullable=False,
        default=DealStatus.ACTIVE,
    )
    asset_account_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True
    )
    loan_account_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True
    )
    purchase_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    arv: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    original_loan_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2), nullable=True
    )
    # Annual percentage, e.g. 7.25
    interest_rate: Mapped[Decimal | None] = mapped_column(Numeric(6, 3), nullable=True)
    loan_term_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Known escrow; when both are empty, escrow is inferred from the payment
    monthly_taxes: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    monthly_insurance: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    asset_account: Mapped["Account | None"] = relationship(
        foreign_keys=[asset_account_id]
    )
    loan_account: Mapped["Account | None"] = relationship(
        foreign_keys=[loan_account_id]
    )

    def __repr__(self) -> str:
        return f"<RealEstateDeal {self.nickname} ({self.deal_type.value})>"


class RehabCategory(Base):
    __tablename__ = "rehab_categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category_group: Mapped[str | None] = mapped_column(String(50), nullable=True)
