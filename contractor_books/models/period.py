"""
Closed accounting periods.

Transactions dated in or before the latest closed month are locked.
Periods close strictly in sequence, one calendar month at a time.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from contractor_books.models.base import Base


class ClosedPeriod(Base):
    __tablename__ = "closed_periods"

    id: Mapped[int] = mapped_column(primary_key=True)
    # "YYYY-MM"; lexical order equals chronological order
    year_month: Mapped[str] = mapped_column(
        String(7), unique=True, nullable=False, index=True
    )
    closed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    closed_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ClosedPeriod {self.year_month}>"
