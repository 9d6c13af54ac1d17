"""
Period close service.

Periods close strictly in sequence: the only closeable period is the
calendar month after the latest closed one. Transactions dated in or
before the latest closed month are locked; LedgerService calls
assert_period_open() before every write.
"""

import datetime as dt
import json
import logging
import re

from sqlalchemy import select
from sqlalchemy.orm import Session

from contractor_books.errors import PeriodClosedError, ValidationError
from contractor_books.models.audit_log import AuditLog
from contractor_books.models.period import ClosedPeriod
from contractor_books.schemas.period import PeriodStatusResponse

logger = logging.getLogger(__name__)

_YEAR_MONTH = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def parse_year_month(value: str) -> tuple[int, int]:
    match = _YEAR_MONTH.match(value or "")
    if not match:
        raise ValidationError(f"Invalid period '{value}'. Use YYYY-MM, e.g. 2024-03.")
    return int(match.group(1)), int(match.group(2))


def year_month_of(day: dt.date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def next_period(latest: str | None, today: dt.date | None = None) -> str:
    """
    Return the period that must be closed next.

    The month after the latest closed one, or last month when
    nothing has been closed yet.
    """
    if latest:
        year, month = parse_year_month(latest)
        if month == 12:
            return f"{year + 1:04d}-01"
        return f"{year:04d}-{month + 1:02d}"

    today = today or dt.date.today()
    first_of_month = today.replace(day=1)
    return year_month_of(first_of_month - dt.timedelta(days=1))


class PeriodService:

    def __init__(self, db: Session):
        self.db = db

    def latest_closed(self) -> ClosedPeriod | None:
        return self.db.execute(
            select(ClosedPeriod).order_by(ClosedPeriod.year_month.desc()).limit(1)
        ).scalar_one_or_none()

    def period_close_status(self) -> list[PeriodStatusResponse]:
        """Closed periods, newest first, with the latest one flagged."""
        periods = self.db.execute(
            select(ClosedPeriod).order_by(ClosedPeriod.year_month.desc())
        ).scalars().all()
        return [
            PeriodStatusResponse(
                year_month=p.year_month,
                closed_at=p.closed_at,
                closed_by=p.closed_by,
                notes=p.notes,
                is_latest=(i == 0),
            )
            for i, p in enumerate(periods)
        ]

    def next_period_to_close(self, today: dt.date | None = None) -> str:
        latest = self.latest_closed()
        return next_period(latest.year_month if latest else None, today)

    def is_date_locked(self, day: dt.date) -> bool:
        latest = self.latest_closed()
        return latest is not None and year_month_of(day) <= latest.year_month

    def assert_period_open(self, day: dt.date) -> None:
        latest = self.latest_closed()
        if latest is not None and year_month_of(day) <= latest.year_month:
            raise PeriodClosedError(
                f"Period {year_month_of(day)} is closed "
                f"(closed through {latest.year_month}); transactions dated "
                f"{day.isoformat()} cannot be changed"
            )

    def close_period(
        self,
        year_month: str,
        closed_by: str | None = None,
        notes: str | None = None,
        today: dt.date | None = None,
    ) -> ClosedPeriod:
        """
        Close one month.

        Rejects any month other than the next one in sequence and
        any month that has not ended yet.
        """
        parse_year_month(year_month)
        today = today or dt.date.today()

        latest = self.latest_closed()
        if latest is not None:
            expected = next_period(latest.year_month)
            if year_month != expected:
                raise ValidationError(
                    f"Cannot close {year_month}: periods close in order and "
                    f"the next period to close is {expected}"
                )

        if year_month >= year_month_of(today):
            raise ValidationError(f"Cannot close {year_month}: the month has not ended")

        period = ClosedPeriod(
            year_month=year_month,
            closed_by=closed_by,
            notes=notes or None,
        )
        self.db.add(period)
        self.db.add(AuditLog(
            event_type="period_closed",
            details=json.dumps({"year_month": year_month, "closed_by": closed_by, "notes": notes}),
        ))
        self.db.flush()
        logger.info("Closed period %s (by %s)", year_month, closed_by or "unknown")
        return period

    def close_next_period(
        self,
        closed_by: str | None = None,
        notes: str | None = None,
        today: dt.date | None = None,
    ) -> ClosedPeriod:
        """Close the computed next period; callers never pick the target."""
        target = self.next_period_to_close(today)
        return self.close_period(target, closed_by=closed_by, notes=notes, today=today)

    def reopen_period(self, year_month: str, reason: str) -> None:
        """Reopen the latest closed period. A reason is mandatory."""
        if not reason or not reason.strip():
            raise ValidationError("A reason is required to reopen a period.")
        parse_year_month(year_month)

        latest = self.latest_closed()
        if latest is None:
            raise ValidationError("No periods are closed.")
        if latest.year_month != year_month:
            raise ValidationError(
                f"Only the latest closed period ({latest.year_month}) can be reopened"
            )

        self.db.delete(latest)
        self.db.add(AuditLog(
            event_type="period_reopened",
            details=json.dumps({"year_month": year_month, "reason": reason.strip()}),
        ))
        self.db.flush()
        logger.warning("Reopened period %s: %s", year_month, reason.strip())
