"""
Pydantic schemas for period close.
"""

import datetime as dt

from pydantic import BaseModel, Field


class ClosePeriodRequest(BaseModel):
    """Close the next period. The target month is always computed, never supplied."""
    closed_by: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=1000)


class ReopenPeriodRequest(BaseModel):
    year_month: str = Field(min_length=7, max_length=7)
    reason: str = Field(min_length=1, max_length=1000)


class PeriodStatusResponse(BaseModel):
    year_month: str
    closed_at: dt.datetime
    closed_by: str | None
    notes: str | None
    is_latest: bool


class PeriodOverviewResponse(BaseModel):
    latest_closed: str | None
    next_period: str
    periods: list[PeriodStatusResponse]
