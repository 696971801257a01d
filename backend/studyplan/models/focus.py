"""
Focus interval models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from studyplan.models.enums import FocusIntervalType
from studyplan.utils.datetime_utils import ensure_utc


class FocusIntervalLog(BaseModel):
    """Logged WORK or BREAK interval."""

    type: FocusIntervalType
    started_at: datetime
    ended_at: datetime

    @field_validator("started_at", "ended_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class FocusSummary(BaseModel):
    """Streak and minute totals over WORK intervals."""

    current_streak_days: int = 0
    longest_streak_days: int = 0
    work_intervals_today: int = 0
    work_minutes_last_7_days: int = 0
    total_work_minutes: int = 0


class FocusSummaryRequest(BaseModel):
    """Request body for a focus summary."""

    logs: list[FocusIntervalLog] = Field(default_factory=list)
    now: Optional[datetime] = None
    timezone: Optional[str] = Field(None, description="IANA timezone for calendar days")
