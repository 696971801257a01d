"""
Time interval value object.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator

from studyplan.utils.datetime_utils import ensure_utc


class Interval(BaseModel):
    """
    Busy or free time range.

    Overlap checks treat it as [start_at, end_at); zero-length intervals overlap nothing.
    """

    start_at: datetime
    end_at: datetime

    @field_validator("start_at", "end_at")
    @classmethod
    def _make_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return ensure_utc(value)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "Interval":
        if ensure_utc(self.start_at) > ensure_utc(self.end_at):
            raise ValueError("start_at must not be after end_at")
        return self
