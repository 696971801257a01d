"""
Schedule models for suggestion inputs and outputs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from studyplan.models.enums import Priority, SuggestionOrigin
from studyplan.models.interval import Interval
from studyplan.utils.datetime_utils import ensure_utc


class SchedulerTask(BaseModel):
    """Work item awaiting a suggested time slot."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=500)
    due_at: Optional[datetime] = None
    effort_minutes: Optional[int] = Field(None, ge=1)
    priority: Priority = Priority.MEDIUM
    created_at: datetime
    notes: Optional[str] = None

    @field_validator("due_at", "created_at")
    @classmethod
    def _to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


class SchedulePreferences(BaseModel):
    """User scheduling preferences."""

    day_window_start_hour: int = Field(8, ge=0, le=23)
    day_window_end_hour: int = Field(18, ge=1, le=24)
    default_duration_minutes: int = Field(60, ge=1)
    timezone: Optional[str] = Field(None, description="IANA timezone name, None = UTC")

    @model_validator(mode="after")
    def _check_window(self) -> "SchedulePreferences":
        if self.day_window_start_hour >= self.day_window_end_hour:
            raise ValueError("day_window_start_hour must be before day_window_end_hour")
        return self


class ModelProposal(BaseModel):
    """Slot proposed by an external suggestion provider."""

    task_id: str = Field(..., min_length=1)
    start_at: datetime
    end_at: datetime
    rationale: Optional[str] = None
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)

    @field_validator("start_at", "end_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ScheduleSuggestion(BaseModel):
    """
    Suggested slot for one task.

    placed=False marks a task the fallback search could not fit; start_at/end_at are None then.
    """

    task_id: str
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    origin: SuggestionOrigin
    rationale: Optional[str] = None
    confidence: Optional[float] = None
    placed: bool = True

    def as_interval(self) -> Optional[Interval]:
        if not self.placed or self.start_at is None or self.end_at is None:
            return None
        return Interval(start_at=self.start_at, end_at=self.end_at)


class ScheduleSuggestionRequest(BaseModel):
    """Request body for schedule suggestions."""

    tasks: list[SchedulerTask] = Field(default_factory=list)
    existing_events: list[Interval] = Field(default_factory=list)
    preferences: Optional[SchedulePreferences] = None
    now: Optional[datetime] = None


class ScheduleSuggestionResponse(BaseModel):
    """Response body for schedule suggestions."""

    suggestions: list[ScheduleSuggestion] = Field(default_factory=list)
