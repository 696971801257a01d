"""
Recurring task models.

Defines the recurring task templates used to materialize task occurrences.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from studyplan.models.enums import Priority, RecurrenceType
from studyplan.utils.datetime_utils import ensure_utc


class RecurrenceRule(BaseModel):
    """
    Recurrence settings attached to a task template.

    count and until are independent bounds; when both are set, whichever is hit first ends the series.
    """

    type: RecurrenceType = RecurrenceType.NONE
    interval: int = Field(1, ge=1)
    count: Optional[int] = Field(None, ge=1, description="Maximum occurrences in the series")
    until: Optional[datetime] = Field(None, description="No occurrence is due after this instant")

    @field_validator("until")
    @classmethod
    def _until_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


class RecurringTaskBase(BaseModel):
    """Base fields for recurring task templates."""

    title: str = Field(..., min_length=1, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)
    priority: Priority = Priority.MEDIUM
    due_at: datetime
    effort_minutes: Optional[int] = Field(None, ge=1)
    recurrence: RecurrenceRule = Field(default_factory=RecurrenceRule)

    @field_validator("due_at")
    @classmethod
    def _due_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class RecurringTaskCreate(RecurringTaskBase):
    """Create a new recurring task template."""

    pass


class RecurringTask(RecurringTaskBase):
    """Recurring task template with metadata."""

    id: UUID
    user_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class TaskOccurrence(BaseModel):
    """Concrete task materialized from a recurring template."""

    id: UUID
    series_id: UUID
    user_id: str
    title: str
    notes: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    due_at: datetime
    effort_minutes: Optional[int] = None
    occurrence_key: str
    created_at: datetime

    class Config:
        from_attributes = True

    @field_validator("due_at", "created_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class RecurrenceRunResult(BaseModel):
    """Outcome of one recurrence generation pass."""

    created_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    occurrences: list[TaskOccurrence] = Field(default_factory=list)
