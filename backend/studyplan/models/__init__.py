"""Pydantic models (schemas) for the scheduler."""

from studyplan.models.enums import (
    FocusIntervalType,
    Priority,
    RecurrenceType,
    SuggestionOrigin,
)
from studyplan.models.focus import FocusIntervalLog, FocusSummary
from studyplan.models.interval import Interval
from studyplan.models.recurring_task import (
    RecurrenceRule,
    RecurrenceRunResult,
    RecurringTask,
    RecurringTaskCreate,
    TaskOccurrence,
)
from studyplan.models.schedule import (
    ModelProposal,
    SchedulePreferences,
    SchedulerTask,
    ScheduleSuggestion,
)

__all__ = [
    # Enums
    "Priority",
    "RecurrenceType",
    "SuggestionOrigin",
    "FocusIntervalType",
    # Intervals
    "Interval",
    # Schedule
    "SchedulerTask",
    "SchedulePreferences",
    "ModelProposal",
    "ScheduleSuggestion",
    # Recurrence
    "RecurrenceRule",
    "RecurringTask",
    "RecurringTaskCreate",
    "TaskOccurrence",
    "RecurrenceRunResult",
    # Focus
    "FocusIntervalLog",
    "FocusSummary",
]
