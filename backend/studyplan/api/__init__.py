"""API routers."""

from studyplan.api import focus, recurring_tasks, schedule

__all__ = [
    "schedule",
    "focus",
    "recurring_tasks",
]
