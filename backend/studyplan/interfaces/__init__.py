"""Abstract interfaces for infrastructure abstraction."""

from studyplan.interfaces.recurring_task_repository import IRecurringTaskRepository
from studyplan.interfaces.suggestion_provider import ISuggestionProvider

__all__ = [
    "IRecurringTaskRepository",
    "ISuggestionProvider",
]
