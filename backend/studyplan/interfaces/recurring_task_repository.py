"""
Recurring task repository interface.

Defines contract for recurring task template and occurrence persistence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from studyplan.models.recurring_task import RecurringTask, RecurringTaskCreate, TaskOccurrence


class IRecurringTaskRepository(ABC):
    """Abstract interface for recurring task persistence."""

    @abstractmethod
    async def create(self, user_id: str, data: RecurringTaskCreate) -> RecurringTask:
        """Create a new recurring task template."""
        pass

    @abstractmethod
    async def get(self, user_id: str, recurring_task_id: UUID) -> Optional[RecurringTask]:
        """Get a recurring task template by ID."""
        pass

    @abstractmethod
    async def list_templates(self, limit: int = 500) -> list[RecurringTask]:
        """List templates with a recurrence type other than NONE, across all users."""
        pass

    @abstractmethod
    async def count_occurrences(self, template: RecurringTask) -> int:
        """Count tasks in the template's series, the template itself included."""
        pass

    @abstractmethod
    async def create_occurrence(
        self,
        template: RecurringTask,
        due_at: datetime,
        occurrence_key: str,
    ) -> TaskOccurrence:
        """
        Materialize one occurrence of a template.

        Raises:
            DuplicateError: an occurrence with the same key already exists
        """
        pass

    @abstractmethod
    async def list_occurrences(self, user_id: str, template_id: UUID) -> list[TaskOccurrence]:
        """
        List materialized occurrences of a user's template, oldest due first.

        Raises:
            NotFoundError: the template does not exist for this user
        """
        pass
