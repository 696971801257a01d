"""
SQLite implementation of recurring task repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError

from studyplan.core.exceptions import DuplicateError, NotFoundError
from studyplan.infrastructure.local.database import TaskORM, get_session_factory
from studyplan.interfaces.recurring_task_repository import IRecurringTaskRepository
from studyplan.models.enums import Priority, RecurrenceType
from studyplan.models.recurring_task import (
    RecurrenceRule,
    RecurringTask,
    RecurringTaskCreate,
    TaskOccurrence,
)
from studyplan.utils.datetime_utils import ensure_utc


def _to_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetime -> naive UTC for storage."""
    if value is None:
        return None
    return ensure_utc(value).replace(tzinfo=None)


class SqliteRecurringTaskRepository(IRecurringTaskRepository):
    """SQLite implementation of recurring task repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_template(self, orm: TaskORM) -> RecurringTask:
        """Convert ORM row to a template model."""
        return RecurringTask(
            id=UUID(orm.id),
            user_id=orm.user_id,
            title=orm.title,
            notes=orm.notes,
            priority=Priority(orm.priority),
            due_at=ensure_utc(orm.due_at),
            effort_minutes=orm.effort_minutes,
            recurrence=RecurrenceRule(
                type=RecurrenceType(orm.recurrence_type),
                interval=orm.recurrence_interval or 1,
                count=orm.recurrence_count,
                until=ensure_utc(orm.recurrence_until),
            ),
            created_at=ensure_utc(orm.created_at),
        )

    def _orm_to_occurrence(self, orm: TaskORM) -> TaskOccurrence:
        """Convert ORM row to an occurrence model."""
        return TaskOccurrence.model_validate(orm, from_attributes=True)

    async def create(self, user_id: str, data: RecurringTaskCreate) -> RecurringTask:
        """Create a new recurring task template."""
        async with self._session_factory() as session:
            template_id = str(uuid4())
            orm = TaskORM(
                id=template_id,
                user_id=user_id,
                title=data.title,
                notes=data.notes,
                priority=data.priority.value,
                due_at=_to_db_datetime(data.due_at),
                effort_minutes=data.effort_minutes,
                recurrence_type=data.recurrence.type.value,
                recurrence_interval=data.recurrence.interval,
                recurrence_count=data.recurrence.count,
                recurrence_until=_to_db_datetime(data.recurrence.until),
                series_id=template_id,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_template(orm)

    async def get(self, user_id: str, recurring_task_id: UUID) -> Optional[RecurringTask]:
        """Get a recurring task template by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(TaskORM).where(
                    and_(
                        TaskORM.id == str(recurring_task_id),
                        TaskORM.user_id == user_id,
                        TaskORM.series_id == TaskORM.id,
                    )
                )
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_template(orm) if orm else None

    async def list_templates(self, limit: int = 500) -> list[RecurringTask]:
        """List repeating templates with a due date, oldest first."""
        async with self._session_factory() as session:
            query = (
                select(TaskORM)
                .where(
                    and_(
                        TaskORM.recurrence_type != RecurrenceType.NONE.value,
                        TaskORM.due_at.is_not(None),
                        TaskORM.series_id == TaskORM.id,
                    )
                )
                .order_by(TaskORM.created_at.asc())
                .limit(limit)
            )
            result = await session.execute(query)
            return [self._orm_to_template(orm) for orm in result.scalars().all()]

    async def count_occurrences(self, template: RecurringTask) -> int:
        """Count rows in the template's series, the template row included."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count())
                .select_from(TaskORM)
                .where(TaskORM.series_id == str(template.id))
            )
            return int(result.scalar_one())

    async def create_occurrence(
        self,
        template: RecurringTask,
        due_at: datetime,
        occurrence_key: str,
    ) -> TaskOccurrence:
        """Insert an occurrence; the unique occurrence_key rejects repeats."""
        async with self._session_factory() as session:
            orm = TaskORM(
                id=str(uuid4()),
                user_id=template.user_id,
                title=template.title,
                notes=template.notes,
                priority=template.priority.value,
                due_at=_to_db_datetime(due_at),
                effort_minutes=template.effort_minutes,
                recurrence_type=RecurrenceType.NONE.value,
                recurrence_interval=template.recurrence.interval,
                series_id=str(template.id),
                occurrence_key=occurrence_key,
            )
            session.add(orm)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateError(
                    f"Occurrence {occurrence_key} already exists",
                    details={"template_id": str(template.id), "due_at": due_at.isoformat()},
                ) from exc
            await session.refresh(orm)
            return self._orm_to_occurrence(orm)

    async def list_occurrences(self, user_id: str, template_id: UUID) -> list[TaskOccurrence]:
        """List occurrences of a user's template, oldest due first."""
        if await self.get(user_id, template_id) is None:
            raise NotFoundError(f"RecurringTask {template_id} not found")
        async with self._session_factory() as session:
            result = await session.execute(
                select(TaskORM)
                .where(
                    and_(
                        TaskORM.series_id == str(template_id),
                        TaskORM.id != str(template_id),
                    )
                )
                .order_by(TaskORM.due_at.asc())
            )
            return [self._orm_to_occurrence(orm) for orm in result.scalars().all()]
