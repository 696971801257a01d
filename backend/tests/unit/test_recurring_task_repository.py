"""
Unit tests for the SQLite recurring task repository.
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from studyplan.core.exceptions import DuplicateError, NotFoundError
from studyplan.infrastructure.local.recurring_task_repository import SqliteRecurringTaskRepository
from studyplan.models.enums import Priority, RecurrenceType
from studyplan.models.recurring_task import RecurrenceRule, RecurringTaskCreate
from studyplan.services.recurring_task_service import RecurringTaskService, occurrence_key

UTC = timezone.utc


def make_create(
    recurrence_type: RecurrenceType = RecurrenceType.DAILY,
    count: int | None = None,
) -> RecurringTaskCreate:
    return RecurringTaskCreate(
        title="Flashcards",
        priority=Priority.HIGH,
        due_at=datetime(2024, 1, 1, 9, 0, tzinfo=UTC),
        effort_minutes=20,
        recurrence=RecurrenceRule(type=recurrence_type, count=count),
    )


@pytest.mark.asyncio
async def test_create_and_get_template(session_factory, test_user_id):
    repo = SqliteRecurringTaskRepository(session_factory=session_factory)

    created = await repo.create(test_user_id, make_create())
    retrieved = await repo.get(test_user_id, created.id)

    assert retrieved is not None
    assert retrieved.id == created.id
    assert retrieved.priority == Priority.HIGH
    assert retrieved.recurrence.type == RecurrenceType.DAILY
    assert retrieved.due_at == datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    assert await repo.get("someone_else", created.id) is None


@pytest.mark.asyncio
async def test_list_templates_skips_non_repeating(session_factory, test_user_id):
    repo = SqliteRecurringTaskRepository(session_factory=session_factory)
    daily = await repo.create(test_user_id, make_create())
    await repo.create(test_user_id, make_create(RecurrenceType.NONE))

    templates = await repo.list_templates()

    assert [template.id for template in templates] == [daily.id]


@pytest.mark.asyncio
async def test_occurrences_count_and_duplicate_key(session_factory, test_user_id):
    repo = SqliteRecurringTaskRepository(session_factory=session_factory)
    template = await repo.create(test_user_id, make_create())
    due_at = datetime(2024, 1, 2, 9, 0, tzinfo=UTC)
    key = occurrence_key(template.id, due_at)

    assert await repo.count_occurrences(template) == 1

    occurrence = await repo.create_occurrence(template, due_at, key)
    assert occurrence.series_id == template.id
    assert occurrence.due_at == due_at
    assert occurrence.occurrence_key == key
    assert await repo.count_occurrences(template) == 2

    with pytest.raises(DuplicateError):
        await repo.create_occurrence(template, due_at, key)

    occurrences = await repo.list_occurrences(test_user_id, template.id)
    assert [o.id for o in occurrences] == [occurrence.id]
    # Occurrences are plain tasks, never templates themselves
    assert [t.id for t in await repo.list_templates()] == [template.id]


@pytest.mark.asyncio
async def test_generation_pass_is_idempotent(session_factory, test_user_id):
    repo = SqliteRecurringTaskRepository(session_factory=session_factory)
    template = await repo.create(test_user_id, make_create())
    service = RecurringTaskService(recurring_repo=repo)
    now = datetime(2024, 1, 2, 12, 0, tzinfo=UTC)

    first = await service.generate_recurring_tasks(now)
    second = await service.generate_recurring_tasks(now)

    assert first.created_count == 1
    assert second.created_count == 0
    assert second.skipped_count == 1
    occurrences = await repo.list_occurrences(test_user_id, template.id)
    assert [o.due_at for o in occurrences] == [datetime(2024, 1, 3, 9, 0, tzinfo=UTC)]


@pytest.mark.asyncio
async def test_generation_respects_series_count(session_factory, test_user_id):
    repo = SqliteRecurringTaskRepository(session_factory=session_factory)
    template = await repo.create(test_user_id, make_create(count=2))
    service = RecurringTaskService(recurring_repo=repo)

    await service.generate_recurring_tasks(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))
    result = await service.generate_recurring_tasks(datetime(2024, 1, 5, 12, 0, tzinfo=UTC))

    assert result.created_count == 0
    assert await repo.count_occurrences(template) == 2


@pytest.mark.asyncio
async def test_list_occurrences_unknown_template(session_factory, test_user_id):
    repo = SqliteRecurringTaskRepository(session_factory=session_factory)
    template = await repo.create(test_user_id, make_create())

    with pytest.raises(NotFoundError):
        await repo.list_occurrences("someone_else", template.id)
    with pytest.raises(NotFoundError):
        await repo.list_occurrences(test_user_id, uuid4())
