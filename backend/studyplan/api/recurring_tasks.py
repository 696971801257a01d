"""
Recurring task API endpoints.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from studyplan.api.deps import RecurringTaskRepo, RecurringTaskServiceDep
from studyplan.core.exceptions import NotFoundError
from studyplan.models.recurring_task import (
    RecurrenceRunResult,
    RecurringTask,
    RecurringTaskCreate,
    TaskOccurrence,
)
from studyplan.utils.datetime_utils import now_utc

router = APIRouter()


@router.post("", response_model=RecurringTask, status_code=status.HTTP_201_CREATED)
async def create_recurring_task(
    payload: RecurringTaskCreate,
    repo: RecurringTaskRepo,
    user_id: str = Query(..., min_length=1, description="Owner of the template"),
) -> RecurringTask:
    """Create a recurring task template."""
    return await repo.create(user_id, payload)


@router.get("/{recurring_task_id}/occurrences", response_model=list[TaskOccurrence])
async def list_occurrences(
    recurring_task_id: UUID,
    repo: RecurringTaskRepo,
    user_id: str = Query(..., min_length=1),
) -> list[TaskOccurrence]:
    """List occurrences generated from a template."""
    try:
        return await repo.list_occurrences(user_id, recurring_task_id)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc


@router.post("/generate", response_model=RecurrenceRunResult)
async def generate_recurring_tasks(
    service: RecurringTaskServiceDep,
    now: Optional[datetime] = Query(None, description="Reference time, defaults to now"),
) -> RecurrenceRunResult:
    """Manually trigger one recurrence generation pass."""
    return await service.generate_recurring_tasks(now or now_utc())
