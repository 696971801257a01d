"""
Schedule suggestion API endpoints.
"""

from fastapi import APIRouter, HTTPException, status

from studyplan.api.deps import SchedulerServiceDep, SettingsDep, SuggestionProvider
from studyplan.core.exceptions import ValidationError
from studyplan.models.schedule import (
    SchedulePreferences,
    ScheduleSuggestionRequest,
    ScheduleSuggestionResponse,
)
from studyplan.utils.datetime_utils import now_utc

router = APIRouter()


@router.post("/suggestions", response_model=ScheduleSuggestionResponse)
async def generate_schedule_suggestions(
    payload: ScheduleSuggestionRequest,
    provider: SuggestionProvider,
    service: SchedulerServiceDep,
    settings: SettingsDep,
) -> ScheduleSuggestionResponse:
    """Suggest one slot per task, model-first with deterministic fallback."""
    preferences = payload.preferences or SchedulePreferences(
        day_window_start_hour=settings.DAY_WINDOW_START_HOUR,
        day_window_end_hour=settings.DAY_WINDOW_END_HOUR,
        default_duration_minutes=settings.DEFAULT_DURATION_MINUTES,
        timezone=settings.DEFAULT_TIMEZONE,
    )
    try:
        suggestions = await service.generate_suggestions(
            tasks=payload.tasks,
            existing_events=payload.existing_events,
            now=payload.now or now_utc(),
            preferences=preferences,
            provider=provider,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.message,
        ) from exc
    return ScheduleSuggestionResponse(suggestions=suggestions)
