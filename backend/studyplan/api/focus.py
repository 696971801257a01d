"""
Focus summary API endpoints.
"""

from fastapi import APIRouter

from studyplan.api.deps import SettingsDep
from studyplan.models.focus import FocusSummary, FocusSummaryRequest
from studyplan.services.focus_summary_service import summarize_focus_intervals
from studyplan.utils.datetime_utils import now_utc

router = APIRouter()


@router.post("/summary", response_model=FocusSummary)
async def get_focus_summary(
    payload: FocusSummaryRequest,
    settings: SettingsDep,
) -> FocusSummary:
    """Summarize logged focus intervals into streaks and minute totals."""
    return summarize_focus_intervals(
        payload.logs,
        now=payload.now or now_utc(),
        timezone=payload.timezone or settings.DEFAULT_TIMEZONE,
    )
