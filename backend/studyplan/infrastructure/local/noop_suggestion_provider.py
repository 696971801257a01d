"""
No-op suggestion provider, used when model assistance is disabled.
"""

from datetime import datetime

from studyplan.interfaces.suggestion_provider import ISuggestionProvider
from studyplan.models.interval import Interval
from studyplan.models.schedule import ModelProposal, SchedulePreferences, SchedulerTask


class NoopSuggestionProvider(ISuggestionProvider):
    """Provider that never proposes anything."""

    async def propose(
        self,
        tasks: list[SchedulerTask],
        preferences: SchedulePreferences,
        existing_events: list[Interval],
        now: datetime,
    ) -> list[ModelProposal]:
        return []

    def get_provider_name(self) -> str:
        return "none"
