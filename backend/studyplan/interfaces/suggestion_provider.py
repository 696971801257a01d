"""
Schedule suggestion provider interface.

Defines the contract for external (model-backed) slot proposals.
Implementations: Noop, LiteLLM (OpenAI, LM Studio, etc.)
"""

from abc import ABC, abstractmethod
from datetime import datetime

from studyplan.models.interval import Interval
from studyplan.models.schedule import ModelProposal, SchedulePreferences, SchedulerTask


class ISuggestionProvider(ABC):
    """Abstract interface for schedule suggestion providers."""

    @abstractmethod
    async def propose(
        self,
        tasks: list[SchedulerTask],
        preferences: SchedulePreferences,
        existing_events: list[Interval],
        now: datetime,
    ) -> list[ModelProposal]:
        """
        Propose time slots for the given tasks.

        May return proposals for any subset of tasks, including none.
        Implementations raise on transport or payload errors; callers decide how to degrade.
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """
        Get the human-readable provider name.

        Returns:
            Provider name string for logging/display
        """
        pass
