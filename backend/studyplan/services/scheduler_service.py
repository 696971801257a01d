"""
Scheduler service for schedule suggestions.

Combines optional model-proposed slots with deterministic fallback placement.
"""

from datetime import datetime, timedelta
from typing import Optional

from studyplan.core.logger import setup_logger
from studyplan.interfaces.suggestion_provider import ISuggestionProvider
from studyplan.models.enums import Priority, SuggestionOrigin
from studyplan.models.interval import Interval
from studyplan.models.schedule import (
    ModelProposal,
    SchedulePreferences,
    SchedulerTask,
    ScheduleSuggestion,
)
from studyplan.services.slot_finder import DEFAULT_STEP_MINUTES, find_slot
from studyplan.utils.datetime_utils import at_hour, ensure_utc, get_zone, start_of_day

logger = setup_logger(__name__)

PRIORITY_WEIGHT = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class SchedulerService:
    """
    Service for generating schedule suggestions.

    Provides:
    - Deterministic task ordering (due date, creation time, priority)
    - Model phase: accepts provider proposals as-is
    - Fallback phase: slot search that never collides with anything placed in the run
    """

    def __init__(
        self,
        step_minutes: int = DEFAULT_STEP_MINUTES,
        search_days: int = 30,
    ):
        """
        Initialize scheduler service.

        Args:
            step_minutes: Grid size for fallback slot starts (also the minimum duration)
            search_days: Days the fallback search walks forward before marking a task unplaced
        """
        self.step_minutes = step_minutes
        self.search_days = search_days

    async def generate_suggestions(
        self,
        tasks: list[SchedulerTask],
        existing_events: list[Interval],
        now: datetime,
        preferences: SchedulePreferences,
        provider: Optional[ISuggestionProvider] = None,
    ) -> list[ScheduleSuggestion]:
        """
        Suggest one slot per task.

        Args:
            tasks: Tasks awaiting a slot
            existing_events: Busy intervals already on the calendar
            now: Reference instant; fallback slots never start before it
            preferences: Day window, default duration and timezone
            provider: Optional external suggestion provider

        Returns:
            Suggestions in task processing order, exactly one per task
        """
        if not tasks:
            return []

        now = ensure_utc(now)
        zone = get_zone(preferences.timezone)
        now_local = now.astimezone(zone)
        sorted_tasks = self.sort_tasks(tasks)

        proposals = await self._load_model_proposals(
            provider, tasks, preferences, existing_events, now
        )

        suggestions: dict[str, ScheduleSuggestion] = {}
        intervals = [
            Interval(
                start_at=event.start_at.astimezone(zone),
                end_at=event.end_at.astimezone(zone),
            )
            for event in existing_events
        ]

        for task in sorted_tasks:
            proposal = proposals.get(task.id)
            if proposal is None:
                continue
            suggestions[task.id] = ScheduleSuggestion(
                task_id=task.id,
                start_at=proposal.start_at,
                end_at=proposal.end_at,
                origin=SuggestionOrigin.MODEL,
                rationale=proposal.rationale,
                confidence=proposal.confidence,
            )
            intervals.append(
                Interval(
                    start_at=proposal.start_at.astimezone(zone),
                    end_at=proposal.end_at.astimezone(zone),
                )
            )

        unplaced_count = 0
        for task in sorted_tasks:
            if task.id in suggestions:
                continue
            duration_minutes = self._duration_for(task, preferences)
            desired_start = self._baseline_start(task, now, duration_minutes).astimezone(zone)
            slot = self._allocate_slot(
                desired_start=desired_start,
                duration_minutes=duration_minutes,
                intervals=intervals,
                preferences=preferences,
                current_time=now_local,
            )
            if slot is None:
                unplaced_count += 1
                logger.warning(
                    f"No free slot within {self.search_days} days for task {task.id}"
                )
                suggestions[task.id] = ScheduleSuggestion(
                    task_id=task.id,
                    origin=SuggestionOrigin.FALLBACK,
                    placed=False,
                )
                continue

            intervals.append(slot)
            suggestions[task.id] = ScheduleSuggestion(
                task_id=task.id,
                start_at=ensure_utc(slot.start_at),
                end_at=ensure_utc(slot.end_at),
                origin=SuggestionOrigin.FALLBACK,
            )

        logger.info(
            f"Schedule suggestions: {len(tasks)} tasks, {len(proposals)} from model, "
            f"{len(tasks) - len(proposals) - unplaced_count} fallback, {unplaced_count} unplaced"
        )
        return [suggestions[task.id] for task in sorted_tasks]

    @staticmethod
    def sort_tasks(tasks: list[SchedulerTask]) -> list[SchedulerTask]:
        """Order by due date (undated last), then creation time, then higher priority."""
        return sorted(
            tasks,
            key=lambda task: (
                task.due_at is None,
                task.due_at or datetime.min,
                task.created_at,
                -PRIORITY_WEIGHT.get(task.priority, 0),
            ),
        )

    async def _load_model_proposals(
        self,
        provider: Optional[ISuggestionProvider],
        tasks: list[SchedulerTask],
        preferences: SchedulePreferences,
        existing_events: list[Interval],
        now: datetime,
    ) -> dict[str, ModelProposal]:
        """Query the provider; any failure degrades to no proposals."""
        if provider is None:
            return {}

        try:
            raw = await provider.propose(tasks, preferences, existing_events, now)
        except Exception as exc:
            logger.warning(
                f"Suggestion provider {provider.get_provider_name()} failed, "
                f"using fallback scheduling: {exc}"
            )
            return {}

        known_ids = {task.id for task in tasks}
        accepted: dict[str, ModelProposal] = {}
        for proposal in raw or []:
            if proposal.task_id not in known_ids:
                logger.debug(f"Ignoring proposal for unknown task {proposal.task_id}")
                continue
            if proposal.end_at <= proposal.start_at:
                logger.debug(f"Ignoring empty or inverted proposal for task {proposal.task_id}")
                continue
            accepted[proposal.task_id] = proposal
        return accepted

    def _duration_for(self, task: SchedulerTask, preferences: SchedulePreferences) -> int:
        minutes = task.effort_minutes or preferences.default_duration_minutes
        return max(minutes, self.step_minutes)

    @staticmethod
    def _baseline_start(task: SchedulerTask, now: datetime, duration_minutes: int) -> datetime:
        """Work backwards from the due date when that still lies ahead, else start now."""
        if task.due_at:
            candidate = task.due_at - timedelta(minutes=duration_minutes)
            if candidate > now:
                return candidate
        return now

    def _allocate_slot(
        self,
        desired_start: datetime,
        duration_minutes: int,
        intervals: list[Interval],
        preferences: SchedulePreferences,
        current_time: datetime,
    ) -> Optional[Interval]:
        earliest = max(ensure_utc(desired_start), ensure_utc(current_time))
        start = earliest.replace(second=0, microsecond=0).astimezone(current_time.tzinfo)

        cursor = start
        for _ in range(self.search_days):
            slot = find_slot(
                desired_start=cursor,
                duration_minutes=duration_minutes,
                day_window_start_hour=preferences.day_window_start_hour,
                day_window_end_hour=preferences.day_window_end_hour,
                existing=intervals,
                step_minutes=self.step_minutes,
            )
            if slot:
                return slot
            cursor = self._next_day_start(cursor, preferences.day_window_start_hour)
        return None

    @staticmethod
    def _next_day_start(moment: datetime, day_window_start_hour: int) -> datetime:
        next_day = start_of_day(moment) + timedelta(days=1)
        return at_hour(next_day, day_window_start_hour)
