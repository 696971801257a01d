"""
Unit tests for SchedulerService.
"""

from datetime import datetime, timedelta, timezone
from itertools import combinations
from unittest.mock import AsyncMock, MagicMock

import pytest

from studyplan.core.exceptions import LLMError
from studyplan.models.enums import Priority, SuggestionOrigin
from studyplan.models.interval import Interval
from studyplan.models.schedule import ModelProposal, SchedulePreferences, SchedulerTask
from studyplan.services.scheduler_service import SchedulerService
from studyplan.services.slot_finder import overlaps

UTC = timezone.utc
BASE = datetime(2030, 1, 1, tzinfo=UTC)


def t(hour: int, minute: int = 0, day: int = 1) -> datetime:
    return datetime(2030, 1, day, hour, minute, tzinfo=UTC)


def make_task(
    task_id: str,
    due_at: datetime | None = None,
    effort_minutes: int | None = None,
    priority: Priority = Priority.MEDIUM,
    created_offset_minutes: int = 0,
) -> SchedulerTask:
    return SchedulerTask(
        id=task_id,
        title=f"Task {task_id}",
        due_at=due_at,
        effort_minutes=effort_minutes,
        priority=priority,
        created_at=BASE - timedelta(days=1) + timedelta(minutes=created_offset_minutes),
    )


def make_provider(proposals=None, error: Exception | None = None):
    provider = MagicMock()
    provider.get_provider_name.return_value = "mock"
    provider.propose = AsyncMock(return_value=proposals or [], side_effect=error)
    return provider


@pytest.fixture
def preferences() -> SchedulePreferences:
    return SchedulePreferences()


class TestSortTasks:
    def test_due_date_first_undated_last(self):
        tasks = [
            make_task("undated"),
            make_task("later", due_at=t(12, day=5)),
            make_task("sooner", due_at=t(12, day=3)),
        ]
        ordered = SchedulerService.sort_tasks(tasks)
        assert [task.id for task in ordered] == ["sooner", "later", "undated"]

    def test_creation_time_breaks_due_ties(self):
        tasks = [
            make_task("newer", due_at=t(12, day=3), created_offset_minutes=10),
            make_task("older", due_at=t(12, day=3), created_offset_minutes=0),
        ]
        ordered = SchedulerService.sort_tasks(tasks)
        assert [task.id for task in ordered] == ["older", "newer"]

    def test_higher_priority_breaks_remaining_ties(self):
        tasks = [
            make_task("low", priority=Priority.LOW),
            make_task("high", priority=Priority.HIGH),
            make_task("medium", priority=Priority.MEDIUM),
        ]
        ordered = SchedulerService.sort_tasks(tasks)
        assert [task.id for task in ordered] == ["high", "medium", "low"]


@pytest.mark.asyncio
async def test_no_tasks_returns_empty(preferences):
    service = SchedulerService()
    assert await service.generate_suggestions([], [], t(8), preferences) == []


@pytest.mark.asyncio
async def test_fallback_places_earlier_due_task_first(preferences):
    service = SchedulerService()
    task_a = make_task("A", due_at=t(10))
    task_b = make_task("B", due_at=t(10, 30))
    busy = [Interval(start_at=t(9), end_at=t(9, 30))]

    suggestions = await service.generate_suggestions([task_b, task_a], busy, t(8), preferences)

    assert [s.task_id for s in suggestions] == ["A", "B"]
    a, b = suggestions
    assert a.origin == SuggestionOrigin.FALLBACK
    assert (a.start_at, a.end_at) == (t(9, 30), t(10, 30))
    assert (b.start_at, b.end_at) == (t(10, 30), t(11, 30))
    assert a.start_at < b.start_at
    assert not overlaps(a.as_interval(), b.as_interval())


@pytest.mark.asyncio
async def test_effort_sets_duration(preferences):
    service = SchedulerService()
    suggestions = await service.generate_suggestions(
        [make_task("A", effort_minutes=90)], [], t(8), preferences
    )
    assert (suggestions[0].start_at, suggestions[0].end_at) == (t(8), t(9, 30))


@pytest.mark.asyncio
async def test_default_duration_and_minimum_step():
    service = SchedulerService()
    prefs = SchedulePreferences(default_duration_minutes=45)
    suggestions = await service.generate_suggestions(
        [make_task("default"), make_task("tiny", effort_minutes=5, created_offset_minutes=1)],
        [],
        t(8),
        prefs,
    )
    default, tiny = suggestions
    assert default.end_at - default.start_at == timedelta(minutes=45)
    assert tiny.end_at - tiny.start_at == timedelta(minutes=15)


@pytest.mark.asyncio
async def test_rolls_over_to_next_day_window(preferences):
    service = SchedulerService()
    suggestions = await service.generate_suggestions(
        [make_task("A", effort_minutes=60)], [], t(17, 30), preferences
    )
    assert (suggestions[0].start_at, suggestions[0].end_at) == (t(8, day=2), t(9, day=2))


@pytest.mark.asyncio
async def test_due_date_in_future_schedules_backwards(preferences):
    service = SchedulerService()
    suggestions = await service.generate_suggestions(
        [make_task("A", due_at=t(15, day=3), effort_minutes=60)], [], t(8), preferences
    )
    assert suggestions[0].start_at == t(14, day=3)


@pytest.mark.asyncio
async def test_unplaced_when_search_exhausted(preferences):
    service = SchedulerService(search_days=1)
    busy = [Interval(start_at=t(0), end_at=t(0, day=2))]

    suggestions = await service.generate_suggestions([make_task("A")], busy, t(8), preferences)

    assert len(suggestions) == 1
    assert suggestions[0].placed is False
    assert suggestions[0].start_at is None
    assert suggestions[0].as_interval() is None


@pytest.mark.asyncio
async def test_every_task_gets_one_non_overlapping_suggestion(preferences):
    service = SchedulerService()
    tasks = [
        make_task(f"T{i}", effort_minutes=30 + 15 * i, created_offset_minutes=i)
        for i in range(6)
    ]
    busy = [Interval(start_at=t(9), end_at=t(10)), Interval(start_at=t(13), end_at=t(14, 30))]

    suggestions = await service.generate_suggestions(tasks, busy, t(8), preferences)

    assert sorted(s.task_id for s in suggestions) == sorted(task.id for task in tasks)
    intervals = [s.as_interval() for s in suggestions]
    for a, b in combinations(intervals + busy, 2):
        assert not overlaps(a, b)


class TestModelProposals:
    @pytest.mark.asyncio
    async def test_accepted_proposals_block_fallback_slots(self, preferences):
        service = SchedulerService()
        provider = make_provider(
            [
                ModelProposal(
                    task_id="A",
                    start_at=t(8),
                    end_at=t(9),
                    rationale="morning focus",
                    confidence=0.8,
                )
            ]
        )
        tasks = [make_task("A"), make_task("B", created_offset_minutes=1)]

        suggestions = await service.generate_suggestions(tasks, [], t(8), preferences, provider)

        a, b = suggestions
        assert a.origin == SuggestionOrigin.MODEL
        assert a.rationale == "morning focus"
        assert a.confidence == 0.8
        assert b.origin == SuggestionOrigin.FALLBACK
        assert (b.start_at, b.end_at) == (t(9), t(10))
        provider.propose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_provider_failure_falls_back(self, preferences):
        service = SchedulerService()
        provider = make_provider(error=LLMError("boom"))
        tasks = [make_task("A"), make_task("B", created_offset_minutes=1)]

        suggestions = await service.generate_suggestions(tasks, [], t(8), preferences, provider)

        assert [s.origin for s in suggestions] == [SuggestionOrigin.FALLBACK] * 2
        assert (suggestions[0].start_at, suggestions[1].start_at) == (t(8), t(9))

    @pytest.mark.asyncio
    async def test_unknown_and_inverted_proposals_ignored(self, preferences):
        service = SchedulerService()
        provider = make_provider(
            [
                ModelProposal(task_id="ghost", start_at=t(8), end_at=t(9)),
                ModelProposal(task_id="A", start_at=t(11), end_at=t(10)),
            ]
        )

        suggestions = await service.generate_suggestions(
            [make_task("A")], [], t(8), preferences, provider
        )

        assert len(suggestions) == 1
        assert suggestions[0].origin == SuggestionOrigin.FALLBACK

    @pytest.mark.asyncio
    async def test_last_proposal_for_a_task_wins(self, preferences):
        service = SchedulerService()
        provider = make_provider(
            [
                ModelProposal(task_id="A", start_at=t(10), end_at=t(11)),
                ModelProposal(task_id="A", start_at=t(14), end_at=t(15)),
            ]
        )

        suggestions = await service.generate_suggestions(
            [make_task("A")], [], t(8), preferences, provider
        )

        assert (suggestions[0].start_at, suggestions[0].end_at) == (t(14), t(15))


class TestTimezone:
    @pytest.mark.asyncio
    async def test_day_window_uses_user_timezone(self):
        service = SchedulerService()
        prefs = SchedulePreferences(timezone="Asia/Tokyo")
        # 00:00 UTC is 09:00 in Tokyo
        suggestions = await service.generate_suggestions(
            [make_task("A", effort_minutes=60)], [], t(0), prefs
        )
        assert suggestions[0].start_at == t(0)
        assert suggestions[0].start_at.tzinfo == UTC

    @pytest.mark.asyncio
    async def test_after_local_window_moves_to_next_local_morning(self):
        service = SchedulerService()
        prefs = SchedulePreferences(timezone="Asia/Tokyo")
        # 10:00 UTC is 19:00 in Tokyo; next window opens 08:00 JST = 23:00 UTC
        suggestions = await service.generate_suggestions(
            [make_task("A", effort_minutes=60)], [], t(10), prefs
        )
        assert suggestions[0].start_at == t(23)

    @pytest.mark.asyncio
    async def test_fallback_duration_holds_across_dst_fall_back(self):
        service = SchedulerService()
        prefs = SchedulePreferences(
            day_window_start_hour=0, day_window_end_hour=24, timezone="America/New_York"
        )
        now = datetime(2024, 11, 3, 5, 30, tzinfo=UTC)

        suggestions = await service.generate_suggestions(
            [make_task("A", effort_minutes=60)], [], now, prefs
        )

        assert suggestions[0].start_at == now
        assert suggestions[0].end_at == datetime(2024, 11, 3, 6, 30, tzinfo=UTC)
