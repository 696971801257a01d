"""
Unit tests for BackgroundScheduler.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from studyplan.core.config import Settings
from studyplan.models.recurring_task import RecurrenceRunResult
from studyplan.services.background_scheduler import RECURRENCE_JOB_ID, BackgroundScheduler

FIXED_NOW = datetime(2024, 4, 8, 12, 0, tzinfo=timezone.utc)


def make_service(result=None, error: Exception | None = None):
    service = AsyncMock()
    service.generate_recurring_tasks.return_value = result or RecurrenceRunResult()
    if error:
        service.generate_recurring_tasks.side_effect = error
    return service


@pytest.mark.asyncio
async def test_run_once_passes_clock_time():
    service = make_service(RecurrenceRunResult(created_count=2))
    scheduler = BackgroundScheduler(service, settings=Settings(ENVIRONMENT="test"), clock=lambda: FIXED_NOW)

    result = await scheduler.run_recurrence_once()

    assert result.created_count == 2
    service.generate_recurring_tasks.assert_awaited_once_with(FIXED_NOW)
    assert scheduler.last_run == FIXED_NOW


@pytest.mark.asyncio
async def test_run_once_swallows_errors():
    service = make_service(error=RuntimeError("database is locked"))
    scheduler = BackgroundScheduler(service, settings=Settings(ENVIRONMENT="test"), clock=lambda: FIXED_NOW)

    assert await scheduler.run_recurrence_once() is None
    assert scheduler.last_run is None


@pytest.mark.asyncio
async def test_start_is_noop_in_test_environment():
    scheduler = BackgroundScheduler(make_service(), settings=Settings(ENVIRONMENT="test"))

    await scheduler.start()

    assert scheduler.running is False
    await scheduler.stop()


@pytest.mark.asyncio
async def test_start_registers_interval_job():
    far_future = datetime(2099, 1, 1, tzinfo=timezone.utc)
    settings = Settings(ENVIRONMENT="local", RECURRENCE_INTERVAL_HOURS=6)
    scheduler = BackgroundScheduler(make_service(), settings=settings, clock=lambda: far_future)

    await scheduler.start()
    try:
        assert scheduler.running is True
        job = scheduler._scheduler.get_job(RECURRENCE_JOB_ID)
        assert job is not None
        assert job.trigger.interval.total_seconds() == 6 * 3600
        assert job.next_run_time == far_future
    finally:
        await scheduler.stop()

    assert scheduler.running is False
