"""
Background scheduler service for periodic jobs.

Drives the recurring task generation pass on a fixed interval.
Uses APScheduler for in-process scheduling without external dependencies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from studyplan.core.config import Settings, get_settings
from studyplan.core.logger import setup_logger
from studyplan.models.recurring_task import RecurrenceRunResult
from studyplan.services.recurring_task_service import RecurringTaskService
from studyplan.utils.datetime_utils import now_utc

logger = setup_logger(__name__)

RECURRENCE_JOB_ID = "recurring_task_generation"


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Recurring task generation every RECURRENCE_INTERVAL_HOURS, first run on start
    - Injected clock so each pass sees an explicit "now"
    - Owned by the process entry point; start() and stop() bound its lifetime
    """

    def __init__(
        self,
        recurring_service: RecurringTaskService,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._recurring_service = recurring_service
        self._settings = settings or get_settings()
        self._clock = clock
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._last_run: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def last_run(self) -> Optional[datetime]:
        return self._last_run

    async def start(self):
        """Start the scheduler; the recurrence job fires immediately, then on its interval."""
        # Only run scheduler in non-test environments
        if self._settings.is_test:
            logger.info("Background scheduler disabled in test environment")
            return
        if self.running:
            return

        self._scheduler = AsyncIOScheduler(timezone="UTC")
        self._scheduler.add_job(
            self.run_recurrence_once,
            IntervalTrigger(hours=self._settings.RECURRENCE_INTERVAL_HOURS),
            id=RECURRENCE_JOB_ID,
            name="Recurring Task Generation",
            replace_existing=True,
            next_run_time=self._clock(),
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(
            "Background scheduler started:\n"
            f"  - Recurring task generation: every {self._settings.RECURRENCE_INTERVAL_HOURS}h"
        )

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Background scheduler stopped")

    async def run_recurrence_once(self) -> Optional[RecurrenceRunResult]:
        """
        Run one recurrence pass at the clock's current time.

        Errors are logged, never raised, so a bad pass does not kill the job.
        """
        now = self._clock()
        logger.info(f"Starting recurring task generation at {now.isoformat()}...")
        try:
            result = await self._recurring_service.generate_recurring_tasks(now)
        except Exception as e:
            logger.error(f"Recurring task generation failed: {e}")
            return None
        self._last_run = now
        return result
