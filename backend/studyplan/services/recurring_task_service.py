"""
Recurring task service.

Advances recurring templates to their next due date and materializes occurrences.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from studyplan.core.exceptions import DuplicateError
from studyplan.core.logger import setup_logger
from studyplan.interfaces.recurring_task_repository import IRecurringTaskRepository
from studyplan.models.enums import RecurrenceType
from studyplan.models.recurring_task import (
    RecurrenceRule,
    RecurrenceRunResult,
    RecurringTask,
    TaskOccurrence,
)
from studyplan.utils.datetime_utils import add_months, ensure_utc

logger = setup_logger(__name__)

# Upper bound on periods stepped per call; a daily rule catches up ~270 years.
MAX_PERIOD_STEPS = 100_000


def advance(anchor: datetime, rule: RecurrenceRule, periods: int) -> datetime:
    """Date `periods` recurrence periods after anchor."""
    if rule.type == RecurrenceType.DAILY:
        return anchor + timedelta(days=rule.interval * periods)
    if rule.type == RecurrenceType.WEEKLY:
        return anchor + timedelta(weeks=rule.interval * periods)
    if rule.type == RecurrenceType.MONTHLY:
        # Measured from the anchor; day-of-month clamping never accumulates
        return add_months(anchor, rule.interval * periods)
    raise ValueError(f"Recurrence type {rule.type} has no period")


def next_occurrence(
    last_due_at: datetime,
    rule: RecurrenceRule,
    reference: datetime,
    occurrences_already_created: int,
) -> Optional[datetime]:
    """
    Next due date of a series strictly after the reference instant.

    Args:
        last_due_at: Due date of the template (or latest known occurrence)
        rule: Recurrence rule
        reference: Usually "now"; the result is always later than this
        occurrences_already_created: Tasks already in the series, template included

    Returns:
        The next due date, or None when the rule does not repeat or a bound is reached
    """
    if rule.type == RecurrenceType.NONE:
        return None
    if rule.count is not None and occurrences_already_created >= rule.count:
        return None

    anchor = ensure_utc(last_due_at)
    reference = ensure_utc(reference)

    periods = 1
    next_due = advance(anchor, rule, periods)
    while next_due <= reference:
        periods += 1
        if periods > MAX_PERIOD_STEPS:
            logger.warning(f"Recurrence from {anchor.isoformat()} did not pass {reference.isoformat()}")
            return None
        next_due = advance(anchor, rule, periods)

    if rule.until is not None and next_due > rule.until:
        return None
    return next_due


def occurrence_key(template_id: UUID, due_at: datetime) -> str:
    """Idempotency key identifying one occurrence of one template."""
    raw = f"{template_id}:{ensure_utc(due_at).isoformat()}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class RecurringTaskService:
    """Service for generating task occurrences from recurring templates."""

    def __init__(
        self,
        recurring_repo: IRecurringTaskRepository,
        template_limit: int = 500,
    ):
        self.recurring_repo = recurring_repo
        self.template_limit = template_limit

    async def generate_recurring_tasks(self, now: datetime) -> RecurrenceRunResult:
        """
        Run one generation pass over all recurring templates.

        A failure on one template is logged and counted; the rest still process.
        An occurrence that already exists (duplicate key) counts as skipped.
        """
        result = RecurrenceRunResult()
        templates = await self.recurring_repo.list_templates(limit=self.template_limit)
        logger.info(f"Processing {len(templates)} recurring templates")

        for template in templates:
            try:
                created = await self._generate_for_template(template, now)
            except Exception as e:
                result.error_count += 1
                logger.error(f"Error generating occurrence for template {template.id}: {e}")
                continue

            if created is None:
                result.skipped_count += 1
            else:
                result.created_count += 1
                result.occurrences.append(created)

        logger.info(
            f"Recurring task generation completed: "
            f"{result.created_count} created, {result.skipped_count} skipped, "
            f"{result.error_count} errors"
        )
        return result

    async def _generate_for_template(
        self, template: RecurringTask, now: datetime
    ) -> Optional[TaskOccurrence]:
        """Create the template's next occurrence; None when nothing was created."""
        existing = await self.recurring_repo.count_occurrences(template)
        next_due = next_occurrence(template.due_at, template.recurrence, now, existing)
        if next_due is None:
            logger.info(f"Template {template.id} series exhausted or not repeating")
            return None

        key = occurrence_key(template.id, next_due)
        try:
            occurrence = await self.recurring_repo.create_occurrence(template, next_due, key)
        except DuplicateError:
            logger.info(
                f"Occurrence {next_due.isoformat()} of template {template.id} already exists"
            )
            return None
        return occurrence
