"""
Focus interval summary.

Aggregates WORK intervals into streaks and minute totals.
"""

import math
from datetime import date, datetime, timedelta
from typing import Optional

from studyplan.models.enums import FocusIntervalType
from studyplan.models.focus import FocusIntervalLog, FocusSummary
from studyplan.utils.datetime_utils import user_local_date


def summarize_focus_intervals(
    logs: list[FocusIntervalLog],
    now: datetime,
    timezone: Optional[str] = None,
) -> FocusSummary:
    """
    Summarize focus logs relative to `now`.

    Calendar days (today, the 7-day window, streak days) are taken in `timezone`,
    UTC when omitted. Minutes are rounded once on the totals, not per entry.

    Args:
        logs: WORK and BREAK intervals; BREAK entries are ignored
        now: Reference instant defining "today"
        timezone: IANA timezone name for calendar-day boundaries

    Returns:
        FocusSummary
    """
    if not logs:
        return FocusSummary()

    today = user_local_date(now, timezone)
    window_start = today - timedelta(days=6)

    total_work_minutes = 0.0
    work_minutes_last_7_days = 0.0
    work_intervals_today = 0
    work_days: set[date] = set()

    for log in logs:
        if log.type != FocusIntervalType.WORK:
            continue
        minutes = max(0.0, (log.ended_at - log.started_at).total_seconds() / 60)
        total_work_minutes += minutes

        started_day = user_local_date(log.started_at, timezone)
        work_days.add(started_day)

        if started_day >= window_start:
            work_minutes_last_7_days += minutes
        if started_day == today:
            work_intervals_today += 1

    return FocusSummary(
        current_streak_days=_current_streak(work_days, today),
        longest_streak_days=_longest_streak(work_days),
        work_intervals_today=work_intervals_today,
        work_minutes_last_7_days=_round_minutes(work_minutes_last_7_days),
        total_work_minutes=_round_minutes(total_work_minutes),
    )


def _current_streak(work_days: set[date], today: date) -> int:
    """Consecutive days with work, counting back from today (0 if today is empty)."""
    streak = 0
    day = today
    while day in work_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def _longest_streak(work_days: set[date]) -> int:
    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in sorted(work_days):
        if previous is not None and (day - previous).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def _round_minutes(minutes: float) -> int:
    """Round half up (2.5 -> 3)."""
    return int(math.floor(minutes + 0.5))
