"""
Non-overlapping slot search over busy intervals.

Searches a single day window; callers decide whether to retry on later days.
Window bounds and the grid are local wall time; durations and steps are
elapsed time, so a slot keeps its length across DST changes.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from studyplan.core.exceptions import ValidationError
from studyplan.models.interval import Interval
from studyplan.utils.datetime_utils import UTC, at_hour, ensure_utc, start_of_day

DEFAULT_STEP_MINUTES = 15


def overlaps(a: Interval, b: Interval) -> bool:
    """Strict overlap: touching endpoints and zero-length intervals never overlap."""
    a_start, a_end = ensure_utc(a.start_at), ensure_utc(a.end_at)
    b_start, b_end = ensure_utc(b.start_at), ensure_utc(b.end_at)
    if a_start == a_end or b_start == b_end:
        return False
    return a_start < b_end and b_start < a_end


def snap_to_grid(moment: datetime, step_minutes: int) -> datetime:
    """Round up to the next multiple of step_minutes elapsed since local midnight."""
    midnight = start_of_day(moment).astimezone(UTC)
    step = timedelta(minutes=step_minutes)
    steps = -((midnight - moment.astimezone(UTC)) // step)
    return (midnight + steps * step).astimezone(moment.tzinfo)


def _to_utc(interval: Interval) -> Interval:
    return Interval(start_at=ensure_utc(interval.start_at), end_at=ensure_utc(interval.end_at))


def find_slot(
    desired_start: datetime,
    duration_minutes: int,
    day_window_start_hour: int,
    day_window_end_hour: int,
    existing: Iterable[Interval],
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> Optional[Interval]:
    """
    Find the earliest free slot on or after desired_start within its day window.

    The window is built on desired_start's calendar date in desired_start's own
    timezone, so pass a wall-clock (user local) datetime.

    Args:
        desired_start: Earliest acceptable start
        duration_minutes: Slot length
        day_window_start_hour: Window open hour (0-23)
        day_window_end_hour: Window close hour (1-24)
        existing: Busy intervals
        step_minutes: Grid size for candidate starts

    Returns:
        The slot, or None when nothing fits before the window closes

    Raises:
        ValidationError: On non-positive duration/step or an empty window
    """
    if duration_minutes <= 0:
        raise ValidationError(f"duration_minutes must be positive, got {duration_minutes}")
    if step_minutes <= 0:
        raise ValidationError(f"step_minutes must be positive, got {step_minutes}")
    if not 0 <= day_window_start_hour < day_window_end_hour <= 24:
        raise ValidationError(
            "Day window must satisfy 0 <= start < end <= 24",
            details={"start": day_window_start_hour, "end": day_window_end_hour},
        )

    if desired_start.tzinfo is None:
        desired_start = ensure_utc(desired_start)
    zone = desired_start.tzinfo

    # Comparisons and arithmetic run in UTC so ambiguous local times order correctly
    day_start = at_hour(desired_start, day_window_start_hour).astimezone(UTC)
    day_end = at_hour(desired_start, day_window_end_hour).astimezone(UTC)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    relevant = sorted(
        (
            interval
            for interval in map(_to_utc, existing)
            if interval.end_at > day_start and interval.start_at < day_end
        ),
        key=lambda interval: interval.start_at,
    )

    earliest = max(desired_start.astimezone(UTC), day_start)
    candidate_start = snap_to_grid(earliest.astimezone(zone), step_minutes).astimezone(UTC)

    index = 0
    while candidate_start < day_end:
        candidate_end = candidate_start + duration
        if candidate_end > day_end:
            return None
        candidate = Interval(start_at=candidate_start, end_at=candidate_end)

        # Busy intervals ending at or before the candidate can never matter again
        while index < len(relevant) and relevant[index].end_at <= candidate_start:
            index += 1

        has_overlap = False
        for busy in relevant[index:]:
            if busy.start_at >= candidate_end:
                break
            if overlaps(candidate, busy):
                has_overlap = True
                break

        if not has_overlap:
            return Interval(
                start_at=candidate_start.astimezone(zone),
                end_at=candidate_end.astimezone(zone),
            )
        candidate_start += step

    return None
