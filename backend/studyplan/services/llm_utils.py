"""
Shared LLM prompt and response utilities for schedule suggestions.
"""

from __future__ import annotations

import json
import re
from datetime import datetime

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from studyplan.core.exceptions import LLMValidationError
from studyplan.models.interval import Interval
from studyplan.models.schedule import ModelProposal, SchedulePreferences, SchedulerTask

SYSTEM_INSTRUCTION = "You output strict JSON with ISO 8601 timestamps."

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class SuggestionPayload(BaseModel):
    """Expected top-level shape of a model response."""

    suggestions: list[ModelProposal] = Field(default_factory=list)


def build_schedule_prompt(
    tasks: list[SchedulerTask],
    preferences: SchedulePreferences,
    existing_events: list[Interval],
    now: datetime,
) -> str:
    """Build the user prompt asking the model to place every task."""
    task_context = [
        {
            "id": task.id,
            "title": task.title,
            "dueAt": task.due_at.isoformat() if task.due_at else None,
            "effortMinutes": task.effort_minutes or preferences.default_duration_minutes,
            "priority": task.priority.value,
            "notes": task.notes,
        }
        for task in tasks
    ]
    busy_context = [
        {"startAt": event.start_at.isoformat(), "endAt": event.end_at.isoformat()}
        for event in existing_events
    ]
    timezone_name = preferences.timezone or "UTC"
    return "\n".join(
        [
            "You are an assistant that schedules student tasks.",
            f"Current time: {now.isoformat()}.",
            (
                f"The user works between local hours {preferences.day_window_start_hour}:00 "
                f"and {preferences.day_window_end_hour}:00 in timezone {timezone_name}."
            ),
            "Suggest start and end times for each task using ISO 8601 timestamps. "
            "Times should fall within the preferred hours and must not overlap the busy intervals.",
            'Return JSON only in the shape {"suggestions":[{"taskId","startAt","endAt","rationale?","confidence?"}]}.',
            "taskId must match the provided id exactly. Include every task exactly once.",
            f"Busy intervals: {json.dumps(busy_context, ensure_ascii=False)}",
            f"Tasks: {json.dumps(task_context, ensure_ascii=False, indent=2)}",
        ]
    )


def _normalize_keys(item: dict) -> dict:
    """Map camelCase model output onto ModelProposal field names."""
    mapping = {"taskId": "task_id", "startAt": "start_at", "endAt": "end_at"}
    return {mapping.get(key, key): value for key, value in item.items()}


def parse_suggestion_response(content: str) -> list[ModelProposal]:
    """
    Parse a model's JSON reply into proposals.

    Raises:
        LLMValidationError: If the reply is not JSON or does not match the schema
    """
    trimmed = _CODE_FENCE.sub("", content.strip()).strip()
    try:
        data = json.loads(trimmed)
    except json.JSONDecodeError as exc:
        raise LLMValidationError(f"Model response is not JSON: {exc}", raw_output=content) from exc

    if not isinstance(data, dict) or not isinstance(data.get("suggestions"), list):
        raise LLMValidationError("Model response has no suggestions list", raw_output=content)

    items = [
        _normalize_keys(item) if isinstance(item, dict) else item
        for item in data["suggestions"]
    ]
    try:
        payload = SuggestionPayload.model_validate({"suggestions": items})
    except PydanticValidationError as exc:
        raise LLMValidationError(f"Invalid model response: {exc}", raw_output=content) from exc
    return payload.suggestions
