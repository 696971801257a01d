"""
LiteLLM suggestion provider implementation.

Supports OpenAI and OpenAI-compatible servers (LM Studio, proxies) via LiteLLM.
Includes support for custom endpoints (api_base).
"""

from datetime import datetime
from typing import Any, Optional

import litellm

from studyplan.core.config import get_settings
from studyplan.core.exceptions import LLMError
from studyplan.core.logger import setup_logger
from studyplan.interfaces.suggestion_provider import ISuggestionProvider
from studyplan.models.interval import Interval
from studyplan.models.schedule import ModelProposal, SchedulePreferences, SchedulerTask
from studyplan.services.llm_utils import (
    SYSTEM_INSTRUCTION,
    build_schedule_prompt,
    parse_suggestion_response,
)

logger = setup_logger(__name__)


class LiteLLMSuggestionProvider(ISuggestionProvider):
    """Chat-completion backed provider with custom endpoint support."""

    def __init__(
        self,
        model_name: str,
        api_base: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize LiteLLM provider.

        Args:
            model_name: LiteLLM model identifier (e.g., "gpt-4o-mini", "openai/<local-model>")
            api_base: Custom API endpoint URL (optional, e.g. "http://localhost:1234/v1")
            api_key: API key (optional for local servers)
            temperature: Sampling temperature (defaults to LLM_TEMPERATURE)
            timeout: Request timeout in seconds (defaults to LLM_TIMEOUT_SECONDS)
        """
        settings = get_settings()
        self._model_name = model_name
        self._api_base = api_base or None
        self._api_key = api_key or None
        self._temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self._timeout = settings.LLM_TIMEOUT_SECONDS if timeout is None else timeout

    def get_provider_name(self) -> str:
        """Get human-readable provider name."""
        if self._api_base:
            return f"LiteLLM ({self._model_name} @ {self._api_base})"
        return f"LiteLLM ({self._model_name})"

    async def propose(
        self,
        tasks: list[SchedulerTask],
        preferences: SchedulePreferences,
        existing_events: list[Interval],
        now: datetime,
    ) -> list[ModelProposal]:
        if not tasks:
            return []

        prompt = build_schedule_prompt(tasks, preferences, existing_events, now)
        content = await self._complete(prompt)
        proposals = parse_suggestion_response(content)
        logger.info(
            f"{self.get_provider_name()} proposed {len(proposals)} slots for {len(tasks)} tasks"
        )
        return proposals

    async def _complete(self, prompt: str) -> str:
        kwargs: dict[str, Any] = {
            "model": self._model_name,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._temperature,
            "timeout": self._timeout,
        }
        if self._api_base:
            kwargs["api_base"] = self._api_base
        if self._api_key:
            kwargs["api_key"] = self._api_key

        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as exc:
            raise LLMError(f"Model request failed: {exc}") from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError):
            content = None
        if not isinstance(content, str):
            raise LLMError("Model returned no content")
        return content
