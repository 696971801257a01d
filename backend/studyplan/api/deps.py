"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from studyplan.core.config import Settings, get_settings
from studyplan.core.logger import setup_logger
from studyplan.interfaces.recurring_task_repository import IRecurringTaskRepository
from studyplan.interfaces.suggestion_provider import ISuggestionProvider
from studyplan.services.recurring_task_service import RecurringTaskService
from studyplan.services.scheduler_service import SchedulerService

logger = setup_logger(__name__)


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_recurring_task_repository() -> IRecurringTaskRepository:
    """Get recurring task repository instance."""
    from studyplan.infrastructure.local.recurring_task_repository import (
        SqliteRecurringTaskRepository,
    )
    return SqliteRecurringTaskRepository()


# ===========================================
# Provider Dependencies
# ===========================================


@lru_cache()
def get_suggestion_provider() -> ISuggestionProvider:
    """
    Get suggestion provider instance based on SUGGESTION_PROVIDER setting.

    Supports:
    - none: no model proposals, fallback scheduling only
    - openai: OpenAI via LiteLLM (needs OPENAI_API_KEY, otherwise degrades to none)
    - lm-studio: LM Studio's OpenAI-compatible server via LiteLLM
    """
    settings = get_settings()

    if settings.SUGGESTION_PROVIDER == "openai":
        if not settings.OPENAI_API_KEY:
            logger.warning("SUGGESTION_PROVIDER=openai but OPENAI_API_KEY is empty; using none")
            from studyplan.infrastructure.local.noop_suggestion_provider import (
                NoopSuggestionProvider,
            )
            return NoopSuggestionProvider()
        from studyplan.infrastructure.local.litellm_suggestion_provider import (
            LiteLLMSuggestionProvider,
        )
        return LiteLLMSuggestionProvider(
            settings.OPENAI_MODEL,
            api_key=settings.OPENAI_API_KEY,
        )

    elif settings.SUGGESTION_PROVIDER == "lm-studio":
        from studyplan.infrastructure.local.litellm_suggestion_provider import (
            LiteLLMSuggestionProvider,
        )
        return LiteLLMSuggestionProvider(
            f"openai/{settings.LM_STUDIO_MODEL}",
            api_base=f"{settings.LM_STUDIO_URL.rstrip('/')}/v1",
            api_key="lm-studio",
        )

    elif settings.SUGGESTION_PROVIDER == "none":
        from studyplan.infrastructure.local.noop_suggestion_provider import (
            NoopSuggestionProvider,
        )
        return NoopSuggestionProvider()

    else:
        raise ValueError(f"Unknown SUGGESTION_PROVIDER: {settings.SUGGESTION_PROVIDER}")


# ===========================================
# Service Dependencies
# ===========================================


def get_scheduler_service(settings: Annotated[Settings, Depends(get_settings)]) -> SchedulerService:
    """Get scheduler service configured from settings."""
    return SchedulerService(
        step_minutes=settings.SLOT_STEP_MINUTES,
        search_days=settings.FALLBACK_SEARCH_DAYS,
    )


def get_recurring_task_service(
    repo: Annotated[IRecurringTaskRepository, Depends(get_recurring_task_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RecurringTaskService:
    """Get recurring task service bound to the configured repository."""
    return RecurringTaskService(
        recurring_repo=repo,
        template_limit=settings.RECURRENCE_TEMPLATE_LIMIT,
    )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

SettingsDep = Annotated[Settings, Depends(get_settings)]
RecurringTaskRepo = Annotated[IRecurringTaskRepository, Depends(get_recurring_task_repository)]
SuggestionProvider = Annotated[ISuggestionProvider, Depends(get_suggestion_provider)]
SchedulerServiceDep = Annotated[SchedulerService, Depends(get_scheduler_service)]
RecurringTaskServiceDep = Annotated[RecurringTaskService, Depends(get_recurring_task_service)]
