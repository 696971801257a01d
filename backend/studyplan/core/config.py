"""
Application configuration using Pydantic Settings.

Scheduling defaults and the suggestion provider are selected by environment variables.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = True

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./study_scheduler.db"

    # ===========================================
    # Scheduling defaults (per-user preferences override these)
    # ===========================================
    DAY_WINDOW_START_HOUR: int = Field(8, ge=0, le=23)
    DAY_WINDOW_END_HOUR: int = Field(18, ge=1, le=24)
    DEFAULT_DURATION_MINUTES: int = Field(60, ge=1)
    DEFAULT_TIMEZONE: str = "UTC"

    # Grid used when snapping slot starts
    SLOT_STEP_MINUTES: int = Field(15, ge=1)

    # Number of calendar days the fallback search walks before giving up
    FALLBACK_SEARCH_DAYS: int = Field(30, ge=1)

    # ===========================================
    # Suggestion provider (LLM)
    # ===========================================
    # "none" | "openai" | "lm-studio"
    # - none: deterministic fallback scheduling only
    # - openai: OpenAI chat completions via LiteLLM
    # - lm-studio: OpenAI-compatible local server via LiteLLM
    SUGGESTION_PROVIDER: Literal["none", "openai", "lm-studio"] = "none"

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"

    LM_STUDIO_URL: str = "http://localhost:1234"
    LM_STUDIO_MODEL: str = "lmstudio-community/Meta-Llama-3-8B-Instruct"

    LLM_TEMPERATURE: float = 0.2
    LLM_TIMEOUT_SECONDS: float = 30.0

    # ===========================================
    # Background jobs
    # ===========================================
    RECURRENCE_INTERVAL_HOURS: int = Field(24, ge=1)
    RECURRENCE_TEMPLATE_LIMIT: int = Field(500, ge=1)

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    @property
    def is_test(self) -> bool:
        """Check if running in the test environment."""
        return self.ENVIRONMENT == "test"

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
