"""
Custom exceptions for the scheduler.
"""

from typing import Any, Optional


class SchedulerError(Exception):
    """Base exception for study-scheduler."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(SchedulerError):
    """Resource not found."""

    pass


class DuplicateError(SchedulerError):
    """Duplicate resource detected."""

    pass


class ValidationError(SchedulerError):
    """Validation error."""

    pass


class LLMError(SchedulerError):
    """LLM-related error."""

    pass


class LLMValidationError(LLMError):
    """LLM output validation failed."""

    def __init__(self, message: str, raw_output: str, attempts: int = 1):
        super().__init__(message, details={"raw_output": raw_output, "attempts": attempts})
        self.raw_output = raw_output
        self.attempts = attempts
