"""
Enum definitions for the scheduler.

These enums are used across models and provide type-safe status/priority values.
"""

from enum import Enum


class Priority(str, Enum):
    """Task priority."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RecurrenceType(str, Enum):
    """How often a recurring task repeats."""

    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class SuggestionOrigin(str, Enum):
    """Where a schedule suggestion came from."""

    MODEL = "model"  # proposed by an external suggestion provider
    FALLBACK = "fallback"  # placed by the deterministic slot finder


class FocusIntervalType(str, Enum):
    """Kind of logged focus interval."""

    WORK = "WORK"
    BREAK = "BREAK"
