"""Exceptions raised by the cycle engine."""

from __future__ import annotations


class CycleEngineError(Exception):
    """Base class for every error the cycle engine raises."""


class ProfileValidationError(CycleEngineError, ValueError):
    """Raised when a cycle profile would produce degenerate phase boundaries."""


class DateOutOfRangeError(CycleEngineError, ValueError):
    """Raised for dates the lunar model cannot place (before its reference epoch)."""


class SymptomLogError(CycleEngineError, ValueError):
    """Raised when a symptom log write is malformed."""


class EntryNotFoundError(CycleEngineError, LookupError):
    """Raised when an entry or period id does not exist."""
