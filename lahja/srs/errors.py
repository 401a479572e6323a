"""
Errors raised by the review scheduling engine.

All engine errors are local and recoverable: the session controller turns
them into a skipped card instead of ending the review session.
"""


class SchedulingError(Exception):
    """Base class for review engine errors."""


class InvalidInput(SchedulingError, ValueError):
    """A rating, result or stage value outside its enumeration."""


class InvariantViolation(SchedulingError):
    """Interval or ease arithmetic produced a negative, infinite or NaN value."""


class StaleRecordError(SchedulingError):
    """The stored record changed since it was read (compare-and-swap failure)."""
