"""
Domain-specific exception hierarchy for the lesson slot library.
"""


class SlotError(Exception):
    """Base class for all library-level errors."""


class InvalidSlotError(SlotError, ValueError):
    """Raised when a slot index is not an integer in the 0-95 range."""


class InvalidDateError(SlotError, ValueError):
    """Raised when a calendar date or instant cannot be parsed."""


class InvalidTimeError(SlotError, ValueError):
    """Raised when a wall-clock time is not a valid HH:MM string."""


class InvalidTimeRangeError(SlotError, ValueError):
    """Raised when an availability window does not end after it starts."""


class TimezoneError(SlotError):
    """Raised when an IANA timezone name cannot be resolved."""

    def __init__(self, timezone: object, reason: str = "") -> None:
        self.timezone = timezone
        message = f"Unknown or unsupported timezone: {timezone!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
