"""
Availability and booking-conflict checks on top of UTC slots.

Pure domain logic: every function works on explicit inputs, no I/O.
"""

import logging
from typing import Iterable, Protocol

from .exceptions import InvalidTimeRangeError, SlotError
from .models import AvailabilityRange, AvailabilityRecord, BookedSlot
from .slot_codec import CalendarDateInput
from .timezone_projector import TimezoneProjector

logger = logging.getLogger(__name__)


class WeeklyWindow(Protocol):
    """Anything carrying a weekday and a slot window."""

    day_of_week: int
    start_slot: int
    duration: int


class AvailabilityChecker:
    """
    Answers "can this lesson be booked?" questions.

    Student input and instructor availability are each projected to UTC
    for the booking date before they are compared, so both sides see the
    offsets in force on that day.
    """

    def __init__(self, projector: TimezoneProjector | None = None):
        self.projector = projector or TimezoneProjector()

    def is_booking_available(
        self,
        booking_time: str,
        booking_date: CalendarDateInput,
        student_timezone: str | None,
        record: AvailabilityRecord,
    ) -> bool:
        """
        Check a student's booking time against a weekly availability record.

        Both ends of the window are inclusive. When the instructor's window
        wraps past midnight UTC (end slot before start slot) the booking is
        accepted on either side of midnight. Conversion errors yield False.
        """
        try:
            booking_slot = self.projector.local_to_utc_slot(
                booking_time, booking_date, student_timezone
            )
            window_start = self.projector.local_to_utc_slot(
                record.local_start_time, booking_date, record.instructor_timezone
            )
            window_end = self.projector.local_to_utc_slot(
                record.local_end_time, booking_date, record.instructor_timezone
            )
        except SlotError as exc:
            logger.warning("Could not check booking availability: %s", exc)
            return False

        if window_end < window_start:
            return booking_slot >= window_start or booking_slot <= window_end

        return window_start <= booking_slot <= window_end

    def create_availability_range(
        self,
        start_time: str,
        end_time: str,
        date_string: CalendarDateInput,
        timezone: str | None,
    ) -> AvailabilityRange:
        """
        Project a local availability window on one day into UTC instants.

        Raises:
            InvalidTimeRangeError: If the window does not end after it starts
        """
        start_utc = self.projector.local_to_utc_instant(start_time, date_string, timezone)
        end_utc = self.projector.local_to_utc_instant(end_time, date_string, timezone)

        if start_utc >= end_utc:
            raise InvalidTimeRangeError(f"Invalid time range: {start_time} to {end_time}")

        return AvailabilityRange(start_utc=start_utc, end_utc=end_utc)

    def is_booking_within_availability(
        self,
        booking_time: str,
        booking_date: CalendarDateInput,
        student_timezone: str | None,
        availability: AvailabilityRange,
    ) -> bool:
        """Check a booking against a dated range (start inclusive, end exclusive)."""
        booking_utc = self.projector.local_to_utc_instant(
            booking_time, booking_date, student_timezone
        )
        return availability.contains(booking_utc)


def has_slot_conflict(
    start_slot: int,
    duration: int,
    booked: Iterable[BookedSlot],
) -> bool:
    """
    Check whether a new booking overlaps any existing one on the same day.

    Example: an existing 10:00-10:30 booking (slot 40, 2 slots) conflicts
    with a new 09:30-10:30 lesson (slot 38, 4 slots) but not with 11:00-12:00.
    """
    if duration <= 0:
        raise InvalidTimeRangeError(f"Duration must be positive, got {duration}")
    return any(existing.overlaps(start_slot, duration) for existing in booked)


def fits_weekly_availability(
    start_slot: int,
    duration: int,
    day_of_week: int,
    windows: Iterable[WeeklyWindow],
) -> bool:
    """
    Check that a booking lies entirely inside one window on ``day_of_week``.

    Slots and windows must share a reference frame (both UTC or both local).
    """
    end_slot = start_slot + duration

    for window in windows:
        if window.day_of_week != day_of_week:
            continue
        window_end = window.start_slot + window.duration
        if window.start_slot <= start_slot < window_end and end_slot <= window_end:
            return True

    return False
