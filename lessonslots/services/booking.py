"""
Booking validation service.

Turns a requested lesson (start and end instants) into a UTC day, start
slot and duration, then checks it against the instructor's weekly
availability and existing bookings. Storage is reached through a small
protocol so tests and callers can supply their own schedule source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence

from ..domain.availability import WeeklyWindow, fits_weekly_availability, has_slot_conflict
from ..domain.exceptions import InvalidTimeRangeError
from ..domain.models import BookedSlot
from ..domain.slot_codec import (
    SLOTS_PER_DAY,
    CalendarDateInput,
    InstantInput,
    date_string_from_instant,
    day_of_week_utc,
    slot_from_utc_instant,
    to_utc,
    utc_instant_from_slot,
)

logger = logging.getLogger(__name__)

OUTSIDE_AVAILABILITY = "Selected time is outside instructor's availability"
ALREADY_BOOKED = "Time slot is already booked"


class ScheduleSourceProtocol(Protocol):
    """Protocol describing the schedule data needed to validate a booking."""

    def get_weekly_availability(self, instructor_id: str) -> Sequence[WeeklyWindow]:
        """Return weekly windows in UTC slots."""

    def get_booked_slots(self, instructor_id: str, date_string: str) -> Sequence[BookedSlot]:
        """Return active bookings on the given UTC day."""


@dataclass(frozen=True)
class BookingRequest:
    """A lesson request expressed as UTC slots on one UTC day."""
    date: str
    day_of_week: int  # 0=Sunday, 6=Saturday
    start_slot: int
    duration: int

    @property
    def end_slot(self) -> int:
        return self.start_slot + self.duration

    @classmethod
    def from_instants(cls, start: InstantInput, end: InstantInput) -> "BookingRequest":
        """
        Build a request from start and end instants.

        Raises:
            InvalidTimeRangeError: If the lesson is shorter than one slot or
                does not end on the UTC day it starts
        """
        start_utc = to_utc(start)
        end_utc = to_utc(end)
        start_slot = slot_from_utc_instant(start_utc)
        end_slot = slot_from_utc_instant(end_utc)

        if end_utc <= start_utc:
            raise InvalidTimeRangeError(f"Lesson must end after it starts: {start} to {end}")

        if date_string_from_instant(end_utc) != date_string_from_instant(start_utc):
            # a lesson ending exactly at midnight still belongs to its start day
            if end_utc != start_utc.add(days=1).start_of("day"):
                raise InvalidTimeRangeError(f"Lesson crosses midnight UTC: {start} to {end}")
            end_slot = SLOTS_PER_DAY

        duration = end_slot - start_slot
        if duration <= 0:
            raise InvalidTimeRangeError(f"Lesson is shorter than one slot: {start} to {end}")

        return cls(
            date=date_string_from_instant(start_utc),
            day_of_week=day_of_week_utc(start_utc),
            start_slot=start_slot,
            duration=duration,
        )


@dataclass(frozen=True)
class BookingDecision:
    """Outcome of a booking validation."""
    request: BookingRequest
    rejection_reason: str | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection_reason is None


class BookingService:
    """Validates lesson requests against availability and existing bookings."""

    def __init__(self, schedule_source: ScheduleSourceProtocol) -> None:
        self._schedule_source = schedule_source

    def validate(
        self,
        *,
        instructor_id: str,
        start: InstantInput,
        end: InstantInput,
    ) -> BookingDecision:
        """
        Check whether a lesson can be booked.

        Raises:
            InvalidTimeRangeError: If the requested times are malformed
        """
        request = BookingRequest.from_instants(start, end)

        windows = self._schedule_source.get_weekly_availability(instructor_id)
        if not fits_weekly_availability(
            request.start_slot, request.duration, request.day_of_week, windows
        ):
            logger.info(
                "Rejected booking for %s on %s slot %s: outside availability",
                instructor_id, request.date, request.start_slot,
            )
            return BookingDecision(request=request, rejection_reason=OUTSIDE_AVAILABILITY)

        booked = self._schedule_source.get_booked_slots(instructor_id, request.date)
        if has_slot_conflict(request.start_slot, request.duration, booked):
            logger.info(
                "Rejected booking for %s on %s slot %s: conflict",
                instructor_id, request.date, request.start_slot,
            )
            return BookingDecision(request=request, rejection_reason=ALREADY_BOOKED)

        return BookingDecision(request=request)

    def free_start_slots(
        self,
        *,
        instructor_id: str,
        date_string: CalendarDateInput,
        duration: int,
    ) -> List[int]:
        """
        List every UTC start slot on ``date_string`` where a lesson of
        ``duration`` slots fits availability and collides with no booking.

        Raises:
            InvalidDateError: If ``date_string`` is not a strict YYYY-MM-DD date
        """
        if duration <= 0:
            raise InvalidTimeRangeError(f"Duration must be positive, got {duration}")

        midnight = utc_instant_from_slot(date_string, 0)
        date_key = date_string_from_instant(midnight)
        day_of_week = day_of_week_utc(midnight)
        windows = [
            window
            for window in self._schedule_source.get_weekly_availability(instructor_id)
            if window.day_of_week == day_of_week
        ]
        booked = self._schedule_source.get_booked_slots(instructor_id, date_key)

        return [
            slot
            for slot in range(0, SLOTS_PER_DAY - duration + 1)
            if fits_weekly_availability(slot, duration, day_of_week, windows)
            and not has_slot_conflict(slot, duration, booked)
        ]
