"""
Domain models for slot availability and timezone conversion.
"""

from dataclasses import dataclass

from pendulum import DateTime

from .exceptions import InvalidTimeRangeError
from .slot_codec import (
    CalendarDateInput,
    date_string_from_instant,
    duration_in_slots,
    slot_from_utc_instant,
    time_string_to_slot,
    validate_slot,
)
from .timezone_projector import TimezoneProjector, UTC_NAME


@dataclass(frozen=True)
class LocalTimeInput:
    """
    A wall-clock time as entered by a user.

    Never stored; converted to a UTC slot straight away.
    """
    time: str  # HH:MM
    date: CalendarDateInput
    timezone: str | None = None

    def to_utc_instant(self, projector: TimezoneProjector | None = None) -> DateTime:
        return (projector or TimezoneProjector()).local_to_utc_instant(
            self.time, self.date, self.timezone
        )

    def to_utc_slot(self, projector: TimezoneProjector | None = None) -> int:
        """Convert to the canonical UTC slot."""
        return slot_from_utc_instant(self.to_utc_instant(projector))


@dataclass(frozen=True)
class BookedSlot:
    """
    An existing booking on a single UTC day.

    Invariant: start_slot is a valid slot and duration is positive.
    """
    start_slot: int
    duration: int  # number of 15-minute slots

    def __post_init__(self):
        validate_slot(self.start_slot)
        if self.duration <= 0:
            raise InvalidTimeRangeError(f"Duration must be positive, got {self.duration}")

    @property
    def end_slot(self) -> int:
        """Exclusive end slot."""
        return self.start_slot + self.duration

    def overlaps(self, start_slot: int, duration: int) -> bool:
        """Check if a booking of ``duration`` slots from ``start_slot`` collides."""
        return start_slot < self.end_slot and start_slot + duration > self.start_slot


@dataclass(frozen=True)
class AvailabilityRecord:
    """
    Weekly availability kept in the instructor's own timezone.

    Slots are local (no timezone correction), so a window never wraps
    midnight. Conversion to UTC happens per booking date.
    """
    day_of_week: int  # 0=Sunday, 6=Saturday
    start_slot: int
    duration: int
    instructor_timezone: str
    local_start_time: str
    local_end_time: str

    @property
    def end_slot(self) -> int:
        return self.start_slot + self.duration

    @classmethod
    def create(
        cls,
        start_time: str,
        end_time: str,
        day_of_week: int,
        instructor_timezone: str | None = None,
    ) -> "AvailabilityRecord":
        """
        Build a record from local ``HH:MM`` start and end times.

        Raises:
            InvalidTimeRangeError: If end is not after start or the weekday is out of range
        """
        if not 0 <= day_of_week <= 6:
            raise InvalidTimeRangeError(f"day_of_week must be between 0 and 6, got {day_of_week}")

        start_slot = time_string_to_slot(start_time)
        end_slot = time_string_to_slot(end_time)
        duration = end_slot - start_slot

        if duration <= 0:
            raise InvalidTimeRangeError(f"Invalid time range: {start_time} to {end_time}")

        return cls(
            day_of_week=day_of_week,
            start_slot=start_slot,
            duration=duration,
            instructor_timezone=instructor_timezone or UTC_NAME,
            local_start_time=start_time,
            local_end_time=end_time,
        )


@dataclass(frozen=True)
class AvailabilityRange:
    """
    A dated availability window projected into UTC.

    Keeps full instants so windows that cross midnight UTC are not folded
    back onto a single day.
    """
    start_utc: DateTime
    end_utc: DateTime

    def __post_init__(self):
        if self.start_utc >= self.end_utc:
            raise InvalidTimeRangeError(
                f"Start time {self.start_utc} must be before end time {self.end_utc}"
            )

    @property
    def start_date_utc(self) -> str:
        return date_string_from_instant(self.start_utc)

    @property
    def end_date_utc(self) -> str:
        return date_string_from_instant(self.end_utc)

    @property
    def start_slot(self) -> int:
        return slot_from_utc_instant(self.start_utc)

    @property
    def end_slot(self) -> int:
        return slot_from_utc_instant(self.end_utc)

    @property
    def same_day(self) -> bool:
        return self.start_date_utc == self.end_date_utc

    @property
    def crosses_day(self) -> bool:
        return not self.same_day

    @property
    def utc_duration(self) -> int:
        """Length of the window in 15-minute slots."""
        return duration_in_slots(self.start_utc, self.end_utc)

    def contains(self, instant: DateTime) -> bool:
        """Half-open membership test: start inclusive, end exclusive."""
        return self.start_utc <= instant < self.end_utc

    def __str__(self) -> str:
        return f"{self.start_utc.format('YYYY-MM-DD HH:mm')} - {self.end_utc.format('YYYY-MM-DD HH:mm')} UTC"
