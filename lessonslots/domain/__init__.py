"""
Domain layer - Pure slot and timezone logic without external I/O.
"""

from .availability import AvailabilityChecker, fits_weekly_availability, has_slot_conflict
from .display import format_hour, format_slot_for_display, generate_time_slots, to_12_hour
from .exceptions import (
    InvalidDateError,
    InvalidSlotError,
    InvalidTimeError,
    InvalidTimeRangeError,
    SlotError,
    TimezoneError,
)
from .models import AvailabilityRange, AvailabilityRecord, BookedSlot, LocalTimeInput
from .slot_codec import (
    MAX_SLOT,
    MIN_SLOT,
    SLOTS_PER_DAY,
    date_string_from_instant,
    slot_from_utc_instant,
    slot_to_time_string,
    time_string_to_slot,
    utc_instant_from_slot,
)
from .timezone_projector import (
    TimezonePolicy,
    TimezoneProjector,
    is_valid_timezone,
    local_to_utc_slot,
    utc_slot_to_local,
)

__all__ = [
    "AvailabilityChecker",
    "AvailabilityRange",
    "AvailabilityRecord",
    "BookedSlot",
    "InvalidDateError",
    "InvalidSlotError",
    "InvalidTimeError",
    "InvalidTimeRangeError",
    "LocalTimeInput",
    "MAX_SLOT",
    "MIN_SLOT",
    "SLOTS_PER_DAY",
    "SlotError",
    "TimezoneError",
    "TimezonePolicy",
    "TimezoneProjector",
    "date_string_from_instant",
    "fits_weekly_availability",
    "format_hour",
    "format_slot_for_display",
    "generate_time_slots",
    "has_slot_conflict",
    "is_valid_timezone",
    "local_to_utc_slot",
    "slot_from_utc_instant",
    "slot_to_time_string",
    "time_string_to_slot",
    "to_12_hour",
    "utc_instant_from_slot",
    "utc_slot_to_local",
]
