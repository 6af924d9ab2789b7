"""
lessonslots - UTC time slots and timezone conversion for lesson booking.
"""

__version__ = "0.1.0"

from .domain.display import format_slot_for_display
from .domain.slot_codec import date_string_from_instant, slot_from_utc_instant, utc_instant_from_slot
from .domain.timezone_projector import local_to_utc_slot, utc_slot_to_local

__all__ = [
    "__version__",
    "date_string_from_instant",
    "format_slot_for_display",
    "local_to_utc_slot",
    "slot_from_utc_instant",
    "utc_instant_from_slot",
    "utc_slot_to_local",
]
