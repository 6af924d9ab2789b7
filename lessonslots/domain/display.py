"""
Display helpers for rendering slots and clock times.
"""

from typing import List

from .slot_codec import CalendarDateInput, parse_time_string
from .timezone_projector import TimezoneProjector, default_projector


def _period(hours: int) -> str:
    return "PM" if hours >= 12 else "AM"


def _twelve_hour(hours: int) -> int:
    return hours % 12 or 12


def to_12_hour(time_string: str) -> str:
    """
    Convert a 24-hour ``HH:MM`` string to ``H:MM AM/PM``.

    Example: "00:15" -> "12:15 AM", "13:30" -> "1:30 PM"
    """
    hours, minutes = parse_time_string(time_string)
    return f"{_twelve_hour(hours)}:{minutes:02d} {_period(hours)}"


def format_hour(hour: int) -> str:
    """Format a whole hour (0-23) as ``H:00 AM/PM``."""
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {hour}")
    return f"{_twelve_hour(hour)}:00 {_period(hour)}"


def generate_time_slots(
    start_hour: int = 7,
    end_hour: int = 19,
    interval_minutes: int = 30,
) -> List[str]:
    """
    List ``HH:MM`` times from ``start_hour`` up to and including ``end_hour:00``.

    Used to populate time pickers; ``interval_minutes`` must divide an hour.
    """
    if interval_minutes <= 0 or 60 % interval_minutes:
        raise ValueError(f"interval_minutes must divide 60, got {interval_minutes}")

    times: List[str] = []
    for hour in range(start_hour, end_hour + 1):
        for minute in range(0, 60, interval_minutes):
            if hour == end_hour and minute > 0:
                break
            times.append(f"{hour:02d}:{minute:02d}")
    return times


def format_slot_for_display(
    slot: int,
    date_string: CalendarDateInput,
    timezone: str | None,
    use_12_hour: bool = False,
    projector: TimezoneProjector | None = None,
) -> str:
    """
    Render a UTC slot as local clock time in ``timezone``.

    Args:
        slot: UTC slot (0-95)
        date_string: Day the slot belongs to, needed for the DST offset
        timezone: IANA timezone name, or None/"UTC"
        use_12_hour: Render as "9:00 AM" instead of "09:00"
        projector: Projector to use; defaults to the UTC-fallback policy

    Returns:
        Formatted time string
    """
    local_time = (projector or default_projector).utc_slot_to_local(
        slot, date_string, timezone
    )
    if use_12_hour:
        return to_12_hour(local_time)
    return local_time
