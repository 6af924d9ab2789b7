"""
Conversion between UTC instants and 15-minute slot indices.

A slot is one of the 96 quarter hours of a UTC calendar day: slot 0 is
00:00 UTC and slot 95 is 23:45 UTC. Everything in this module works on UTC
fields only, so results never depend on the host's local timezone.
"""

import re
from datetime import date, datetime

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidDateError, InvalidSlotError, InvalidTimeError

SLOT_MINUTES = 15
SLOTS_PER_HOUR = 60 // SLOT_MINUTES
SLOTS_PER_DAY = 24 * SLOTS_PER_HOUR
MIN_SLOT = 0
MAX_SLOT = SLOTS_PER_DAY - 1

_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

CalendarDateInput = str | date
InstantInput = str | datetime


def is_valid_slot(slot: object) -> bool:
    """Return True if ``slot`` is an integer in the 0-95 range."""
    if isinstance(slot, bool) or not isinstance(slot, int):
        return False
    return MIN_SLOT <= slot <= MAX_SLOT


def validate_slot(slot: object) -> int:
    """Return ``slot`` unchanged or raise InvalidSlotError."""
    if not is_valid_slot(slot):
        raise InvalidSlotError(
            f"Invalid slot number: {slot!r}. Must be between {MIN_SLOT} and {MAX_SLOT}."
        )
    return slot  # type: ignore[return-value]


def parse_date_string(value: CalendarDateInput) -> Date:
    """
    Normalize a calendar date to a pendulum Date.

    Args:
        value: ``YYYY-MM-DD`` string, ``datetime.date`` or an aware/naive
            datetime (the UTC calendar day of the instant is used)

    Returns:
        pendulum Date

    Raises:
        InvalidDateError: If the value is not a real calendar date
    """
    if isinstance(value, datetime):
        utc = to_utc(value)
        return pendulum.date(utc.year, utc.month, utc.day)

    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)

    if not isinstance(value, str):
        raise InvalidDateError(f"Expected a YYYY-MM-DD date, got {value!r}")

    match = _DATE_PATTERN.match(value.strip())
    if not match:
        raise InvalidDateError(f"Invalid date string: {value!r}. Expected YYYY-MM-DD.")

    year, month, day = (int(part) for part in match.groups())
    try:
        return pendulum.date(year, month, day)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date string: {value!r}: {exc}") from exc


def is_valid_date_string(value: object) -> bool:
    """Check that ``value`` is a ``YYYY-MM-DD`` string naming a real date."""
    if not isinstance(value, str):
        return False
    try:
        parse_date_string(value)
    except InvalidDateError:
        return False
    return True


def parse_time_string(value: str) -> tuple[int, int]:
    """
    Split an ``HH:MM`` (or ``HH:MM:SS``) wall-clock string into hours and minutes.

    Seconds, when present, are validated and then dropped.

    Raises:
        InvalidTimeError: If the string is malformed or out of range
    """
    if not isinstance(value, str):
        raise InvalidTimeError(f"Expected an HH:MM time, got {value!r}")

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise InvalidTimeError(f"Invalid time string: {value!r}. Expected HH:MM.")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    seconds = int(match.group(3) or 0)

    if not (0 <= hours <= 23 and 0 <= minutes <= 59 and 0 <= seconds <= 59):
        raise InvalidTimeError(f"Time out of range: {value!r}")

    return hours, minutes


def to_utc(instant: InstantInput) -> DateTime:
    """
    Convert an instant to a pendulum DateTime in UTC.

    Naive datetimes and ISO strings without an offset are read as UTC.

    Raises:
        InvalidDateError: If the instant cannot be interpreted
    """
    if isinstance(instant, str):
        try:
            parsed = pendulum.parse(instant, tz="UTC")
        except ValueError as exc:
            raise InvalidDateError(f"Invalid instant: {instant!r}") from exc
        if not isinstance(parsed, DateTime):
            raise InvalidDateError(f"Invalid instant: {instant!r}")
        instant = parsed

    if not isinstance(instant, datetime):
        raise InvalidDateError(f"Invalid instant: {instant!r}")

    return pendulum.instance(instant, tz="UTC").in_timezone("UTC")


def slot_from_utc_instant(instant: InstantInput) -> int:
    """
    Return the slot containing the instant's UTC time-of-day.

    Sub-slot precision is truncated: 09:14:59 UTC is slot 36 (09:00).
    """
    utc = to_utc(instant)
    return utc.hour * SLOTS_PER_HOUR + utc.minute // SLOT_MINUTES


def utc_instant_from_slot(calendar_date: CalendarDateInput, slot: int) -> DateTime:
    """
    Build the UTC instant at which ``slot`` starts on ``calendar_date``.

    Raises:
        InvalidSlotError: If slot is not an integer between 0 and 95
        InvalidDateError: If the date is malformed
    """
    validate_slot(slot)
    day = parse_date_string(calendar_date)
    hours, quarter = divmod(slot, SLOTS_PER_HOUR)

    return pendulum.datetime(
        day.year, day.month, day.day, hours, quarter * SLOT_MINUTES, tz="UTC"
    )


def date_string_from_instant(instant: InstantInput) -> str:
    """Format the UTC calendar day of ``instant`` as ``YYYY-MM-DD``."""
    return to_utc(instant).format("YYYY-MM-DD")


def slot_to_time_string(slot: int) -> str:
    """Return the ``HH:MM`` UTC clock time at which a slot starts."""
    validate_slot(slot)
    hours, quarter = divmod(slot, SLOTS_PER_HOUR)
    return f"{hours:02d}:{quarter * SLOT_MINUTES:02d}"


def time_string_to_slot(value: str) -> int:
    """
    Map an ``HH:MM`` clock time to a slot of the same day, without any
    timezone correction.
    """
    hours, minutes = parse_time_string(value)
    return hours * SLOTS_PER_HOUR + minutes // SLOT_MINUTES


def duration_in_slots(start: InstantInput, end: InstantInput) -> int:
    """Number of whole 15-minute slots between two instants (floored)."""
    elapsed = to_utc(end) - to_utc(start)
    return int(elapsed.total_seconds() // (SLOT_MINUTES * 60))


def day_of_week_utc(instant: InstantInput) -> int:
    """Day of week of the instant in UTC, 0 = Sunday ... 6 = Saturday."""
    return to_utc(instant).isoweekday() % 7


def current_date_utc() -> str:
    """Today's UTC date as ``YYYY-MM-DD``."""
    return date_string_from_instant(pendulum.now("UTC"))


def is_past_time_slot(
    slot: int,
    calendar_date: CalendarDateInput,
    now: datetime | None = None,
) -> bool:
    """Check whether the slot on the given day starts before ``now``."""
    reference = to_utc(now) if now is not None else pendulum.now("UTC")
    return utc_instant_from_slot(calendar_date, slot) < reference
