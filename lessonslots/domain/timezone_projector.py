"""
Projection of wall-clock times between IANA timezones and UTC slots.

Offsets are always taken from the timezone database for the specific
calendar date being converted, so daylight-saving shifts are honoured.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List

import pendulum
from pendulum import DateTime

from .exceptions import TimezoneError
from .slot_codec import (
    CalendarDateInput,
    InstantInput,
    parse_date_string,
    parse_time_string,
    slot_from_utc_instant,
    slot_to_time_string,
    to_utc,
    utc_instant_from_slot,
    validate_slot,
)

logger = logging.getLogger(__name__)

UTC_NAME = "UTC"

COMMON_TIMEZONES: List[str] = [
    "UTC",
    "America/New_York",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "America/Toronto",
    "America/Vancouver",
    "Europe/London",
    "Europe/Paris",
    "Europe/Berlin",
    "Europe/Rome",
    "Europe/Madrid",
    "Asia/Tokyo",
    "Asia/Shanghai",
    "Asia/Kolkata",
    "Australia/Sydney",
    "Australia/Melbourne",
    "Pacific/Auckland",
]


class TimezonePolicy(str, Enum):
    """What to do when a timezone name cannot be resolved."""

    UTC_FALLBACK = "utc_fallback"
    STRICT = "strict"


def is_utc(timezone: str | None) -> bool:
    """True for the sentinels meaning "no offset": None, empty or ``UTC``."""
    if not timezone:
        return True
    return isinstance(timezone, str) and timezone.upper() == UTC_NAME


def resolve_timezone(timezone: str):
    """
    Look up an IANA timezone in pendulum's timezone database.

    Raises:
        TimezoneError: If the name is unknown or not a string
    """
    if not isinstance(timezone, str):
        raise TimezoneError(timezone, "timezone must be a string")
    try:
        return pendulum.timezone(timezone)
    except (ValueError, KeyError, OSError) as exc:
        # Malformed keys surface as ValueError, over-long ones as OSError from the tzdata lookup
        raise TimezoneError(timezone, str(exc)) from exc


def is_valid_timezone(timezone: str | None) -> bool:
    """Check whether ``timezone`` names a zone in the timezone database."""
    if is_utc(timezone):
        return True
    try:
        resolve_timezone(timezone)  # type: ignore[arg-type]
    except TimezoneError:
        return False
    return True


def timezone_display_name(timezone: str | None, at: datetime | None = None) -> str:
    """
    Human-readable label such as ``America/New_York (EST)``.

    The abbreviation is the one in force at ``at`` (defaults to now).
    Unknown names are returned unchanged.
    """
    if is_utc(timezone):
        return "UTC (Coordinated Universal Time)"

    try:
        tz = resolve_timezone(timezone)  # type: ignore[arg-type]
    except TimezoneError as exc:
        logger.warning("Could not build display name: %s", exc)
        return str(timezone)

    moment = to_utc(at) if at is not None else pendulum.now(UTC_NAME)
    abbreviation = moment.in_timezone(tz).tzname() or timezone
    return f"{timezone} ({abbreviation})"


def timezone_options(
    timezones: List[str] | None = None,
    at: datetime | None = None,
) -> List[Dict[str, str]]:
    """Return ``{"value", "label"}`` pairs for a timezone picker."""
    return [
        {"value": name, "label": timezone_display_name(name, at=at)}
        for name in (timezones or COMMON_TIMEZONES)
    ]


class TimezoneProjector:
    """
    Converts between local wall-clock times and UTC slots.

    With ``TimezonePolicy.UTC_FALLBACK`` an unresolvable timezone is logged and
    the input is read as UTC. ``TimezonePolicy.STRICT`` raises TimezoneError
    instead. Malformed slots, dates and times raise under either policy.
    """

    def __init__(self, policy: TimezonePolicy = TimezonePolicy.UTC_FALLBACK):
        self.policy = TimezonePolicy(policy)

    def local_to_utc_instant(
        self,
        time_string: str,
        date_string: CalendarDateInput,
        timezone: str | None,
    ) -> DateTime:
        """
        Return the UTC instant for a wall-clock time on a given day.

        Unlike the slot form, the result keeps its calendar day, so
        ``20:00`` in Los Angeles comes back as the next UTC day.
        """
        hours, minutes = parse_time_string(time_string)
        day = parse_date_string(date_string)

        if not is_utc(timezone):
            try:
                tz = resolve_timezone(timezone)  # type: ignore[arg-type]
            except TimezoneError as exc:
                self._handle_timezone_failure(exc)
            else:
                # Gap times shift forward; ambiguous times take the later (standard) offset
                local = pendulum.datetime(
                    day.year, day.month, day.day, hours, minutes, tz=tz, fold=1
                )
                return local.in_timezone(UTC_NAME)

        return pendulum.datetime(day.year, day.month, day.day, hours, minutes, tz=UTC_NAME)

    def local_to_utc_slot(
        self,
        time_string: str,
        date_string: CalendarDateInput,
        timezone: str | None,
    ) -> int:
        """Convert a local ``HH:MM`` on ``date_string`` in ``timezone`` to a UTC slot."""
        instant = self.local_to_utc_instant(time_string, date_string, timezone)
        return slot_from_utc_instant(instant)

    def utc_instant_to_local_time(
        self,
        instant: InstantInput,
        timezone: str | None,
    ) -> str:
        """Render an instant as ``HH:MM`` in the given timezone."""
        utc = to_utc(instant)

        if not is_utc(timezone):
            try:
                tz = resolve_timezone(timezone)  # type: ignore[arg-type]
            except TimezoneError as exc:
                self._handle_timezone_failure(exc)
            else:
                return utc.in_timezone(tz).format("HH:mm")

        return utc.format("HH:mm")

    def utc_slot_to_local(
        self,
        slot: int,
        date_string: CalendarDateInput,
        timezone: str | None,
    ) -> str:
        """Render a UTC slot on ``date_string`` as ``HH:MM`` in ``timezone``."""
        validate_slot(slot)
        day = parse_date_string(date_string)
        if is_utc(timezone):
            return slot_to_time_string(slot)

        instant = utc_instant_from_slot(day, slot)
        return self.utc_instant_to_local_time(instant, timezone)

    def _handle_timezone_failure(self, error: TimezoneError) -> None:
        if self.policy is TimezonePolicy.STRICT:
            raise error
        logger.warning("%s; interpreting time as UTC", error)


default_projector = TimezoneProjector()


def local_to_utc_slot(
    time_string: str,
    date_string: CalendarDateInput,
    timezone: str | None,
) -> int:
    """Module-level shortcut using the UTC-fallback policy."""
    return default_projector.local_to_utc_slot(time_string, date_string, timezone)


def local_to_utc_instant(
    time_string: str,
    date_string: CalendarDateInput,
    timezone: str | None,
) -> DateTime:
    return default_projector.local_to_utc_instant(time_string, date_string, timezone)


def utc_slot_to_local(
    slot: int,
    date_string: CalendarDateInput,
    timezone: str | None,
) -> str:
    """Module-level shortcut using the UTC-fallback policy."""
    return default_projector.utc_slot_to_local(slot, date_string, timezone)


def utc_instant_to_local_time(instant: InstantInput, timezone: str | None) -> str:
    return default_projector.utc_instant_to_local_time(instant, timezone)
