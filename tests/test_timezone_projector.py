"""
Tests for timezone projection between wall-clock times and UTC slots.
"""

import logging

import pendulum
import pytest

from lessonslots.domain.exceptions import InvalidDateError, InvalidSlotError, InvalidTimeError, TimezoneError
from lessonslots.domain.models import LocalTimeInput
from lessonslots.domain.timezone_projector import (
    TimezonePolicy,
    TimezoneProjector,
    is_valid_timezone,
    local_to_utc_instant,
    local_to_utc_slot,
    timezone_display_name,
    timezone_options,
    utc_instant_to_local_time,
    utc_slot_to_local,
)


class TestLocalToUtcSlot:
    """Tests for local_to_utc_slot."""

    def test_utc_passthrough(self):
        """Test that "UTC" and None both read the input as literal UTC."""
        assert local_to_utc_slot("09:00", "2025-06-15", "UTC") == 36
        assert local_to_utc_slot("09:00", "2025-06-15", None) == 36
        assert local_to_utc_slot("09:00", "2025-06-15", "") == 36

    def test_standard_time_offset(self):
        """Test New York in winter (EST, UTC-5)."""
        assert local_to_utc_slot("09:00", "2025-01-15", "America/New_York") == 56

    def test_daylight_saving_offset(self):
        """Test New York in summer (EDT, UTC-4)."""
        assert local_to_utc_slot("09:00", "2025-07-15", "America/New_York") == 52

    def test_offset_follows_calendar_date_across_transition(self):
        """Test the same wall clock either side of the March transition."""
        before = local_to_utc_slot("09:00", "2025-03-08", "America/New_York")
        after = local_to_utc_slot("09:00", "2025-03-10", "America/New_York")

        assert before == 56
        assert after == 52

    def test_half_hour_offset(self):
        """Test a zone with a non-whole-hour offset (IST, UTC+5:30)."""
        assert local_to_utc_slot("09:00", "2025-01-15", "Asia/Kolkata") == 14  # 03:30 UTC

    def test_wraps_into_utc_day(self):
        """Test that an evening in Los Angeles lands early in the UTC day."""
        assert local_to_utc_slot("20:00", "2025-01-15", "America/Los_Angeles") == 16  # 04:00 UTC

    def test_invalid_timezone_falls_back_to_utc(self, caplog):
        """Test that an unknown timezone does not raise and behaves like UTC."""
        with caplog.at_level(logging.WARNING):
            slot = local_to_utc_slot("09:00", "2025-06-15", "Not/AZone")

        assert slot == local_to_utc_slot("09:00", "2025-06-15", None)
        assert "Not/AZone" in caplog.text

    def test_malformed_time_raises(self):
        """Test that a malformed time is a validation error, not a fallback."""
        with pytest.raises(InvalidTimeError):
            local_to_utc_slot("9am", "2025-06-15", "America/New_York")

    def test_malformed_date_raises(self):
        """Test that a malformed date is a validation error."""
        with pytest.raises(InvalidDateError):
            local_to_utc_slot("09:00", "15/06/2025", "UTC")

    def test_over_long_timezone_name_falls_back_to_utc(self, caplog):
        """Test that a name too long for the tz database still falls back."""
        with caplog.at_level(logging.WARNING):
            slot = local_to_utc_slot("09:00", "2025-06-15", "A" * 300)

        assert slot == local_to_utc_slot("09:00", "2025-06-15", None)
        assert "interpreting time as UTC" in caplog.text

    def test_spring_forward_gap_shifts_forward(self):
        """Test a wall-clock time that does not exist on the transition day."""
        # 02:30 does not exist; it is read as 03:30 EDT, i.e. 07:30 UTC
        slot = local_to_utc_slot("02:30", "2025-03-09", "America/New_York")

        assert slot == 30

    def test_fall_back_ambiguity_takes_standard_time(self):
        """Test a wall-clock time that occurs twice on the transition day."""
        # 01:30 happens in EDT and again in EST; the later EST reading is 06:30 UTC
        slot = local_to_utc_slot("01:30", "2025-11-02", "America/New_York")

        assert slot == 26
        assert local_to_utc_instant("01:30", "2025-11-02", "America/New_York") == pendulum.datetime(
            2025, 11, 2, 6, 30, tz="UTC"
        )


class TestLocalToUtcInstant:
    """Tests for the day-preserving instant conversion."""

    def test_keeps_next_utc_day(self):
        """Test that the UTC date moves forward when crossing midnight."""
        instant = local_to_utc_instant("20:00", "2025-01-15", "America/Los_Angeles")

        assert instant == pendulum.datetime(2025, 1, 16, 4, 0, tz="UTC")

    def test_keeps_previous_utc_day(self):
        """Test that the UTC date moves back for zones ahead of UTC."""
        instant = local_to_utc_instant("08:00", "2025-01-15", "Asia/Tokyo")

        assert instant == pendulum.datetime(2025, 1, 14, 23, 0, tz="UTC")


class TestUtcSlotToLocal:
    """Tests for utc_slot_to_local."""

    def test_utc_passthrough(self):
        """Test rendering without a timezone."""
        assert utc_slot_to_local(36, "2025-01-15", None) == "09:00"
        assert utc_slot_to_local(36, "2025-01-15", "UTC") == "09:00"

    def test_renders_in_timezone(self):
        """Test rendering in winter and summer offsets."""
        assert utc_slot_to_local(56, "2025-01-15", "America/New_York") == "09:00"
        assert utc_slot_to_local(52, "2025-07-15", "America/New_York") == "09:00"

    def test_invalid_timezone_falls_back_to_utc(self):
        """Test that an unknown timezone returns the raw UTC clock time."""
        assert utc_slot_to_local(42, "2025-01-15", "Mars/Olympus_Mons") == "10:30"

    def test_invalid_slot_raises(self):
        """Test that slot validation is not swallowed by the fallback."""
        with pytest.raises(InvalidSlotError):
            utc_slot_to_local(96, "2025-01-15", "America/New_York")

    @pytest.mark.parametrize("timezone", [None, "UTC", "America/New_York"])
    def test_malformed_date_raises_for_every_timezone(self, timezone):
        """Test that the UTC shortcut still validates the date."""
        with pytest.raises(InvalidDateError):
            utc_slot_to_local(36, "not-a-date", timezone)

        with pytest.raises(InvalidDateError):
            utc_slot_to_local(36, "2025-02-30", timezone)

    @pytest.mark.parametrize(
        "time_string, timezone",
        [
            ("09:00", "America/New_York"),
            ("17:45", "Europe/Berlin"),
            ("06:15", "Australia/Sydney"),
            ("22:30", "America/Los_Angeles"),
            ("11:45", "Asia/Kathmandu"),
        ],
    )
    def test_inverse_consistency(self, time_string, timezone):
        """Test that converting there and back returns the original time."""
        slot = local_to_utc_slot(time_string, "2025-05-20", timezone)

        assert utc_slot_to_local(slot, "2025-05-20", timezone) == time_string

    def test_instant_to_local_time(self):
        """Test rendering a full instant."""
        instant = pendulum.datetime(2025, 1, 16, 4, 0, tz="UTC")

        assert utc_instant_to_local_time(instant, "America/Los_Angeles") == "20:00"
        assert utc_instant_to_local_time(instant, None) == "04:00"


class TestTimezonePolicy:
    """Tests for strict versus fallback timezone handling."""

    def test_strict_policy_raises(self):
        """Test that the strict policy surfaces unknown timezones."""
        projector = TimezoneProjector(policy=TimezonePolicy.STRICT)

        with pytest.raises(TimezoneError, match="Not/AZone"):
            projector.local_to_utc_slot("09:00", "2025-06-15", "Not/AZone")

        with pytest.raises(TimezoneError):
            projector.utc_slot_to_local(36, "2025-06-15", "Not/AZone")

    def test_strict_policy_raises_for_over_long_name(self):
        """Test that tz database lookup failures surface as TimezoneError."""
        projector = TimezoneProjector(policy=TimezonePolicy.STRICT)

        with pytest.raises(TimezoneError):
            projector.local_to_utc_slot("09:00", "2025-06-15", "A" * 300)

    def test_non_string_timezone_message(self):
        """Test that a non-string timezone is quoted once in the error."""
        projector = TimezoneProjector(policy=TimezonePolicy.STRICT)

        with pytest.raises(TimezoneError) as excinfo:
            projector.local_to_utc_slot("09:00", "2025-06-15", 5)

        assert excinfo.value.timezone == 5
        assert str(excinfo.value) == "Unknown or unsupported timezone: 5 (timezone must be a string)"

    def test_strict_policy_converts_valid_timezones(self):
        """Test that the strict policy behaves normally for known zones."""
        projector = TimezoneProjector(policy="strict")

        assert projector.local_to_utc_slot("09:00", "2025-01-15", "America/New_York") == 56

    def test_default_policy_is_fallback(self):
        """Test the default policy."""
        assert TimezoneProjector().policy is TimezonePolicy.UTC_FALLBACK


class TestTimezoneCatalogue:
    """Tests for timezone validation and labels."""

    def test_is_valid_timezone(self):
        """Test known and unknown names."""
        assert is_valid_timezone("Europe/Paris")
        assert is_valid_timezone("UTC")
        assert is_valid_timezone(None)
        assert not is_valid_timezone("Europe/Atlantis")
        assert not is_valid_timezone("A" * 300)

    def test_display_name_uses_abbreviation_for_date(self):
        """Test that the abbreviation follows DST."""
        winter = pendulum.datetime(2025, 1, 15, 12, 0, tz="UTC")
        summer = pendulum.datetime(2025, 7, 15, 12, 0, tz="UTC")

        assert timezone_display_name("America/New_York", at=winter) == "America/New_York (EST)"
        assert timezone_display_name("America/New_York", at=summer) == "America/New_York (EDT)"

    def test_display_name_for_utc_and_unknown(self):
        """Test the UTC label and unknown-name passthrough."""
        assert timezone_display_name("UTC") == "UTC (Coordinated Universal Time)"
        assert timezone_display_name("Europe/Atlantis") == "Europe/Atlantis"

    def test_timezone_options(self):
        """Test picker entries for a custom list."""
        options = timezone_options(["UTC", "Europe/London"], at=pendulum.datetime(2025, 1, 15, tz="UTC"))

        assert options == [
            {"value": "UTC", "label": "UTC (Coordinated Universal Time)"},
            {"value": "Europe/London", "label": "Europe/London (GMT)"},
        ]


class TestLocalTimeInput:
    """Tests for the LocalTimeInput value object."""

    def test_to_utc_slot(self):
        """Test conversion through the value object."""
        entry = LocalTimeInput(time="09:00", date="2025-07-15", timezone="America/New_York")

        assert entry.to_utc_slot() == 52

    def test_to_utc_instant_with_strict_projector(self):
        """Test that a caller-supplied projector is used."""
        entry = LocalTimeInput(time="09:00", date="2025-07-15", timezone="Bad/Zone")

        with pytest.raises(TimezoneError):
            entry.to_utc_instant(TimezoneProjector(policy=TimezonePolicy.STRICT))

    def test_is_immutable(self):
        """Test that the value object is frozen."""
        entry = LocalTimeInput(time="09:00", date="2025-07-15")

        with pytest.raises(AttributeError):
            entry.time = "10:00"
