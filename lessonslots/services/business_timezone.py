"""
Business timezone resolution with caching.

The business operating timezone decides how dates and times are shown to
staff, independent of the host's own timezone. The service pulls the name
from a settings source, caches it for a short while, and falls back to UTC
when the source fails or returns an unusable name.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, Protocol

from pendulum import DateTime

from ..config import AppConfig
from ..domain.exceptions import TimezoneError
from ..domain.slot_codec import InstantInput, to_utc
from ..domain.timezone_projector import UTC_NAME, is_utc, resolve_timezone

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SECONDS = 300


class TimezoneSettingsProtocol(Protocol):
    """Protocol describing where the business timezone setting comes from."""

    def get_business_timezone(self) -> str | None:
        """Return the configured timezone name, or None when unset."""


class ConfigTimezoneSettings:
    """Settings source backed by the YAML application config."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config

    def get_business_timezone(self) -> str | None:
        return self._config.business_timezone


class BusinessTimezoneService:
    """
    Resolves and caches the business timezone.

    Dependency inversion toward a protocol lets tests plug in a stub source
    and a fake clock.
    """

    def __init__(
        self,
        settings_source: TimezoneSettingsProtocol,
        cache_seconds: float = DEFAULT_CACHE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings_source = settings_source
        self._cache_seconds = cache_seconds
        self._clock = clock
        self._cached_timezone: str | None = None
        self._cache_expiry = 0.0

    @classmethod
    def from_config(cls, config: AppConfig) -> "BusinessTimezoneService":
        """Build a service reading from the application config."""
        return cls(
            settings_source=ConfigTimezoneSettings(config),
            cache_seconds=config.timezone_cache_seconds,
        )

    def get_timezone(self) -> str:
        """Return the business timezone name, using the cache while it is fresh."""
        now = self._clock()

        if self._cached_timezone and now < self._cache_expiry:
            return self._cached_timezone

        try:
            timezone = self._settings_source.get_business_timezone()
        except Exception as exc:  # settings backends are arbitrary
            logger.error("Error getting business timezone: %s", exc)
            return UTC_NAME

        if is_utc(timezone):
            timezone = UTC_NAME
        else:
            try:
                resolve_timezone(timezone)  # type: ignore[arg-type]
            except TimezoneError as exc:
                logger.warning("Ignoring business timezone setting: %s", exc)
                timezone = UTC_NAME

        self._cached_timezone = timezone
        self._cache_expiry = now + self._cache_seconds
        return timezone  # type: ignore[return-value]

    def clear_cache(self) -> None:
        """Forget the cached name (call when business settings change)."""
        self._cached_timezone = None
        self._cache_expiry = 0.0

    def to_business_datetime(self, instant: InstantInput) -> DateTime:
        """Express an instant in the business timezone."""
        return to_utc(instant).in_timezone(self.get_timezone())

    def to_business_time_string(self, instant: InstantInput, fmt: str = "HH:mm") -> str:
        """Format an instant's wall-clock time in the business timezone."""
        return self.to_business_datetime(instant).format(fmt)

    def to_business_date_string(self, instant: InstantInput) -> str:
        """Calendar date (``YYYY-MM-DD``) of an instant in the business timezone."""
        return self.to_business_datetime(instant).format("YYYY-MM-DD")

    def convert_timezone(
        self,
        instant: datetime,
        to_timezone: str | None = None,
    ) -> DateTime:
        """
        Re-express ``instant`` in ``to_timezone`` (the business timezone by default).

        The instant itself is unchanged; only its wall-clock representation
        moves. Naive datetimes are read as UTC.

        Raises:
            TimezoneError: If ``to_timezone`` cannot be resolved
        """
        target = to_timezone or self.get_timezone()
        tz = UTC_NAME if is_utc(target) else resolve_timezone(target)
        return to_utc(instant).in_timezone(tz)
