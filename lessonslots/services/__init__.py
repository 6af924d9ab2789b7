"""
Service layer helpers that combine settings sources with domain logic.
"""

from .booking import BookingDecision, BookingRequest, BookingService, ScheduleSourceProtocol
from .business_timezone import (
    BusinessTimezoneService,
    ConfigTimezoneSettings,
    TimezoneSettingsProtocol,
)

__all__ = [
    "BookingDecision",
    "BookingRequest",
    "BookingService",
    "BusinessTimezoneService",
    "ConfigTimezoneSettings",
    "ScheduleSourceProtocol",
    "TimezoneSettingsProtocol",
]
