"""
Facility clock.

Storage is UTC. Business dates ("is this shift in the future?", "which month
is current?") are decided in the single facility timezone configured in
settings.WARDROSTER["FACILITY_TIMEZONE"], never in the server's local time.
"""

from datetime import date
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone


def facility_zone() -> ZoneInfo:
    return ZoneInfo(settings.WARDROSTER["FACILITY_TIMEZONE"])


def facility_today() -> date:
    """Return today's date in the facility timezone."""
    return timezone.localdate(timezone=facility_zone())
