from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> str:
    """Validate a YYYY-MM month key and return it unchanged."""
    datetime.strptime(value, "%Y-%m")
    return value


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the office time zone, without tzinfo.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
