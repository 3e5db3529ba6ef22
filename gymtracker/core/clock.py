"""UTC clock. Stored dates are UTC calendar days, timestamps are timezone-aware UTC."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()
