"""Time utilities (IST by default)."""

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from app.config import settings


def market_tz() -> ZoneInfo:
    """Configured market timezone (TIMEZONE setting)."""
    return ZoneInfo(settings.TIMEZONE)


def today_local() -> date:
    """
    Current calendar date in the market timezone.

    Used as the default valuation date for open positions, so a request
    served shortly after midnight UTC still values holdings on the Indian
    trading date.
    """
    return datetime.now(market_tz()).date()


def as_date(value) -> date:
    """Normalize a date, datetime or ISO string to a plain date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Unsupported date value: {value!r}")


def resolve_valuation_date(valuation_date: Optional[date]) -> date:
    """Use the supplied valuation date, or today in the market timezone."""
    if valuation_date is None:
        return today_local()
    return as_date(valuation_date)
