"""Date and time utility functions"""
import math
from datetime import datetime, date, time, tzinfo
from decimal import Decimal
from typing import Optional, Union
import pytz

SECONDS_PER_DAY = 24 * 60 * 60


def get_now(timezone_name: str = "UTC") -> datetime:
    """Get current datetime in the given timezone"""
    return datetime.now(pytz.timezone(timezone_name))


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC"""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value


def start_of_day(day: date, tz: Optional[tzinfo]) -> datetime:
    """Midnight of the given day in the given timezone"""
    naive = datetime.combine(day, time.min)
    if tz is None:
        return pytz.UTC.localize(naive)
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def days_until(day: date, now: datetime) -> int:
    """
    Whole days from now until the start of the given day, rounded up.

    Zero or negative means the day is today or already past.
    """
    now = ensure_aware(now)
    delta = start_of_day(day, now.tzinfo) - now
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def format_duration(seconds: int) -> str:
    """Format a call duration as m:ss"""
    seconds = max(int(seconds or 0), 0)
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}:{remaining:02d}"


def format_time_ago(value: datetime, now: datetime) -> str:
    """Relative label such as 'Just now', '5h ago' or '3d ago'"""
    diff_hours = math.floor(
        (ensure_aware(now) - ensure_aware(value)).total_seconds() / 3600
    )
    if diff_hours < 1:
        return "Just now"
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    return f"{diff_hours // 24}d ago"


def format_currency(amount: Union[Decimal, float, int, str], currency: str = "USD") -> str:
    """Format an amount for display, e.g. $12,500.00"""
    value = Decimal(str(amount or 0))
    symbol = "$" if currency.upper() == "USD" else f"{currency.upper()} "
    return f"{symbol}{value:,.2f}"
