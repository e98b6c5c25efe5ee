"""
Calendar helpers shared by the routers, the analytics engine and the
recurring-transactions job. Months are always ``YYYY-MM`` strings.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple, Union


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value: Union[str, datetime, date]) -> datetime:
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def format_month(value: Optional[date] = None) -> str:
    value = value or datetime.utcnow()
    return f"{value.year:04d}-{value.month:02d}"


def _split_month(month: str) -> Tuple[int, int]:
    year, mon = month.split("-")
    return int(year), int(mon)


def previous_month(month: str) -> str:
    year, mon = _split_month(month)
    if mon == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{mon - 1:02d}"


def next_month(month: str) -> str:
    year, mon = _split_month(month)
    if mon == 12:
        return f"{year + 1:04d}-01"
    return f"{year:04d}-{mon + 1:02d}"


def first_day_of_month(value: Optional[date] = None) -> datetime:
    value = value or datetime.utcnow()
    return datetime(value.year, value.month, 1)


def last_day_of_month(value: Optional[date] = None) -> datetime:
    value = value or datetime.utcnow()
    return datetime(value.year, value.month, calendar.monthrange(value.year, value.month)[1])


def end_of_month(value: Optional[date] = None) -> datetime:
    """Last representable instant of the month."""
    return datetime.combine(last_day_of_month(value).date(), time.max)


def month_bounds(month: str) -> Tuple[datetime, datetime]:
    """Inclusive ``(start, end)`` datetimes covering a ``YYYY-MM`` month."""
    year, mon = _split_month(month)
    start = datetime(year, mon, 1)
    return start, end_of_month(start)


def days_elapsed_in_month(value: Optional[date] = None) -> int:
    value = value or datetime.utcnow()
    return value.day


def total_days_in_month(value: Optional[date] = None) -> int:
    value = value or datetime.utcnow()
    return calendar.monthrange(value.year, value.month)[1]


def days_between(start: datetime, end: datetime) -> int:
    return (end - start).days


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    index = value.year * 12 + (value.month - 1) + months
    year, mon = divmod(index, 12)
    mon += 1
    day = min(value.day, calendar.monthrange(year, mon)[1])
    return value.replace(year=year, month=mon, day=day)
