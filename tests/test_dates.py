from datetime import datetime, timedelta, timezone

from app.utils.dates import (
    add_months,
    days_between,
    days_elapsed_in_month,
    format_month,
    month_bounds,
    next_month,
    parse_datetime,
    previous_month,
    total_days_in_month,
)
from app.utils.money import format_amount, format_currency, to_major_units, to_minor_units


def test_month_navigation():
    assert previous_month("2024-01") == "2023-12"
    assert previous_month("2024-10") == "2024-09"
    assert next_month("2024-12") == "2025-01"
    assert next_month("2024-09") == "2024-10"
    assert format_month(datetime(2024, 3, 17)) == "2024-03"


def test_month_bounds_cover_whole_month():
    start, end = month_bounds("2024-02")
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 2, 29, 23, 59, 59, 999999)


def test_day_counts():
    assert days_elapsed_in_month(datetime(2024, 4, 12)) == 12
    assert total_days_in_month(datetime(2023, 2, 5)) == 28
    assert days_between(datetime(2024, 1, 1), datetime(2024, 3, 1)) == 60


def test_parse_datetime_normalises_to_naive_utc():
    assert parse_datetime("2024-05-10T12:00:00Z") == datetime(2024, 5, 10, 12)
    assert parse_datetime("2024-05-10T12:00:00+02:00") == datetime(2024, 5, 10, 10)
    aware = datetime(2024, 5, 10, 12, tzinfo=timezone(timedelta(hours=-3)))
    assert parse_datetime(aware) == datetime(2024, 5, 10, 15)


def test_add_months_clamps_day():
    assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert add_months(datetime(2024, 11, 15, 8, 30), 3) == datetime(2025, 2, 15, 8, 30)
    assert add_months(datetime(2024, 3, 31), -1) == datetime(2024, 2, 29)


def test_money_conversions():
    assert to_minor_units("12.345") == 1235
    assert to_minor_units(19.99) == 1999
    assert to_major_units(1999) == 19.99
    assert format_amount(500) == "5.00"
    assert format_currency(123456) == "R$ 1234.56"
    assert format_currency(7, symbol="$") == "$ 0.07"
