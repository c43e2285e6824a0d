from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from utils.dates import day_bounds, local_date, parse_datetime_local, to_local, to_utc

KOLKATA = ZoneInfo("Asia/Kolkata")


def test_to_utc_and_back():
    local = datetime(2024, 3, 1, 9, 0)
    utc = to_utc(local, KOLKATA)
    assert utc == datetime(2024, 3, 1, 3, 30)
    assert to_local(utc, KOLKATA) == local


def test_day_bounds_cover_the_local_day():
    start, end = day_bounds(date(2024, 3, 1), KOLKATA)
    assert start == datetime(2024, 2, 29, 18, 30)
    assert end == datetime(2024, 3, 1, 18, 30)


def test_local_date_can_differ_from_utc_date():
    assert local_date(datetime(2024, 3, 1, 20, 0), KOLKATA) == date(2024, 3, 2)


def test_parse_datetime_local_converts_to_utc():
    assert parse_datetime_local("2024-03-01T09:00", KOLKATA) == datetime(2024, 3, 1, 3, 30)
    assert parse_datetime_local("2024-03-01T09:00:30", ZoneInfo("UTC")) == datetime(2024, 3, 1, 9, 0, 30)
    with pytest.raises(ValueError):
        parse_datetime_local("yesterday", KOLKATA)


def test_app_timezone_is_used_by_default(app):
    app.config["TIMEZONE"] = "Asia/Kolkata"
    assert to_utc(datetime(2024, 3, 1, 9, 0)) == datetime(2024, 3, 1, 3, 30)
