"""
Date helpers.

Everything is stored as naive UTC (that is what MongoDB hands back). Form
input and page output use the school's wall clock, the ``TIMEZONE`` setting.
"""
from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def app_timezone():
    name = current_app.config.get("TIMEZONE", "UTC") if has_app_context() else "UTC"
    return ZoneInfo(name or "UTC")


def to_utc(value, tz=None):
    """Naive local wall-clock time -> naive UTC."""
    tz = tz or app_timezone()
    return value.replace(tzinfo=tz).astimezone(timezone.utc).replace(tzinfo=None)


def to_local(value, tz=None):
    """Naive UTC -> naive local wall-clock time."""
    if value is None:
        return None
    tz = tz or app_timezone()
    return value.replace(tzinfo=timezone.utc).astimezone(tz).replace(tzinfo=None)


def local_date(now=None, tz=None):
    """The local calendar date at ``now`` (naive UTC)."""
    return to_local(now or utcnow(), tz).date()


def day_bounds(day, tz=None):
    """UTC start (inclusive) and end (exclusive) of a local calendar date."""
    start = datetime.combine(day, time.min)
    return to_utc(start, tz), to_utc(start + timedelta(days=1), tz)


def parse_date(value):
    """Parse ``YYYY-MM-DD`` from a form field."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_datetime_local(value, tz=None):
    """Parse an HTML ``datetime-local`` input (local wall clock) into naive UTC."""
    for fmt in ("%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"):
        try:
            return to_utc(datetime.strptime(value, fmt), tz)
        except ValueError:
            continue
    raise ValueError(f"Bad datetime: {value}")
