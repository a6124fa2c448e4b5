"""Kyiv calendar-day boundaries.

A prediction belongs to the Kyiv calendar day in which it was created. The
day starts at local midnight, whose UTC offset depends on the season, so the
offset is always looked up in the tz database for that midnight.
"""

from datetime import date, datetime, time

import pytz

KYIV_TIMEZONE = "Europe/Kyiv"
KYIV_TZ = pytz.timezone(KYIV_TIMEZONE)


def as_utc(now: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken as UTC."""
    if now.tzinfo is None:
        return pytz.utc.localize(now)
    return now.astimezone(pytz.utc)


def kyiv_day(now: datetime) -> date:
    """Kyiv calendar date of the given instant."""
    return as_utc(now).astimezone(KYIV_TZ).date()


def start_of_kyiv_day(now: datetime) -> datetime:
    """Return the instant of Kyiv midnight that opened the day containing `now`.

    Args:
        now (datetime): Current instant, aware or naive UTC

    Returns:
        datetime: Aware UTC datetime of that day's local midnight
    """
    local_midnight = KYIV_TZ.localize(datetime.combine(kyiv_day(now), time.min))
    return local_midnight.astimezone(pytz.utc)


def kyiv_now_label(now: datetime) -> str:
    """Human readable Kyiv wall-clock time, used in scheduler logs and status."""
    return as_utc(now).astimezone(KYIV_TZ).strftime("%d.%m.%Y, %H:%M:%S")
