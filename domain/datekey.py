from __future__ import annotations

import datetime as dt
from typing import List, Optional
from zoneinfo import ZoneInfo

TZ = ZoneInfo("America/New_York")

KEY_FORMAT = "%Y-%m-%d"
DISPLAY_FORMAT = "%b %d, %Y"


class InvalidDateKeyError(ValueError):
    """Raised when a day identifier cannot be parsed into a calendar day."""


def to_key(d: dt.date) -> str:
    return d.isoformat()


def parse_key(s: str) -> dt.date:
    """Strict YYYY-MM-DD parse. Raises InvalidDateKeyError."""
    raw = str(s or "").strip()
    try:
        return dt.datetime.strptime(raw, KEY_FORMAT).date()
    except ValueError as e:
        raise InvalidDateKeyError(f"invalid date key: {s!r}") from e


def as_day(value) -> dt.date:
    """Accept a date, a datetime or a key string and return the calendar day."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return parse_key(value)


def display_date(d: dt.date) -> str:
    # "Oct 19, 2026" (no zero padding on the day)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def parse_display_date(s: str) -> dt.date:
    raw = str(s or "").strip()
    try:
        return dt.datetime.strptime(raw, DISPLAY_FORMAT).date()
    except ValueError as e:
        raise InvalidDateKeyError(f"invalid display date: {s!r}") from e


def day_of(ts: dt.datetime, tz: Optional[dt.tzinfo] = None) -> dt.date:
    """Calendar day of a timestamp in the app timezone. Naive timestamps are taken as local."""
    zone = tz or TZ
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(zone).date()


def today(tz: Optional[dt.tzinfo] = None, now: Optional[dt.datetime] = None) -> dt.date:
    if now is not None:
        return day_of(now, tz)
    return dt.datetime.now(tz or TZ).date()


def shift_day(d: dt.date, days: int, today_: dt.date, allow_future: bool = False) -> dt.date:
    """
    Move `days` days from d. The result never passes today_ unless allow_future is set
    (date pickers may browse ahead, log navigation may not).
    """
    target = d + dt.timedelta(days=days)
    if not allow_future and target > today_:
        return today_
    return target


def days_back(end: dt.date, days: int) -> List[dt.date]:
    """end, end-1, ... (days entries, newest first)."""
    return [end - dt.timedelta(days=i) for i in range(max(0, int(days)))]
