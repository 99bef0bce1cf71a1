from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Any

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:$|[T ])")
_COMPACT_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_MONTH_DAY_RE = re.compile(r"^(\d{2})-(\d{2})$")


def parse_calendar_date(value: Any) -> date:
    """
    Parse a calendar date from any of the shapes callers hand us.

    Supports:
      - date / datetime (the time component is dropped)
      - "YYYY-MM-DD", optionally followed by a time part ("2024-07-15T19:10Z")
      - "YYYYMMDD" (provider query format)

    Raises ValueError for anything else, so a bad value never turns into a
    cache key that silently never matches.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, str):
        v = value.strip()
        m = _ISO_DATE_RE.match(v) or _COMPACT_DATE_RE.match(v)
        if m:
            year, month, day = (int(part) for part in m.groups())
            try:
                return date(year, month, day)
            except ValueError as e:
                raise ValueError(f"Invalid calendar date: {value!r}") from e

    raise ValueError(f"Invalid calendar date: {value!r}")


def iso_date(value: Any) -> str:
    """Normalize a date-like value to 'YYYY-MM-DD'."""
    return parse_calendar_date(value).isoformat()


def compact_date(value: Any) -> str:
    """Normalize a date-like value to 'YYYYMMDD'."""
    return parse_calendar_date(value).strftime("%Y%m%d")


def month_day(value: Any) -> str:
    return parse_calendar_date(value).strftime("%m-%d")


def validate_month_day(value: str) -> str:
    """Return `value` if it is a zero-padded 'MM-DD' string, else raise ValueError."""
    m = _MONTH_DAY_RE.match(value) if isinstance(value, str) else None
    if m is None:
        raise ValueError(f"Expected zero-padded MM-DD, got {value!r}")

    month, day = int(m.group(1)), int(m.group(2))
    # Leap year so 02-29 is accepted as a bound.
    try:
        date(2000, month, day)
    except ValueError as e:
        raise ValueError(f"Invalid MM-DD value: {value!r}") from e
    return value


def shift_days(value: Any, days: int) -> date:
    return parse_calendar_date(value) + timedelta(days=days)


def day_difference(a: Any, b: Any) -> int:
    """Signed calendar-day difference a - b."""
    return (parse_calendar_date(a) - parse_calendar_date(b)).days


def cache_key(league: str, value: Any) -> str:
    return f"{league}-{iso_date(value)}"
