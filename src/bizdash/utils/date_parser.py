"""Date, time and timezone parsing utilities."""

import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "last month",
      "this week", "next monday", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative expressions (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)
        elif period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "week":
            return today + timedelta(days=(7 - today.weekday()))
        elif period in WEEKDAYS:
            days_ahead = (WEEKDAYS.index(period) - today.weekday()) % 7 or 7
            return today + timedelta(days=days_ahead)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str, today: Optional[date] = None) -> date:
    """Parse a month ("2024-03", "this month", "last month", any date).

    Returns:
        First day of the month
    """
    match = _MONTH_RE.match(month_str.strip())
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Could not parse month '{month_str}'")
        return date(year, month, 1)
    return parse_date(month_str, today=today).replace(day=1)


def parse_time(time_str: str) -> time:
    """Parse a wall-clock time such as "09:00" or "6:30pm"."""
    try:
        parsed = date_parser.parse(time_str.strip(), default=datetime(2000, 1, 1))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse time '{time_str}': {e}")
    return parsed.time().replace(second=0, microsecond=0)


def parse_datetime(datetime_str: str, zone: tzinfo) -> datetime:
    """Parse a date and time typed in the business timezone.

    Naive input is interpreted as wall-clock time in ``zone``; input that
    carries its own offset keeps it. The result is always timezone-aware.
    """
    try:
        parsed = date_parser.parse(datetime_str.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date and time '{datetime_str}': {e}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Resolve an IANA timezone name, defaulting to UTC when unset.

    "UTC" always resolves to ``tz.UTC``, whether or not tzdata is installed.
    """
    if not name or name.upper() == "UTC":
        return tz.UTC
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone '{name}'")
    return zone
