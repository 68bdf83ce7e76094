"""
Date helpers for follow-up tracking and timeline ordering.
All record dates are canonical "YYYY-MM-DD" strings; "today" is either passed
in explicitly or sampled from the local wall clock on every call.
"""

import math
from datetime import date, datetime, timedelta
from typing import Optional, Union

from dateutil import parser
from loguru import logger


# Offset reported for empty or unreadable dates (treated as far future)
FAR_FUTURE_OFFSET = 999

# 52 weeks spread over 12 months
WEEKS_PER_MONTH = 4.33

DateLike = Union[str, date, None]


def local_today() -> date:
    """Current local calendar date.

    Note: Wrapped so callers can inject a fixed clock in tests.
    """
    return date.today()


def today_str(today: Optional[date] = None) -> str:
    """Canonical string for today (or the given day)."""
    return (today or local_today()).isoformat()


def parse_date(value: DateLike) -> Optional[date]:
    """Parse a date-ish value, returning None when it cannot be read."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    # "YYYY-M-D" with - . or / separators, optionally followed by an ISO time
    head, _, rest = text.replace(" ", "T", 1).partition("T")
    parts = head.replace(".", "-").replace("/", "-").split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    if len(parts[0]) != 4 or len(parts[1]) > 2 or len(parts[2]) > 2:
        return None

    canonical = f"{parts[0]}-{parts[1].zfill(2)}-{parts[2].zfill(2)}"
    try:
        parsed = parser.isoparse(f"{canonical}T{rest}" if rest else canonical)
    except (ValueError, OverflowError):
        return None
    return parsed.date()


def normalize_date(value: DateLike) -> str:
    """
    Convert a date-ish value to canonical "YYYY-MM-DD".

    Args:
        value: date/datetime object, ISO string, or "YYYY-M-D" with - . or /

    Returns:
        Canonical date string, or "" when the value is empty or unreadable
    """
    parsed = parse_date(value)
    if parsed is None:
        if value not in (None, "") and str(value).strip():
            logger.warning(f"Dropping unreadable date value: {value!r}")
        return ""
    return parsed.isoformat()


def day_offset(value: DateLike, today: Optional[date] = None) -> int:
    """
    Whole calendar days from today to the given date (today = 0).

    Args:
        value: Target date
        today: Reference day; sampled from the local clock when omitted

    Returns:
        Day difference, or FAR_FUTURE_OFFSET if the date cannot be read
    """
    target = parse_date(value)
    if target is None:
        return FAR_FUTURE_OFFSET
    reference = today or local_today()
    return (target - reference).days


def relative_label(value: DateLike, today: Optional[date] = None) -> str:
    """Korean relative-day label ("오늘", "3일 전", "2일 후", ...)."""
    if parse_date(value) is None:
        return ""

    diff = day_offset(value, today)
    if diff == 0:
        return "오늘"
    if diff == 1:
        return "내일"
    if diff == -1:
        return "어제"
    if diff < 0:
        return f"{-diff}일 전"
    return f"{diff}일 후"


def month_membership(value: DateLike, reference: Optional[date] = None) -> bool:
    """True when the date falls in the same year and month as reference."""
    target = parse_date(value)
    if target is None:
        return False
    reference = reference or local_today()
    return target.year == reference.year and target.month == reference.month


def previous_month(reference: Optional[date] = None) -> date:
    """First day of the month before reference."""
    reference = reference or local_today()
    return (reference.replace(day=1) - timedelta(days=1)).replace(day=1)


def week_bucket(week_number: int, clamp: bool = False) -> int:
    """
    Approximate month index (0-11) for a 1-based week number.

    Week 53 maps to 12 unless clamp is set; this is the historical
    behaviour and is kept as is.
    """
    index = math.floor((week_number - 1) / WEEKS_PER_MONTH)
    if clamp:
        return min(11, index)
    return index
