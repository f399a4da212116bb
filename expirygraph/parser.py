"""Expiry code parsing.

Turns the free-form code printed on a package ("2024-03-05", "05/03/2024",
"03/24", ...) into the last instant of the day it names.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta

ACCEPTED_FORMATS = (
    "YYYY-MM-DD",
    "DD/MM/YYYY",
    "DD-MM-YYYY",
    "YYYYMMDD",
    "MM/YYYY",
    "MM/YY",
)

# Tried in order, first match wins. Group widths (4-2-2 vs 2-2-4) keep the
# two hyphenated forms apart, so the order must not change.
_ISO = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_SLASH_DMY = re.compile(r"([0-9]{2})/([0-9]{2})/([0-9]{4})")
_HYPHEN_DMY = re.compile(r"([0-9]{2})-([0-9]{2})-([0-9]{4})")
_COMPACT = re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})")
_MONTH_YEAR = re.compile(r"([0-9]{2})/([0-9]{4})")
_MONTH_SHORT_YEAR = re.compile(r"([0-9]{2})/([0-9]{2})")


def end_of_day(value: date | datetime) -> datetime:
    """Pin a date to its final instant (23:59:59.999) in local time."""
    return datetime(value.year, value.month, value.day, 23, 59, 59, 999000)


def end_of_month(year: int, month: int) -> datetime:
    """Return the final instant of the last day of ``month``."""
    last_day = calendar.monthrange(year, month)[1]
    return end_of_day(date(year, month, last_day))


def parse_expiry_code(raw: str) -> datetime | None:
    """Parse an expiry code into a day-end ``datetime``.

    Returns ``None`` when the code matches none of ``ACCEPTED_FORMATS`` or
    names a date that does not exist on the calendar.
    """
    text = raw.strip() if raw else ""
    if not text:
        return None

    if m := _ISO.fullmatch(text):
        return _full_date(m[1], m[2], m[3])
    if m := _SLASH_DMY.fullmatch(text):
        return _full_date(m[3], m[2], m[1])
    if m := _HYPHEN_DMY.fullmatch(text):
        return _full_date(m[3], m[2], m[1])
    if m := _COMPACT.fullmatch(text):
        return _full_date(m[1], m[2], m[3])
    if m := _MONTH_YEAR.fullmatch(text):
        return _month_end(m[2], m[1])
    if m := _MONTH_SHORT_YEAR.fullmatch(text):
        return _month_end(f"20{m[2]}", m[1])
    return None


def _full_date(year: str, month: str, day: str) -> datetime | None:
    y, m, d = int(year), int(month), int(day)
    if not 1 <= m <= 12:
        return None
    try:
        # Normalize like a calendar would (day overflow rolls into the next
        # month) and keep the result only if it reads back unchanged.
        normalized = date(y, m, 1) + timedelta(days=d - 1)
    except (ValueError, OverflowError):
        return None
    if (normalized.year, normalized.month, normalized.day) != (y, m, d):
        return None
    return end_of_day(normalized)


def _month_end(year: str, month: str) -> datetime | None:
    y, m = int(year), int(month)
    if not 1 <= m <= 12:
        return None
    try:
        return end_of_month(y, m)
    except ValueError:
        return None
