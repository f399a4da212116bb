"""Expiry status classification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .parser import end_of_day

EXPIRED = "expired"
TODAY = "today"
SOON = "soon"
FRESH = "fresh"

SOON_THRESHOLD_DAYS = 7

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class ExpiryStatus:
    type: str  # expired / today / soon / fresh
    days_left: int  # negative when overdue
    short: str
    text: str

    @property
    def display_type(self) -> str:
        """Style bucket for rendering; "today" shares the "soon" look."""
        return SOON if self.type == TODAY else self.type


def pluralize_days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def days_until(expiry: datetime, now: datetime) -> int:
    """Whole days from the end of ``now``'s day to ``expiry``, rounded up."""
    delta = expiry - end_of_day(now)
    return -((-delta) // _ONE_DAY)


def classify(expiry: datetime, now: datetime) -> ExpiryStatus:
    """Classify an expiry instant relative to ``now``.

    The expired check compares against the actual current instant, while
    the remaining-days count is day-granular. An item expiring at the end
    of today therefore reads "today" until that instant has passed.
    """
    days_left = days_until(expiry, now)

    if expiry < now:
        ago = abs(days_left)
        text = "Expired today" if ago == 0 else f"Expired {pluralize_days(ago)} ago"
        return ExpiryStatus(type=EXPIRED, days_left=days_left, short="Expired", text=text)

    if days_left <= 0:
        return ExpiryStatus(type=TODAY, days_left=0, short="Today", text="Expires today")

    text = f"Expires in {pluralize_days(days_left)}"
    if days_left <= SOON_THRESHOLD_DAYS:
        return ExpiryStatus(type=SOON, days_left=days_left, short="Soon", text=text)
    return ExpiryStatus(type=FRESH, days_left=days_left, short="Fresh", text=text)
