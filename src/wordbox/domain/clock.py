"""
Day-granular clock.

All scheduling math works on calendar days (``datetime.date``) in a single
reference time zone. The clock is consulted once per logical operation.
"""

from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import DATE_KEY_FORMAT, DEFAULT_TIMEZONE
from .errors import ValidationError

EPOCH = date(1970, 1, 1)


class Clock(Protocol):
    def today(self) -> date: ...


class SystemClock:
    """Wall clock projected onto calendar days of one time zone."""

    def __init__(self, timezone: str = DEFAULT_TIMEZONE):
        try:
            self.tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValidationError(f"Unknown time zone: {timezone!r}") from e

    def today(self) -> date:
        return datetime.now(self.tz).date()


class FixedClock:
    """Clock pinned to a given day. Used for replays and tests."""

    def __init__(self, day: date):
        self.day = day

    def today(self) -> date:
        return self.day


def date_key(day: date) -> str:
    return day.strftime(DATE_KEY_FORMAT)


def parse_date_key(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` key into a date."""
    try:
        return datetime.strptime(text, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date key: {text!r}") from e


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).days
