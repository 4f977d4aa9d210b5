"""Unified calendar-day arithmetic and date parsing.

Every component that needs "today", "N days from X", or a ``YYYY-MM-DD``
string goes through this module so day boundaries behave the same way
everywhere. Dates are plain local calendar days; nothing here converts
between timezones.
"""

from __future__ import annotations

import datetime
from typing import Iterator, Optional

from dateutil import parser as dateutil_parser


def add_days(day: datetime.date, days: int) -> datetime.date:
    """Return ``day`` shifted by ``days`` calendar days."""

    return day + datetime.timedelta(days=days)


def date_to_string(day: datetime.date) -> str:
    """Render a date as ``YYYY-MM-DD``."""

    return day.isoformat()


def parse_date_string(value: Optional[str]) -> Optional[datetime.date]:
    """Parse a ``YYYY-MM-DD`` string; return None when it is not a real date."""

    if not value:
        return None
    try:
        return datetime.date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_day_first_date(value: Optional[str]) -> Optional[datetime.date]:
    """Parse a ``DD-MM-YYYY`` string; return None when it is not a real date."""

    if not value:
        return None
    try:
        return datetime.datetime.strptime(value.strip(), "%d-%m-%Y").date()
    except ValueError:
        return None


def parse_lenient_datetime(
    value: Optional[str], default: datetime.datetime
) -> Optional[datetime.datetime]:
    """Best-effort parse of free text such as ``friday`` or ``march 3``.

    Missing components are filled from ``default``. Returns None when the text
    holds nothing date-like.
    """

    if not value or not value.strip():
        return None
    try:
        parsed = dateutil_parser.parse(value, default=default, fuzzy=True)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    return parsed


def minutes_of_day(moment: datetime.datetime) -> int:
    """Return minutes elapsed since local midnight."""

    return moment.hour * 60 + moment.minute


def is_weekend(day: datetime.date) -> bool:
    return day.weekday() >= 5


def iter_days(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Yield each calendar day from ``start`` through ``end`` inclusive."""

    current = start
    while current <= end:
        yield current
        current = add_days(current, 1)


__all__ = [
    "add_days",
    "date_to_string",
    "parse_date_string",
    "parse_day_first_date",
    "parse_lenient_datetime",
    "minutes_of_day",
    "is_weekend",
    "iter_days",
]
