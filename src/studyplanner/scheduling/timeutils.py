"""Clock-time arithmetic on minutes from midnight.

Parsing here is deliberately permissive: values come from hand-typed
preferences and from rows written by older clients, so malformed input
yields ``None`` (or a clamped value) instead of raising.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

MINUTES_PER_DAY = 24 * 60
MAX_MINUTE = MINUTES_PER_DAY - 1

_INTERVAL_SEPARATOR = re.compile(r"\s*-\s*")


@dataclass(frozen=True, slots=True)
class TimeSlot:
    """Half-open interval of minutes from midnight."""

    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    def to_interval(self) -> str:
        """Return the canonical ``HH:MM-HH:MM`` representation."""

        return format_interval(self.start, self.end)


def _to_int(token: str) -> int:
    try:
        return int(token.strip())
    except ValueError:
        return 0


def to_minutes(hhmm: Optional[str]) -> int:
    """Convert ``HH:MM`` to minutes from midnight.

    Hours clamp to ``[0, 23]`` and minutes to ``[0, 59]`` before combining.
    """

    if not hhmm:
        return 0
    parts = hhmm.split(":")
    hour = max(0, min(23, _to_int(parts[0])))
    minute = max(0, min(59, _to_int(parts[1]) if len(parts) > 1 else 0))
    return hour * 60 + minute


def from_minutes(minutes: int) -> str:
    """Convert minutes from midnight to a zero-padded ``HH:MM`` string."""

    clamped = max(0, min(MAX_MINUTE, int(minutes)))
    hour, minute = divmod(clamped, 60)
    return f"{hour:02d}:{minute:02d}"


def format_interval(start: int, end: int) -> str:
    return f"{from_minutes(start)}-{from_minutes(end)}"


def parse_interval(text: Optional[str]) -> Optional[TimeSlot]:
    """Parse ``HH:MM-HH:MM`` or ``HH:MM - HH:MM`` into a :class:`TimeSlot`.

    Returns None when the text does not hold exactly two time tokens or when
    the end is not strictly after the start.
    """

    if not text:
        return None
    tokens = _INTERVAL_SEPARATOR.split(text.strip())
    if len(tokens) != 2 or not all(tokens):
        return None
    start = to_minutes(tokens[0])
    end = to_minutes(tokens[1])
    if end <= start:
        return None
    return TimeSlot(start, end)


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Return True when two half-open intervals share at least one minute."""

    return max(a_start, b_start) < min(a_end, b_end)


__all__ = [
    "MINUTES_PER_DAY",
    "MAX_MINUTE",
    "TimeSlot",
    "to_minutes",
    "from_minutes",
    "format_interval",
    "parse_interval",
    "overlaps",
]
