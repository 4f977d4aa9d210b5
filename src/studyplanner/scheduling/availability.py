"""Standing availability windows and per-date occupancy."""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, Optional

from .models import ScheduleEntry
from .timeutils import TimeSlot, parse_interval

logger = logging.getLogger(__name__)


def normalize_window(text: Optional[str]) -> Optional[str]:
    """Return the canonical form of an availability window, or None."""

    slot = parse_interval(text)
    if slot is None:
        return None
    return slot.to_interval()


def parse_windows(windows: Iterable[str]) -> list[TimeSlot]:
    """Parse the user's recurring windows, skipping malformed ones."""

    parsed: list[TimeSlot] = []
    for raw in windows:
        slot = parse_interval(raw)
        if slot is None:
            logger.warning("Skipping malformed availability window %r", raw)
            continue
        parsed.append(slot)
    return parsed


def occupied_intervals_for_date(
    date: datetime.date, entries: Iterable[ScheduleEntry]
) -> list[TimeSlot]:
    """Return the intervals already claimed on ``date``."""

    occupied: list[TimeSlot] = []
    for entry in entries:
        if entry.date != date:
            continue
        slot = entry.slot
        if slot is None:
            logger.warning(
                "Ignoring schedule entry %s with unparsable interval %r on %s",
                entry.id,
                entry.interval,
                entry.date.isoformat(),
            )
            continue
        occupied.append(slot)
    return occupied


__all__ = ["normalize_window", "parse_windows", "occupied_intervals_for_date"]
