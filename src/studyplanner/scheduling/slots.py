"""Earliest-fit slot search inside availability windows."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .timeutils import TimeSlot, overlaps

logger = logging.getLogger(__name__)

BULK_STEP_MINUTES = 30
RESCHEDULE_STEP_MINUTES = 5


def _round_up(value: int, step: int) -> int:
    return -(-value // step) * step


def has_conflict(candidate: TimeSlot, occupied: Sequence[TimeSlot]) -> bool:
    return any(
        overlaps(candidate.start, candidate.end, other.start, other.end)
        for other in occupied
    )


def find_earliest_slot(
    windows: Sequence[TimeSlot],
    occupied: Sequence[TimeSlot],
    duration: int,
    min_start: int = 0,
    step: int = BULK_STEP_MINUTES,
) -> Optional[TimeSlot]:
    """Find the earliest non-conflicting slot of ``duration`` minutes.

    Windows are searched in ``(start, end)`` order. Inside a window the
    candidate start is ``max(window.start, min_start)`` rounded up to a
    multiple of ``step`` and advances by ``step`` until the slot no longer
    fits. Returns None when no window can hold the duration.
    """

    if duration <= 0 or step <= 0:
        return None

    for window in sorted(windows, key=lambda w: (w.start, w.end)):
        start = _round_up(max(window.start, min_start), step)
        while start + duration <= window.end:
            candidate = TimeSlot(start, start + duration)
            if not has_conflict(candidate, occupied):
                return candidate
            start += step

    logger.debug(
        "No %d-minute slot after minute %d in %d window(s)",
        duration,
        min_start,
        len(windows),
    )
    return None


__all__ = [
    "BULK_STEP_MINUTES",
    "RESCHEDULE_STEP_MINUTES",
    "has_conflict",
    "find_earliest_slot",
]
