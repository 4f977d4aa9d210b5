"""Lookups answering "what should I do now" and "what's next"."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .models import ScheduleEntry


class StatusKind(str, Enum):
    CURRENT = "current"
    NEXT = "next"


@dataclass(frozen=True, slots=True)
class StatusHit:
    kind: StatusKind
    entry: ScheduleEntry


def _by_start(entries: Sequence[ScheduleEntry]) -> list[tuple[int, int, ScheduleEntry]]:
    timed = []
    for entry in entries:
        slot = entry.slot
        if slot is None:
            continue
        timed.append((slot.start, slot.end, entry))
    timed.sort(key=lambda item: (item[0], item[1]))
    return timed


def current_or_next(
    entries: Sequence[ScheduleEntry], now_minutes: int
) -> Optional[StatusHit]:
    """Return the entry in progress at ``now_minutes``, else the next one."""

    for start, end, entry in _by_start(entries):
        if start <= now_minutes <= end:
            return StatusHit(StatusKind.CURRENT, entry)
        if now_minutes < start:
            return StatusHit(StatusKind.NEXT, entry)
    return None


def first_entry(entries: Sequence[ScheduleEntry]) -> Optional[ScheduleEntry]:
    timed = _by_start(entries)
    return timed[0][2] if timed else None


def next_entry(
    today_entries: Sequence[ScheduleEntry],
    tomorrow_entries: Sequence[ScheduleEntry],
    now_minutes: int,
) -> Optional[StatusHit]:
    """Next entry later today, else the first one tomorrow.

    An entry in progress right now does not count as "next". Hits from
    tomorrow are returned with ``StatusKind.NEXT`` and a tomorrow-dated entry.
    """

    hit = current_or_next(today_entries, now_minutes)
    if hit is not None and hit.kind is StatusKind.NEXT:
        return hit
    if hit is not None:
        # skip the entry in progress and look for a later one today
        later = [
            entry
            for entry in today_entries
            if entry.slot is not None and entry.slot.start > now_minutes
        ]
        following = first_entry(later)
        if following is not None:
            return StatusHit(StatusKind.NEXT, following)
    tomorrow_first = first_entry(tomorrow_entries)
    if tomorrow_first is not None:
        return StatusHit(StatusKind.NEXT, tomorrow_first)
    return None


__all__ = ["StatusKind", "StatusHit", "current_or_next", "first_entry", "next_entry"]
