"""Resolve a conversational move target and compute its new placement."""

from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from ..utils.datetime_utils import add_days
from .availability import occupied_intervals_for_date, parse_windows
from .commands import normalize_identifier
from .errors import EntryNotFoundError, NoAvailabilityError
from .models import MoveRequest, ScheduleEntry, Task
from .slots import RESCHEDULE_STEP_MINUTES, find_earliest_slot, has_conflict
from .timeutils import MAX_MINUTE, TimeSlot, parse_interval

logger = logging.getLogger(__name__)

SEARCH_DAYS_BEFORE = 3
SEARCH_DAYS_AFTER = 7
DEFAULT_DURATION_MINUTES = 60

_INTERVAL_LIKE = re.compile(r"^\s*\d{1,2}:\d{2}\s*-\s*\d{1,2}:\d{2}\s*$")

TaskLookup = Callable[[str], Optional[Task]]


@dataclass(frozen=True, slots=True)
class MovePlan:
    """The entry to delete and the entry that replaces it."""

    original: ScheduleEntry
    replacement: ScheduleEntry


def search_dates(target_date: datetime.date) -> list[datetime.date]:
    """Dates searched for a move target, in lookup order."""

    widened = [
        add_days(target_date, offset)
        for offset in range(-SEARCH_DAYS_BEFORE, SEARCH_DAYS_AFTER + 1)
    ]
    return [target_date] + [day for day in widened if day != target_date]


def _ordered(entries: Iterable[ScheduleEntry]) -> list[ScheduleEntry]:
    def key(entry: ScheduleEntry) -> tuple[int, str]:
        slot = entry.slot
        return (slot.start if slot else MAX_MINUTE + 1, entry.interval)

    return sorted(entries, key=key)


def find_entry_by_identifier(
    entries: Sequence[ScheduleEntry], identifier: str
) -> Optional[ScheduleEntry]:
    """Match by exact interval when the identifier looks like one, else by title."""

    ordered = _ordered(entries)
    if _INTERVAL_LIKE.match(identifier):
        wanted = parse_interval(identifier)
        if wanted is not None:
            for entry in ordered:
                if entry.slot == wanted:
                    return entry

    needle = normalize_identifier(identifier).lower()
    if not needle:
        return None
    for entry in ordered:
        if needle in normalize_identifier(entry.task_description or "").lower():
            return entry
    return None


def resolve_entry(
    entries: Sequence[ScheduleEntry], identifier: str, target_date: datetime.date
) -> ScheduleEntry:
    """Find the entry to move, widening from ``target_date`` to nearby days."""

    for day in search_dates(target_date):
        match = find_entry_by_identifier(
            [entry for entry in entries if entry.date == day], identifier
        )
        if match is not None:
            if day != target_date:
                logger.debug("Resolved '%s' on %s instead of %s", identifier, day, target_date)
            return match
    raise EntryNotFoundError(identifier)


def _duration_for(entry: ScheduleEntry, task_lookup: TaskLookup, default: int) -> int:
    if not entry.task_id:
        return default
    task = task_lookup(entry.task_id)
    if task is None or not task.estimated_time or task.estimated_time <= 0:
        return default
    return task.estimated_time


def execute_move(
    request: MoveRequest,
    entries: Sequence[ScheduleEntry],
    availability: Iterable[str],
    task_lookup: TaskLookup,
    *,
    today: datetime.date,
    now_minutes: int,
    today_buffer_minutes: int = 60,
    step: int = RESCHEDULE_STEP_MINUTES,
    default_duration: int = DEFAULT_DURATION_MINUTES,
) -> MovePlan:
    """Compute the replacement for the entry named by ``request``.

    Raises :class:`EntryNotFoundError` when nothing matches within the search
    window and :class:`NoAvailabilityError` when no slot fits on the target
    date. The original entry's own slot is treated as free.
    """

    original = resolve_entry(entries, request.identifier, request.target_date)
    duration = _duration_for(original, task_lookup, default_duration)
    target_date = request.target_date

    min_start = now_minutes + today_buffer_minutes if target_date == today else 0
    others = [entry for entry in entries if entry is not original]
    occupied = occupied_intervals_for_date(target_date, others)
    windows = parse_windows(availability)

    slot: Optional[TimeSlot] = None
    floor = min_start
    if request.target_time_minutes is not None:
        floor = max(min_start, request.target_time_minutes)
        requested = TimeSlot(floor, floor + duration)
        if requested.end <= MAX_MINUTE and not has_conflict(requested, occupied):
            slot = requested

    if slot is None:
        slot = find_earliest_slot(windows, occupied, duration, min_start=floor, step=step)
    if slot is None:
        raise NoAvailabilityError(target_date, duration)

    replacement = ScheduleEntry(
        date=target_date,
        interval=slot.to_interval(),
        task_description=original.task_description,
        task_id=original.task_id,
        is_auto_scheduled=True,
    )
    logger.info(
        "Planned move of '%s' from %s %s to %s %s",
        original.task_description,
        original.date,
        original.interval,
        replacement.date,
        replacement.interval,
    )
    return MovePlan(original=original, replacement=replacement)


__all__ = [
    "MovePlan",
    "search_dates",
    "find_entry_by_identifier",
    "resolve_entry",
    "execute_move",
]
